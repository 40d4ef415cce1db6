from campstay.infrastructure.messaging.status_sweep_worker import StatusSweepWorker

__all__ = ["StatusSweepWorker"]
