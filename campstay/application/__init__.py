"""
Application layer - campsite booking core.

Use cases orchestrate the domain rules and talk to infrastructure through ports.

Layout:
- use_cases/: one class per exposed operation
- interfaces/: ports implemented by the infrastructure adapters
"""
