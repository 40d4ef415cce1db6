"""Domain exceptions for the campsite booking core."""


class DomainError(Exception):
    """Base class for every domain error."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Validation ===


class ValidationError(DomainError):
    """Bad or missing input."""

    def __init__(self, field: str, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message=f"Validation failed on '{field}': {message}", code=code)
        self.field = field


class InvalidDateRangeError(ValidationError):
    """Malformed or past-dated stay."""

    def __init__(self, message: str):
        super().__init__(field="date_range", message=message, code="INVALID_DATE_RANGE")


class PriceMismatchError(ValidationError):
    """Client-supplied total differs from the server-side quote."""

    def __init__(self, client_total, computed_total):
        super().__init__(
            field="total_price",
            message=f"client total {client_total} does not match computed total {computed_total}",
            code="PRICE_MISMATCH",
        )
        self.client_total = client_total
        self.computed_total = computed_total


# === Authorization ===


class AuthorizationError(DomainError):
    """The requesting user is not allowed to act on the entity."""

    def __init__(self, message: str, code: str = "AUTHORIZATION_ERROR"):
        super().__init__(message=message, code=code)


class SelfBookingForbiddenError(AuthorizationError):
    def __init__(self, resource_id: int):
        super().__init__(
            message=f"Owners cannot book their own resource {resource_id}",
            code="SELF_BOOKING_FORBIDDEN",
        )
        self.resource_id = resource_id


# === Not found ===


class NotFoundError(DomainError):
    """Base class for unknown entities."""


class ResourceNotFoundError(NotFoundError):
    def __init__(self, resource_id: int):
        super().__init__(message=f"Resource not found: {resource_id}", code="RESOURCE_NOT_FOUND")
        self.resource_id = resource_id


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id: int):
        super().__init__(message=f"Booking not found: {booking_id}", code="BOOKING_NOT_FOUND")
        self.booking_id = booking_id


class UnavailabilityNotFoundError(NotFoundError):
    def __init__(self, resource_id: int, window_id: int):
        super().__init__(
            message=f"Unavailability window {window_id} not found for resource {resource_id}",
            code="UNAVAILABILITY_NOT_FOUND",
        )
        self.resource_id = resource_id
        self.window_id = window_id


# === Conflicts ===


class ConflictError(DomainError):
    """The request collides with current state."""

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message=message, code=code)


class BookingConflictError(ConflictError):
    """The requested stay overlaps a booking or a blackout window."""

    def __init__(self, resource_id: int, start_date, end_date):
        super().__init__(
            message=f"Resource {resource_id} is not available from {start_date} to {end_date}",
            code="BOOKING_CONFLICT",
        )
        self.resource_id = resource_id
        self.start_date = start_date
        self.end_date = end_date


class AlreadyFinalizedError(DomainError):
    """The booking is already completed or cancelled."""

    def __init__(self, booking_id: int, current_status: str | None = None):
        detail = f" (status '{current_status}')" if current_status else ""
        super().__init__(
            message=f"Booking {booking_id} is already finalized{detail}",
            code="ALREADY_FINALIZED",
        )
        self.booking_id = booking_id
        self.current_status = current_status


# === External services ===


class ExternalServiceError(DomainError):
    """Payment gateway call failed; the caller may retry."""

    def __init__(self, service: str, message: str):
        super().__init__(message=f"{service} error: {message}", code="EXTERNAL_SERVICE_ERROR")
        self.service = service


class WebhookVerificationError(DomainError):
    """Webhook payload could not be authenticated."""

    def __init__(self, message: str):
        super().__init__(message=message, code="WEBHOOK_VERIFICATION_FAILED")
