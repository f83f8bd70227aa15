"""Domain errors raised by prediction set operations."""


class PredictionError(Exception):
    """Base error for business rule failures."""

    kind = "error"
    status_code = 400
    default_message = "Prediction error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PredictionError):
    """Missing or malformed input."""

    kind = "validation_error"
    default_message = "Validation error"


class NotFoundError(PredictionError):
    """Prediction set or constituency prediction not found."""

    kind = "not_found"
    status_code = 404
    default_message = "Prediction not found"


class ConflictError(PredictionError):
    """A prediction set already exists for the unique key."""

    kind = "conflict"
    status_code = 409
    default_message = "Prediction already exists for this election. Use update instead."


class LockedRecordError(PredictionError):
    kind = "locked_record"
    default_message = "Prediction is locked"


class AlreadyLockedError(PredictionError):
    kind = "already_locked"
    default_message = "Already locked"


class AlreadySubmittedError(PredictionError):
    kind = "already_submitted"
    default_message = "Prediction is already submitted"


class InsufficientRecordsError(PredictionError):
    kind = "insufficient_records"
    default_message = "Not enough constituency predictions to submit"


class UnauthorizedError(PredictionError):
    """Caller does not own the prediction set."""

    kind = "unauthorized"
    status_code = 403
    default_message = "Access denied to private prediction"


class NoOpError(PredictionError):
    kind = "no_op"
    default_message = "No unlocked predictions to reset"
