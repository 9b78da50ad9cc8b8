"""Exceptions for the store reconciliation layer."""


class StoreError(Exception):
    """Base exception for store errors."""

    error_type = "store_error"
    status_code = 500


class SourceUnavailable(StoreError):
    """A backend request failed, timed out, or answered with a non-2xx status."""

    error_type = "source_unavailable"
    status_code = 502

    def __init__(self, source: str, reason: str, http_status: int | None = None):
        self.source = source
        self.reason = reason
        self.http_status = http_status
        super().__init__(f"{source} API: {reason}")


class MalformedPayload(StoreError):
    """A backend answered 2xx with a body that is not JSON."""

    error_type = "malformed_payload"
    status_code = 502

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source} API: invalid JSON ({reason})")


class ReadOnlyViolation(StoreError):
    """Raised when a mutation targets a seed-range identifier."""

    error_type = "read_only"
    status_code = 403

    def __init__(self, identifier, resource: str = "record", action: str = "edited", threshold: int = 80):
        self.identifier = identifier
        self.resource = resource
        self.action = action
        super().__init__(
            f"{resource.capitalize()} {identifier} is read-only (seed data). "
            f"Only {resource}s {threshold}+ can be {action}."
        )


class AllTargetsFailed(StoreError):
    """Every backend targeted by a mutation rejected it."""

    error_type = "all_targets_failed"
    status_code = 502

    def __init__(self, action: str, subject: str, failures: dict[str, str]):
        self.action = action
        self.subject = subject
        self.failures = dict(failures)
        reasons = ", ".join(f"{label} API: {reason}" for label, reason in self.failures.items())
        super().__init__(f"Failed to {action} {subject}: {reasons}")


class RecordNotFound(StoreError):
    """Record absent from every consulted source."""

    error_type = "not_found"
    status_code = 404

    def __init__(self, resource: str, identifier, reasons=()):
        self.resource = resource
        self.identifier = identifier
        self.reasons = list(reasons)
        message = f"{resource.capitalize()} with ID {identifier} not found"
        if self.reasons:
            message = f"{message}: {', '.join(self.reasons)}"
        super().__init__(message)


class ValidationFailed(StoreError):
    """Input rejected before reaching any backend."""

    error_type = "validation"
    status_code = 400

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))
