"""Error taxonomy for the access and configuration caches."""


class ClinicAccessError(Exception):
    """Base class for errors raised by this package."""


class StoreUnavailable(ClinicAccessError):
    """The relational store could not be read or written."""

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        message = f"Store unavailable during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class MalformedValue(ClinicAccessError, ValueError):
    """A stored setting cannot be parsed as the requested type.

    Raised by the value parsers only; the settings cache always catches it
    and falls back to the caller's default.
    """

    def __init__(self, key: str, raw, expected: str):
        self.key = key
        self.raw = raw
        self.expected = expected
        super().__init__(f"Setting {key!r} value {raw!r} is not a valid {expected}")


class UnknownAccessName(ClinicAccessError, ValueError):
    """A write named a role or module outside the fixed enumerations."""

    def __init__(self, what: str, value, allowed):
        self.what = what
        self.value = value
        super().__init__(f"Unknown {what} '{value}'. Expected one of: {', '.join(allowed)}")
