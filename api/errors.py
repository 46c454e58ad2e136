class EpochGuardError(Exception):
    """Base class for every error raised by the dashboard engine."""


class InvalidFileError(EpochGuardError):
    """Selected file is not a CSV; no analysis is attempted."""


class CSVParseError(EpochGuardError):
    """CSV could not be read or holds no usable rows."""


class RemoteUnavailableError(EpochGuardError):
    """Backend unreachable, timed out, or answered with an unusable body."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"{endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason
