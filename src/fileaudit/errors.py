"""Exception types shared by the scanner, the verifier and the engine."""

__all__ = [
    "FileAuditError",
    "StreamReadError",
    "ManifestDecodeError",
    "DigestDecodeError",
]


class FileAuditError(Exception):
    """Base class for fileaudit errors."""


class StreamReadError(FileAuditError):
    """Raised when the duplicate scanner's input cannot be opened or read."""

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize stream read error.

        Parameters
        ----------
        message : str
            Error message.
        source : str | None, optional
            Path or name of the stream that failed.
        """
        super().__init__(message)
        self.source = source


class ManifestDecodeError(FileAuditError):
    """Raised when a checksum manifest is not a valid path-to-digest mapping."""

    def __init__(self, message: str, file: str | None = None) -> None:
        """Initialize manifest decode error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            Manifest file the error refers to.
        """
        super().__init__(message)
        self.file = file


class DigestDecodeError(FileAuditError, ValueError):
    """Raised when an expected digest is not valid SHA-256 hex."""
