"""
errors.py - Batch Error Types
==============================
Every failure that can stop (or, in continue-on-error mode, skip) a record
is raised as a subclass of BatchError. The processor catches BatchError
once, logs it and reports it in the BatchResult.
"""


class BatchError(Exception):
    """Base class for all errors raised while processing a batch."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputReadError(BatchError):
    """The input spreadsheet is missing or could not be read."""


class EnvelopeError(BatchError):
    """The request envelope built from a record is not well-formed XML."""


class TransportError(BatchError):
    """The SOAP call failed: network error, timeout, auth rejection or non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(BatchError):
    """The response text has no <Body>...</Body> payload to extract."""


class OutputWriteError(BatchError):
    """An output file could not be written, appended to or deleted."""
