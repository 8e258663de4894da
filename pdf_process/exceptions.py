"""
Custom exceptions for pdf-process.

Every failure raised by the library derives from :class:`PdfProcessError`.
Failures reported by the poppler tools themselves are classified from their
stderr output (see :func:`pdf_process.utils.classify_failure`) so callers can
catch a precise type instead of matching strings.
"""

from __future__ import annotations

from typing import Optional


class PdfProcessError(Exception):
    """Base exception for all pdf-process errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown pdf-process error occurred."


class ProcessError(PdfProcessError):
    """Raised when talking to a child process fails outside of the tool itself."""

    @property
    def default_message(self) -> str:
        return "Failed to communicate with the external tool."


class SpawnProcessError(ProcessError):
    """Raised when the external executable cannot be started."""

    @property
    def default_message(self) -> str:
        return "Failed to spawn the external tool."


class ProcessIOError(ProcessError):
    """Raised when piping the PDF bytes or collecting the output fails."""

    @property
    def default_message(self) -> str:
        return "Failed to exchange data with the external tool."


class ToolFailureError(PdfProcessError):
    """Raised when a tool exits unsuccessfully for an unrecognised reason."""

    def __init__(
        self,
        tool: str,
        stderr: str = "",
        returncode: Optional[int] = None,
        message: str = "",
    ) -> None:
        self.tool = tool
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message or f"{tool} failed (exit code {returncode}): {stderr.strip()}")


class PermissionDeniedError(ToolFailureError):
    """Raised when a tool reports a PDF permission error (exit code 3)."""

    def __init__(
        self,
        tool: str,
        stderr: str = "",
        returncode: Optional[int] = None,
    ) -> None:
        super().__init__(
            tool,
            stderr,
            returncode,
            message=f"{tool} reported permission error: {stderr.strip()}",
        )


class NotPdfFileError(PdfProcessError):
    """Raised when the input bytes are not a PDF document."""

    @property
    def default_message(self) -> str:
        return "File is not a PDF."


class PdfEncryptedError(PdfProcessError):
    """Raised when the PDF is encrypted and no password was provided."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted and no password was provided."


class IncorrectPasswordError(PdfProcessError):
    """Raised when the supplied password does not open the PDF."""

    @property
    def default_message(self) -> str:
        return "Incorrect password was provided."


class PageOutOfBoundsError(PdfProcessError):
    """Raised when a requested page number falls outside the document."""

    def __init__(self, page: int, page_count: int) -> None:
        self.page = page
        self.page_count = page_count
        super().__init__(
            f"page {page} is outside the number of available pages {page_count}"
        )


class PageCountUnknownError(PdfProcessError):
    """Raised when the document info carries no usable page count."""

    @property
    def default_message(self) -> str:
        return "Page count is missing or invalid, PDF likely invalid."


class InvalidPageCountError(PdfProcessError, ValueError):
    """Raised when the ``Pages`` field of the info output is not an integer."""

    @property
    def default_message(self) -> str:
        return "Invalid page count."


class MalformedEncryptionOptionsError(PdfProcessError, ValueError):
    """Raised when the ``Encrypted`` field cannot be parsed."""

    @property
    def default_message(self) -> str:
        return "Encryption options are malformed."


class ImageDecodeError(PdfProcessError):
    """Raised when rasterizer output cannot be decoded into an image."""

    @property
    def default_message(self) -> str:
        return "Failed to decode the rendered page image."


class InvalidPageSpecError(PdfProcessError, ValueError):
    """Raised when a page specification string cannot be parsed."""

    @property
    def default_message(self) -> str:
        return "Invalid page specification."


__all__ = [
    "PdfProcessError",
    "ProcessError",
    "SpawnProcessError",
    "ProcessIOError",
    "ToolFailureError",
    "PermissionDeniedError",
    "NotPdfFileError",
    "PdfEncryptedError",
    "IncorrectPasswordError",
    "PageOutOfBoundsError",
    "PageCountUnknownError",
    "InvalidPageCountError",
    "MalformedEncryptionOptionsError",
    "ImageDecodeError",
    "InvalidPageSpecError",
]
