"""
pdf-process - Render and extract metadata/text from PDF files using poppler.

The heavy lifting is delegated to the poppler command-line tools
(``pdfinfo``, ``pdftocairo`` and ``pdftotext``). PDF bytes are piped to the
tools, options are turned into flags and the output is parsed into Python
objects.

Quick Start:
    >>> import asyncio
    >>> from pdf_process import pdf_info, render_all_pages, OutputFormat
    >>> data = open('input.pdf', 'rb').read()
    >>> info = asyncio.run(pdf_info(data))
    >>> images = asyncio.run(render_all_pages(data, info, OutputFormat.PNG))

Operations:
    - pdf_info: Document metadata
    - render_single_page / render_pages / render_all_pages: Page images
    - text_single_page / text_pages / text_all_pages / text_all_pages_split: Page text

Exceptions:
    - PdfProcessError: Base exception
    - NotPdfFileError: Input is not a PDF
    - PdfEncryptedError: Encrypted PDF without a password
    - IncorrectPasswordError: Wrong password supplied
    - PageOutOfBoundsError: Page number out of bounds

For CLI usage, use the 'pdf-process' command after installation.
"""

# Configuration
from pdf_process.config import ToolConfig, get_default_config

# Value objects
from pdf_process.types import (
    Antialias,
    Crop,
    OutputFormat,
    PageColor,
    Password,
    PasswordKind,
    RenderArea,
    RenderColor,
    Resolution,
    ScaleTo,
    Secret,
)

# Exceptions
from pdf_process.exceptions import (
    ImageDecodeError,
    IncorrectPasswordError,
    InvalidPageCountError,
    InvalidPageSpecError,
    MalformedEncryptionOptionsError,
    NotPdfFileError,
    PageCountUnknownError,
    PageOutOfBoundsError,
    PdfEncryptedError,
    PdfProcessError,
    PermissionDeniedError,
    ProcessError,
    ProcessIOError,
    SpawnProcessError,
    ToolFailureError,
)

# Operations
from pdf_process.info import PdfInfo, PdfInfoArgs, PdfInfoEncryption, parse_pdf_info, pdf_info
from pdf_process.render import (
    RenderArgs,
    render_all_pages,
    render_page,
    render_pages,
    render_single_page,
)
from pdf_process.text import (
    PAGE_END_CHARACTER,
    PdfTextArgs,
    join_page_texts,
    page_text,
    text_all_pages,
    text_all_pages_split,
    text_pages,
    text_single_page,
)
from pdf_process.utils import FailureKind, classify_failure

__version__ = "0.2.0"
__license__ = "MIT"

__all__ = [
    # Configuration
    "ToolConfig",
    "get_default_config",
    # Value objects
    "Antialias",
    "Crop",
    "OutputFormat",
    "PageColor",
    "Password",
    "PasswordKind",
    "RenderArea",
    "RenderColor",
    "Resolution",
    "ScaleTo",
    "Secret",
    # Exceptions
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
    "FailureKind",
    "classify_failure",
    # Info
    "PdfInfo",
    "PdfInfoArgs",
    "PdfInfoEncryption",
    "parse_pdf_info",
    "pdf_info",
    # Rendering
    "RenderArgs",
    "render_page",
    "render_single_page",
    "render_pages",
    "render_all_pages",
    # Text
    "PAGE_END_CHARACTER",
    "PdfTextArgs",
    "join_page_texts",
    "page_text",
    "text_single_page",
    "text_pages",
    "text_all_pages",
    "text_all_pages_split",
    # Version info
    "__version__",
]
