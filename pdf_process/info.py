"""
Document information extracted with ``pdfinfo``.

* :func:`pdf_info` - run ``pdfinfo`` over PDF bytes
* :func:`parse_pdf_info` - parse ``pdfinfo`` output into a :class:`PdfInfo`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from .config import ToolConfig, get_default_config
from .exceptions import (
    InvalidPageCountError,
    MalformedEncryptionOptionsError,
    PageCountUnknownError,
)
from .types import Password
from .utils import raise_for_failure, run_tool

_LOGGER = logging.getLogger("pdf_process.info")

TOOL_NAME = "pdfinfo"


def parse_bool(value: str) -> bool:
    return value == "yes"


@dataclass(frozen=True)
class PdfInfoEncryption:
    """Encryption state and permission flags of a document.

    A document may be encrypted and still be readable without a password; the
    permission flags describe what the viewer is allowed to do with it.
    """

    encrypted: bool
    options: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_encrypted(self) -> bool:
        return self.encrypted

    def _allowed(self, key: str) -> bool:
        value = self.options.get(key)
        if value is None:
            return True
        return parse_bool(value)

    @property
    def is_print_allowed(self) -> bool:
        return self._allowed("print")

    @property
    def is_copy_allowed(self) -> bool:
        return self._allowed("copy")

    @property
    def is_change_allowed(self) -> bool:
        return self._allowed("change")

    @property
    def is_add_notes_allowed(self) -> bool:
        return self._allowed("addNotes")

    @property
    def algorithm(self) -> Optional[str]:
        return self.options.get("algorithm")


def parse_encryption(value: str) -> PdfInfoEncryption:
    """Parse the raw ``Encrypted`` field.

    Example input: ``yes (print:yes copy:no change:no addNotes:no algorithm:AES-256)``
    """

    state, _, remainder = value.strip().partition(" ")
    encrypted = parse_bool(state)
    remainder = remainder.strip()
    if not remainder:
        return PdfInfoEncryption(encrypted=encrypted)

    if not (remainder.startswith("(") and remainder.endswith(")")):
        raise MalformedEncryptionOptionsError(
            f"Encryption options are malformed: {value!r}"
        )

    options: Dict[str, str] = {}
    for part in remainder[1:-1].split():
        key, sep, option = part.partition(":")
        if not sep:
            continue
        options[key] = option.lstrip()

    return PdfInfoEncryption(encrypted=encrypted, options=options)


class PdfInfo:
    """Read-only view over the fields reported by ``pdfinfo``.

    Raw values are kept as strings; the typed accessors derive counts,
    booleans and strings on demand. Fields missing from the output yield
    ``None``.
    """

    def __init__(self, data: Mapping[str, str]) -> None:
        self._data: Mapping[str, str] = MappingProxyType(dict(data))
        self._encryption_cache: Optional[PdfInfoEncryption] = None

    # ------------------------------------------------------------------
    # Mapping helpers
    # ------------------------------------------------------------------
    @property
    def data(self) -> Mapping[str, str]:
        return self._data

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _flag(self, key: str) -> Optional[bool]:
        value = self._data.get(key)
        return None if value is None else parse_bool(value)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PdfInfo(pages={self.get('Pages')!r}, title={self.title!r})"

    # ------------------------------------------------------------------
    # Page count
    # ------------------------------------------------------------------
    @property
    def pages(self) -> Optional[int]:
        value = self._data.get("Pages")
        if value is None:
            return None
        try:
            pages = int(value.strip())
        except ValueError as exc:
            raise InvalidPageCountError(f"invalid page count: {value!r}") from exc
        if pages < 0:
            raise InvalidPageCountError(f"invalid page count: {value!r}")
        return pages

    def require_page_count(self) -> int:
        """Return the page count or raise :class:`PageCountUnknownError`."""
        try:
            pages = self.pages
        except InvalidPageCountError as exc:
            raise PageCountUnknownError() from exc
        if pages is None:
            raise PageCountUnknownError()
        return pages

    # ------------------------------------------------------------------
    # Document metadata
    # ------------------------------------------------------------------
    @property
    def title(self) -> Optional[str]:
        return self.get("Title")

    @property
    def subject(self) -> Optional[str]:
        return self.get("Subject")

    @property
    def keywords(self) -> Optional[str]:
        return self.get("Keywords")

    @property
    def author(self) -> Optional[str]:
        return self.get("Author")

    @property
    def creator(self) -> Optional[str]:
        return self.get("Creator")

    @property
    def producer(self) -> Optional[str]:
        return self.get("Producer")

    @property
    def creation_date(self) -> Optional[str]:
        return self.get("CreationDate")

    @property
    def mod_date(self) -> Optional[str]:
        return self.get("ModDate")

    @property
    def custom_metadata(self) -> Optional[bool]:
        return self._flag("Custom Metadata")

    @property
    def metadata_stream(self) -> Optional[bool]:
        return self._flag("Metadata Stream")

    @property
    def tagged(self) -> Optional[bool]:
        return self._flag("Tagged")

    @property
    def user_properties(self) -> Optional[bool]:
        return self._flag("UserProperties")

    @property
    def suspects(self) -> Optional[bool]:
        return self._flag("Suspects")

    @property
    def form(self) -> Optional[str]:
        return self.get("Form")

    @property
    def javascript(self) -> Optional[bool]:
        return self._flag("JavaScript")

    @property
    def page_size(self) -> Optional[str]:
        return self.get("Page size")

    @property
    def page_rot(self) -> Optional[str]:
        return self.get("Page rot")

    @property
    def file_size(self) -> Optional[str]:
        return self.get("File size")

    @property
    def optimized(self) -> Optional[bool]:
        return self._flag("Optimized")

    @property
    def pdf_version(self) -> Optional[str]:
        return self.get("PDF version")

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------
    @property
    def encrypted(self) -> Optional[bool]:
        value = self.get("Encrypted")
        return None if value is None else value.startswith("yes")

    @property
    def encryption_raw(self) -> Optional[str]:
        return self.get("Encrypted")

    @property
    def encryption(self) -> Optional[PdfInfoEncryption]:
        """Encryption details, parsed on first access."""
        if self._encryption_cache is None:
            raw = self.encryption_raw
            if raw is None:
                return None
            self._encryption_cache = parse_encryption(raw)
        return self._encryption_cache


def parse_pdf_info(output: str) -> PdfInfo:
    """Parse the ``Key: Value`` lines printed by ``pdfinfo``."""

    data: Dict[str, str] = {}
    # Metadata values may contain form feeds or Unicode separators, so only
    # newlines end a field.
    for line in output.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        key, sep, value = line.partition(":")
        if not sep:
            continue
        data[key.strip()] = value.lstrip()
    return PdfInfo(data)


@dataclass(frozen=True)
class PdfInfoArgs:
    """Options forwarded to ``pdfinfo``."""

    password: Optional[Password] = None

    def set_password(self, password: Password) -> "PdfInfoArgs":
        return replace(self, password=password)

    def build_args(self) -> List[str]:
        out: List[str] = []
        if self.password is not None:
            out.extend(self.password.to_args())
        return out


async def pdf_info(
    data: bytes,
    args: Optional[PdfInfoArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
) -> PdfInfo:
    """
    Extract information about the PDF in *data*.

    Args:
        data: The raw PDF file bytes
        args: Extra options for ``pdfinfo``
        config: Executable locations, defaults to the environment config

    Returns:
        Parsed :class:`PdfInfo`
    """

    args = args or PdfInfoArgs()
    config = config or get_default_config()

    output = await run_tool(config.pdfinfo, ["-", *args.build_args()], data)
    raise_for_failure(TOOL_NAME, output, password_supplied=args.password is not None)

    info = parse_pdf_info(output.stdout_text)
    _LOGGER.debug("Parsed %d pdfinfo fields", len(info))
    return info


__all__ = [
    "PdfInfo",
    "PdfInfoArgs",
    "PdfInfoEncryption",
    "parse_encryption",
    "parse_pdf_info",
    "pdf_info",
]
