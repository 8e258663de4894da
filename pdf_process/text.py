"""
Text extraction with ``pdftotext``.

``pdftotext`` terminates every page with a form feed
(:data:`PAGE_END_CHARACTER`). The whole-document helpers run a single process
and split or replace on that character; the per-page helpers run one process
per page and strip it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from .config import ToolConfig, get_default_config
from .info import PdfInfo
from .types import Password
from .utils import dispatch_ordered, ensure_unlocked, raise_for_failure, run_tool, validate_pages

_LOGGER = logging.getLogger("pdf_process.text")

TOOL_NAME = "pdftotext"

PAGE_END_CHARACTER = "\f"


@dataclass(frozen=True)
class PdfTextArgs:
    """Options forwarded to ``pdftotext``."""

    password: Optional[Password] = None

    def set_password(self, password: Password) -> "PdfTextArgs":
        return replace(self, password=password)

    def build_args(self) -> List[str]:
        out: List[str] = []
        if self.password is not None:
            out.extend(self.password.to_args())
        return out


def join_page_texts(pages: Iterable[str]) -> str:
    """Join per-page texts the same way :func:`text_all_pages` renders page breaks."""

    return "".join(f"{page}\n" for page in pages)


async def _document_text(data: bytes, args: PdfTextArgs, config: Optional[ToolConfig]) -> str:
    config = config or get_default_config()
    output = await run_tool(config.pdftotext, ["-", "-", *args.build_args()], data)
    raise_for_failure(TOOL_NAME, output, password_supplied=args.password is not None)
    return output.stdout_text


async def page_text(
    data: bytes,
    page: int,
    args: Optional[PdfTextArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
) -> str:
    """Extract the text of *page* without validating it against the document."""

    args = args or PdfTextArgs()
    config = config or get_default_config()

    cli_args = ["-", "-", "-f", str(page), "-l", str(page), *args.build_args()]
    output = await run_tool(config.pdftotext, cli_args, data)
    raise_for_failure(TOOL_NAME, output, password_supplied=args.password is not None)

    value = output.stdout_text
    if value.endswith(PAGE_END_CHARACTER):
        value = value[:-1]
    return value


async def text_all_pages(
    data: bytes,
    info: PdfInfo,
    args: Optional[PdfTextArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
) -> str:
    """
    Extract the text of every page as one string.

    Page breaks are replaced with a single new line. Use
    :func:`text_all_pages_split` for one string per page.

    Args:
        data: The raw PDF file bytes
        info: PDF info used for the encryption state
        args: Extra options for ``pdftotext``
        config: Executable locations, defaults to the environment config
    """

    args = args or PdfTextArgs()
    ensure_unlocked(info, args.password)
    value = await _document_text(data, args, config)
    return value.replace(PAGE_END_CHARACTER, "\n")


async def text_all_pages_split(
    data: bytes,
    info: PdfInfo,
    args: Optional[PdfTextArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
) -> List[str]:
    """
    Extract the text of every page as a list, split on :data:`PAGE_END_CHARACTER`.

    The output of ``pdftotext`` ends with a page break, so the last element
    is the (usually empty) text following it.
    """

    args = args or PdfTextArgs()
    ensure_unlocked(info, args.password)
    value = await _document_text(data, args, config)
    return value.split(PAGE_END_CHARACTER)


async def text_pages(
    data: bytes,
    info: PdfInfo,
    pages: Sequence[int],
    args: Optional[PdfTextArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
    max_concurrency: Optional[int] = None,
) -> List[str]:
    """
    Extract the text of the given pages in parallel, one process per page.

    Args:
        data: The raw PDF file bytes
        info: PDF info used for the page count and encryption state
        pages: 1-based page numbers to extract
        args: Extra options for ``pdftotext``
        config: Executable locations, defaults to the environment config
        max_concurrency: Upper bound on simultaneous processes, unbounded when ``None``

    Returns:
        One string per requested page, in the order of *pages*
    """

    args = args or PdfTextArgs()
    pages = list(pages)
    ensure_unlocked(info, args.password)
    validate_pages(info, pages)
    config = config or get_default_config()

    _LOGGER.debug("Extracting text from %d page(s)", len(pages))

    async def _extract(page: int) -> str:
        return await page_text(data, page, args, config=config)

    return await dispatch_ordered(_extract, pages, max_concurrency=max_concurrency)


async def text_single_page(
    data: bytes,
    info: PdfInfo,
    page: int,
    args: Optional[PdfTextArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
) -> str:
    """Extract the text of one page after checking encryption and bounds."""

    args = args or PdfTextArgs()
    ensure_unlocked(info, args.password)
    validate_pages(info, [page])
    return await page_text(data, page, args, config=config)


__all__ = [
    "PAGE_END_CHARACTER",
    "PdfTextArgs",
    "join_page_texts",
    "page_text",
    "text_all_pages",
    "text_all_pages_split",
    "text_pages",
    "text_single_page",
]
