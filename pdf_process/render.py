"""
Page rendering with ``pdftocairo``.

* :func:`render_all_pages` - render every page of the document
* :func:`render_pages` - render a chosen set of pages
* :func:`render_single_page` - render one page
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from .config import ToolConfig, get_default_config
from .exceptions import ImageDecodeError
from .info import PdfInfo
from .types import (
    Antialias,
    Crop,
    OutputFormat,
    PageColor,
    Password,
    RenderArea,
    RenderColor,
    Resolution,
    ScaleTo,
)
from .utils import dispatch_ordered, ensure_unlocked, raise_for_failure, run_tool, validate_pages

_LOGGER = logging.getLogger("pdf_process.render")

TOOL_NAME = "pdftocairo"


@dataclass(frozen=True)
class RenderArgs:
    """
    Options forwarded to ``pdftocairo``.

    Attributes:
        resolution: Render resolution, ``pdftocairo`` uses 150 PPI when unset
        scale_to: Scale the output to fit inside these bounds
        crop: Crop area of the rendered page
        render_area: Page box to render
        render_color: Color mode of the page content
        page_color: Page background
        antialias: Antialiasing hint
        password: Password for the PDF
    """

    resolution: Optional[Resolution] = None
    scale_to: Optional[ScaleTo] = None
    crop: Optional[Crop] = None
    render_area: Optional[RenderArea] = None
    render_color: Optional[RenderColor] = None
    page_color: Optional[PageColor] = None
    antialias: Optional[Antialias] = None
    password: Optional[Password] = None

    def set_password(self, password: Password) -> "RenderArgs":
        return replace(self, password=password)

    def build_args(self) -> List[str]:
        out: List[str] = []
        for option in (
            self.resolution,
            self.scale_to,
            self.crop,
            self.render_area,
            self.render_color,
            self.page_color,
            self.antialias,
            self.password,
        ):
            if option is not None:
                out.extend(option.to_args())
        return out


def _decode_image(payload: bytes, format: OutputFormat) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(payload), formats=[format.pil_format])
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"failed to decode {format.value} output: {exc}") from exc
    return image


async def render_page(
    data: bytes,
    page: int,
    format: OutputFormat = OutputFormat.JPEG,
    args: Optional[RenderArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
) -> Image.Image:
    """Render *page* without validating it against the document.

    Prefer :func:`render_single_page`, which checks encryption and bounds first.
    """

    args = args or RenderArgs()
    config = config or get_default_config()

    cli_args = ["-", "-", "-singlefile", "-f", str(page), "-l", str(page)]
    cli_args.extend(args.build_args())
    cli_args.extend(format.to_args())

    output = await run_tool(config.pdftocairo, cli_args, data)
    raise_for_failure(TOOL_NAME, output, password_supplied=args.password is not None)
    return _decode_image(output.stdout, format)


async def render_single_page(
    data: bytes,
    info: PdfInfo,
    page: int,
    format: OutputFormat = OutputFormat.JPEG,
    args: Optional[RenderArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
) -> Image.Image:
    """
    Render a single page of a PDF.

    Args:
        data: The raw PDF file bytes
        info: PDF info used for the page count and encryption state
        page: 1-based page number to render
        format: Image format produced by ``pdftocairo``
        args: Extra options for ``pdftocairo``
        config: Executable locations, defaults to the environment config
    """

    args = args or RenderArgs()
    ensure_unlocked(info, args.password)
    validate_pages(info, [page])
    return await render_page(data, page, format, args, config=config)


async def render_pages(
    data: bytes,
    info: PdfInfo,
    pages: Sequence[int],
    format: OutputFormat = OutputFormat.JPEG,
    args: Optional[RenderArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
    max_concurrency: Optional[int] = None,
) -> List[Image.Image]:
    """
    Render the given pages in parallel, one ``pdftocairo`` process per page.

    Images are returned in the order of *pages*. All pages are validated
    before any process is started; the first failing page aborts the rest.

    Args:
        data: The raw PDF file bytes
        info: PDF info used for the page count and encryption state
        pages: 1-based page numbers to render
        format: Image format produced by ``pdftocairo``
        args: Extra options for ``pdftocairo``
        config: Executable locations, defaults to the environment config
        max_concurrency: Upper bound on simultaneous processes, unbounded when ``None``
    """

    args = args or RenderArgs()
    pages = list(pages)
    ensure_unlocked(info, args.password)
    validate_pages(info, pages)
    config = config or get_default_config()

    _LOGGER.debug("Rendering %d page(s) as %s", len(pages), format.value)

    async def _render(page: int) -> Image.Image:
        return await render_page(data, page, format, args, config=config)

    return await dispatch_ordered(_render, pages, max_concurrency=max_concurrency)


async def render_all_pages(
    data: bytes,
    info: PdfInfo,
    format: OutputFormat = OutputFormat.JPEG,
    args: Optional[RenderArgs] = None,
    *,
    config: Optional[ToolConfig] = None,
    max_concurrency: Optional[int] = None,
) -> List[Image.Image]:
    """Render every page of the document in parallel, in page order."""

    args = args or RenderArgs()
    ensure_unlocked(info, args.password)
    page_count = info.require_page_count()
    return await render_pages(
        data,
        info,
        range(1, page_count + 1),
        format,
        args,
        config=config,
        max_concurrency=max_concurrency,
    )


__all__ = [
    "RenderArgs",
    "render_page",
    "render_single_page",
    "render_pages",
    "render_all_pages",
]
