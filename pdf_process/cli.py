"""
Command-line interface for pdf-process.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pdf_process import __version__
from pdf_process.exceptions import PdfProcessError
from pdf_process.info import PdfInfoArgs, pdf_info
from pdf_process.render import RenderArgs, render_pages
from pdf_process.text import PdfTextArgs, join_page_texts, text_all_pages, text_pages
from pdf_process.types import (
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
from pdf_process.utils import format_file_size, parse_page_spec, read_pdf_bytes

console = Console()
error_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, markup=False)],
        force=True,
    )


def _fail(message: object) -> None:
    error_console.print(f"\n[bold red]✗ Error:[/bold red] {message}")
    sys.exit(1)


def _password(user_password, owner_password):
    if user_password and owner_password:
        raise click.UsageError("Use either --password or --owner-password, not both")
    if owner_password:
        return Password.owner(owner_password)
    if user_password:
        return Password.user(user_password)
    return None


def _parse_crop(ctx, param, value):
    if value is None:
        return None
    parts = value.split(",")
    if len(parts) != 4 or not all(part.strip().isdigit() for part in parts):
        raise click.BadParameter("Expected 'x,y,width,height' with non-negative integers")
    x, y, width, height = (int(part) for part in parts)
    return Crop(x, y, width, height)


def password_options(func):
    func = click.option(
        '--owner-password',
        default=None,
        help='Owner password for the PDF (bypasses restrictions)',
        type=str,
    )(func)
    func = click.option(
        '--password',
        'user_password',
        default=None,
        help='User password for the PDF',
        type=str,
    )(func)
    return func


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Log tool invocations')
def cli(verbose):
    """
    pdf-process CLI - Inspect, render and extract text from PDF files with poppler.
    """
    _configure_logging(verbose)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@password_options
def show_info(input_pdf, user_password, owner_password):
    """
    Display information about a PDF file.

    Example:

        pdf-process info input.pdf
    """
    try:
        password = _password(user_password, owner_password)
        data = read_pdf_bytes(input_pdf)
        info = asyncio.run(pdf_info(data, PdfInfoArgs(password=password)))

        table = Table(title=f"PDF Information: {os.path.basename(input_pdf)}")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        table.add_row("File Path", os.path.abspath(input_pdf))
        table.add_row("Bytes Read", format_file_size(len(data)))
        for key, value in info.data.items():
            table.add_row(key, value)

        encryption = info.encryption
        if encryption is not None and encryption.is_encrypted:
            table.add_row("Print Allowed", "Yes" if encryption.is_print_allowed else "No")
            table.add_row("Copy Allowed", "Yes" if encryption.is_copy_allowed else "No")
            table.add_row("Change Allowed", "Yes" if encryption.is_change_allowed else "No")
            table.add_row("Add Notes Allowed", "Yes" if encryption.is_add_notes_allowed else "No")
            if encryption.algorithm:
                table.add_row("Algorithm", encryption.algorithm)

        console.print()
        console.print(table)
        console.print()

    except PdfProcessError as e:
        _fail(e)
    except OSError as e:
        _fail(e)


@cli.command(name="render")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output-dir', '-o',
    default='./output',
    help='Output directory for rendered pages',
    type=click.Path(file_okay=False)
)
@click.option(
    '--pages', '-p',
    default=None,
    help="Pages to render (e.g., '1,3,5-7'), all pages when omitted",
    type=str
)
@click.option(
    '--format', '-f', 'output_format',
    default=OutputFormat.PNG.value,
    type=click.Choice([fmt.value for fmt in OutputFormat], case_sensitive=False),
    help='Image format'
)
@click.option('--dpi', default=None, type=click.IntRange(min=1), help='Resolution in pixels per inch')
@click.option(
    '--scale-to',
    default=None,
    type=click.IntRange(min=1),
    help='Fit the longest side of each page into N pixels'
)
@click.option(
    '--color',
    default=RenderColor.COLOR.value,
    type=click.Choice([mode.value for mode in RenderColor], case_sensitive=False),
    help='Color mode for page content'
)
@click.option('--transparent', is_flag=True, help='Transparent page background (png/tiff)')
@click.option('--cropbox', is_flag=True, help='Render the crop box instead of the media box')
@click.option(
    '--antialias',
    default=None,
    type=click.Choice([mode.value for mode in Antialias], case_sensitive=False),
    help='Antialiasing hint'
)
@click.option('--crop', default=None, callback=_parse_crop, help="Crop area 'x,y,width,height' in pixels")
@click.option('--prefix', default='page', help='Prefix for output filenames', type=str)
@click.option('--padding', default=3, help='Number of digits for page numbering', type=int)
@click.option('--jobs', '-j', default=None, type=click.IntRange(min=1), help='Maximum parallel renders')
@password_options
def render(
    input_pdf,
    output_dir,
    pages,
    output_format,
    dpi,
    scale_to,
    color,
    transparent,
    cropbox,
    antialias,
    crop,
    prefix,
    padding,
    jobs,
    user_password,
    owner_password,
):
    """
    Render PDF pages to image files.

    Examples:

        pdf-process render input.pdf

        pdf-process render input.pdf -p '1-3' -f jpeg --dpi 300

        pdf-process render input.pdf --scale-to 1024 --color gray -o thumbs
    """
    try:
        password = _password(user_password, owner_password)
        fmt = OutputFormat(output_format.lower())
        args = RenderArgs(
            resolution=Resolution.uniform(dpi) if dpi else None,
            scale_to=ScaleTo.uniform(scale_to) if scale_to else None,
            crop=crop,
            render_area=RenderArea.CROP_BOX if cropbox else None,
            render_color=RenderColor(color.lower()),
            page_color=PageColor.TRANSPARENT if transparent else None,
            antialias=Antialias(antialias.lower()) if antialias else None,
            password=password,
        )

        data = read_pdf_bytes(input_pdf)
        info = asyncio.run(pdf_info(data, PdfInfoArgs(password=password)))
        page_list = parse_page_spec(pages) if pages else list(range(1, info.require_page_count() + 1))

        console.print(f"\n[bold cyan]Rendering {len(page_list)} page(s)...[/bold cyan]")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("Rendering pages...", total=None)
            images = asyncio.run(render_pages(data, info, page_list, fmt, args, max_concurrency=jobs))
            progress.update(task, completed=True)

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        created_files = []
        for page, image in zip(page_list, images):
            destination = output_path / f"{prefix}_{page:0{padding}d}.{fmt.extension}"
            image.save(destination, format=fmt.pil_format)
            created_files.append(destination)

        console.print(f"\n[bold green]✓ Successfully rendered {len(created_files)} page(s)[/bold green]")
        console.print(f"[dim]Output directory: {output_path.resolve()}[/dim]")
        for file_path in created_files[:5]:
            console.print(f"  • {file_path.name}")
        if len(created_files) > 5:
            console.print(f"  ... and {len(created_files) - 5} more")
        console.print()

    except PdfProcessError as e:
        _fail(e)
    except OSError as e:
        _fail(e)


@cli.command(name="text")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--pages', '-p',
    default=None,
    help="Pages to extract (e.g., '1,3,5-7'), all pages when omitted",
    type=str
)
@click.option(
    '--output', '-o',
    default=None,
    help='Write the text to this file instead of stdout',
    type=click.Path(dir_okay=False)
)
@click.option('--jobs', '-j', default=None, type=click.IntRange(min=1), help='Maximum parallel extractions')
@password_options
def extract_text(input_pdf, pages, output, jobs, user_password, owner_password):
    """
    Extract text from a PDF file.

    Examples:

        pdf-process text input.pdf

        pdf-process text input.pdf -p '2,4' -o pages.txt
    """
    try:
        password = _password(user_password, owner_password)
        data = read_pdf_bytes(input_pdf)
        info = asyncio.run(pdf_info(data, PdfInfoArgs(password=password)))
        args = PdfTextArgs(password=password)

        if pages:
            page_list = parse_page_spec(pages)
            text = join_page_texts(
                asyncio.run(text_pages(data, info, page_list, args, max_concurrency=jobs))
            )
        else:
            text = asyncio.run(text_all_pages(data, info, args))

        if output:
            Path(output).write_text(text, encoding="utf-8")
            console.print(f"[bold green]✓ Text written to:[/bold green] {output}")
        else:
            click.echo(text, nl=False)

    except PdfProcessError as e:
        _fail(e)
    except OSError as e:
        _fail(e)


if __name__ == '__main__':
    cli()
