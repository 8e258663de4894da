from __future__ import annotations

import io
import shutil
import sys
from pathlib import Path
from typing import Awaitable, Callable, List, Sequence

import pytest
from PIL import Image
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_process.info import parse_pdf_info  # noqa: E402
from pdf_process.utils import ToolOutput  # noqa: E402

SAMPLE_INFO_OUTPUT = """\
Title:           Ropes: an Alternative to Strings
Subject:
Keywords:        character strings, concatenation, Cedar, immutable, C, garbage collection
Author:          Hans-J. Boehm, Russ Atkinson and Michael Plass
Creator:         Acrobat PDFWriter 4.0 for Windows NT
Producer:        Acrobat PDFWriter 4.0 for Windows NT
CreationDate:    Thu Dec  7 09:52:05 2000 NZDT
ModDate:         Thu Dec  7 09:53:11 2000 NZDT
Custom Metadata: no
Metadata Stream: no
Tagged:          no
UserProperties:  no
Suspects:        no
Form:            none
JavaScript:      no
Pages:           16
Encrypted:       no
Page size:       612 x 792 pts (letter)
Page rot:        0
File size:       129060 bytes
Optimized:       no
PDF version:     1.3
"""

requires_poppler = pytest.mark.skipif(
    any(shutil.which(tool) is None for tool in ("pdfinfo", "pdftocairo", "pdftotext")),
    reason="poppler utilities are not installed",
)


class FakeRunner:
    """Stand-in for :func:`pdf_process.utils.run_tool` that records every call."""

    def __init__(self, respond: Callable[[Sequence[str]], Awaitable[ToolOutput] | ToolOutput]):
        self._respond = respond
        self.calls: List[List[str]] = []

    async def __call__(self, executable: str, args: Sequence[str], data: bytes) -> ToolOutput:
        self.calls.append([executable, *args])
        result = self._respond(args)
        if isinstance(result, ToolOutput):
            return result
        return await result


def page_arg(args: Sequence[str]) -> int:
    """Return the page passed with ``-f`` in a tool argument list."""
    return int(args[list(args).index("-f") + 1])


def ok(stdout: bytes | str = b"") -> ToolOutput:
    if isinstance(stdout, str):
        stdout = stdout.encode("utf-8")
    return ToolOutput(returncode=0, stdout=stdout, stderr=b"")


def failed(stderr: str, returncode: int = 1) -> ToolOutput:
    return ToolOutput(returncode=returncode, stdout=b"", stderr=stderr.encode("utf-8"))


def image_bytes(fmt: str = "PNG", size=(20, 30), color="white") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture()
def sample_info():
    return parse_pdf_info(SAMPLE_INFO_OUTPUT)


@pytest.fixture()
def info_factory():
    def _create(pages: int | None = 2, encrypted: str | None = "no"):
        lines = ["Title:          Sample"]
        if pages is not None:
            lines.append(f"Pages:          {pages}")
        if encrypted is not None:
            lines.append(f"Encrypted:      {encrypted}")
        return parse_pdf_info("\n".join(lines) + "\n")

    return _create


@pytest.fixture()
def fake_runner(monkeypatch: pytest.MonkeyPatch):
    """Patch ``run_tool`` in one module and return the recording fake."""

    def _install(module: str, respond) -> FakeRunner:
        runner = FakeRunner(respond)
        monkeypatch.setattr(f"pdf_process.{module}.run_tool", runner)
        return runner

    return _install


@pytest.fixture()
def pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "pdf-process-tests", "/Title": "Sample"})
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def encrypted_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.encrypt("password")
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def sample_pdf(tmp_path: Path, pdf_bytes: bytes) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(pdf_bytes)
    return pdf_path
