"""Subprocess plumbing and shared helpers for :mod:`pdf_process`."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable, List, Optional, Sequence, TypeVar, Union

from .exceptions import (
    IncorrectPasswordError,
    NotPdfFileError,
    PageOutOfBoundsError,
    PdfEncryptedError,
    PermissionDeniedError,
    ProcessIOError,
    SpawnProcessError,
    ToolFailureError,
    InvalidPageSpecError,
)

if TYPE_CHECKING:  # pragma: no cover
    from .info import PdfInfo
    from .types import Password

_LOGGER = logging.getLogger("pdf_process")

T = TypeVar("T")
PathLike = Union[str, Path]

NOT_PDF_MARKER = "May not be a PDF file"
INCORRECT_PASSWORD_MARKER = "Incorrect password"
PERMISSION_ERROR_EXIT_CODE = 3

_SECRET_FLAGS = frozenset({"-opw", "-upw"})


class FailureKind(str, Enum):
    """Closed classification of a failed tool invocation."""

    NOT_PDF = "not_pdf"
    ENCRYPTED = "encrypted"
    INCORRECT_PASSWORD = "incorrect_password"
    PERMISSION = "permission"
    FAILURE = "failure"


@dataclass(frozen=True)
class ToolOutput:
    """Captured result of one tool invocation."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def mask_args(args: Sequence[str]) -> List[str]:
    """Return *args* with password values replaced for logging."""

    masked: List[str] = []
    hide_next = False
    for arg in args:
        masked.append("******" if hide_next else arg)
        hide_next = arg in _SECRET_FLAGS
    return masked


def classify_failure(
    stderr: str,
    *,
    password_supplied: bool,
    returncode: Optional[int] = None,
) -> FailureKind:
    """Map the stderr text and exit code of a failed tool to a :class:`FailureKind`."""

    if NOT_PDF_MARKER in stderr:
        return FailureKind.NOT_PDF
    if INCORRECT_PASSWORD_MARKER in stderr:
        return FailureKind.INCORRECT_PASSWORD if password_supplied else FailureKind.ENCRYPTED
    if returncode == PERMISSION_ERROR_EXIT_CODE:
        return FailureKind.PERMISSION
    return FailureKind.FAILURE


def raise_for_failure(tool: str, output: ToolOutput, *, password_supplied: bool) -> None:
    """Raise the exception matching a failed *output*; do nothing on success."""

    if output.ok:
        return

    stderr = output.stderr_text
    kind = classify_failure(
        stderr, password_supplied=password_supplied, returncode=output.returncode
    )
    _LOGGER.warning(
        "%s exited with code %s (%s): %s", tool, output.returncode, kind.value, stderr.strip()
    )

    if kind is FailureKind.NOT_PDF:
        raise NotPdfFileError()
    if kind is FailureKind.ENCRYPTED:
        raise PdfEncryptedError()
    if kind is FailureKind.INCORRECT_PASSWORD:
        raise IncorrectPasswordError()
    if kind is FailureKind.PERMISSION:
        raise PermissionDeniedError(tool, stderr, output.returncode)
    raise ToolFailureError(tool, stderr, output.returncode)


async def run_tool(executable: str, args: Sequence[str], data: bytes) -> ToolOutput:
    """Run *executable* with *args*, piping *data* to stdin.

    Parameters
    ----------
    executable:
        Name or path of the program to launch.
    args:
        Command-line arguments, not including the executable.
    data:
        Raw bytes written to the child's standard input.

    The child is killed if the awaiting task is cancelled.
    """

    _LOGGER.debug("Executing command: %s %s", executable, " ".join(mask_args(args)))
    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (OSError, ValueError) as exc:
        # ValueError covers arguments with embedded NUL bytes
        _LOGGER.error("Failed to spawn %s: %s", executable, exc)
        raise SpawnProcessError(f"failed to spawn {executable}: {exc}") from exc

    try:
        stdout, stderr = await process.communicate(data)
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise
    except OSError as exc:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise ProcessIOError(f"failed to exchange data with {executable}: {exc}") from exc

    returncode = process.returncode if process.returncode is not None else -1
    _LOGGER.debug(
        "%s finished with exit code %s (%d bytes of output)", executable, returncode, len(stdout)
    )
    return ToolOutput(returncode=returncode, stdout=stdout, stderr=stderr)


async def dispatch_ordered(
    fn: Callable[[int], Awaitable[T]],
    pages: Sequence[int],
    *,
    max_concurrency: Optional[int] = None,
) -> List[T]:
    """Run ``fn(page)`` for every page concurrently, returning results in *pages* order.

    The first failure propagates and every job still running is cancelled.
    ``max_concurrency`` bounds how many jobs run at once; ``None`` runs all of
    them together.
    """

    if max_concurrency is not None and max_concurrency < 1:
        raise ValueError("max_concurrency must be >= 1")
    if not pages:
        return []

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def _run(page: int) -> T:
        if semaphore is None:
            return await fn(page)
        async with semaphore:
            return await fn(page)

    tasks = [asyncio.ensure_future(_run(page)) for page in pages]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def ensure_unlocked(info: "PdfInfo", password: Optional["Password"]) -> None:
    """Fail before dispatch when *info* reports encryption and no password is set."""

    if info.encrypted and password is None:
        raise PdfEncryptedError()


def validate_pages(info: "PdfInfo", pages: Iterable[int]) -> int:
    """Check every page in *pages* against the page count of *info*.

    Returns the page count.
    """

    page_count = info.require_page_count()
    for page in pages:
        if page < 1 or page > page_count:
            raise PageOutOfBoundsError(page, page_count)
    return page_count


_PAGE_TOKEN = re.compile(r"^(\d+)(?:-(\d+))?$")


def parse_page_spec(page_spec: str) -> List[int]:
    """Turn ``1,3,5-7`` into ``[1, 3, 5, 6, 7]``.

    Tokens are single pages or inclusive ``first-last`` ranges; the result is
    sorted with duplicates removed.
    """

    tokens = [token.strip() for token in (page_spec or "").split(",")]
    if not any(tokens):
        raise InvalidPageSpecError("No pages given")

    pages: set[int] = set()
    for token in tokens:
        match = _PAGE_TOKEN.match(token)
        if match is None:
            raise InvalidPageSpecError(f"Invalid page number or range: {token!r}")

        first = int(match.group(1))
        last = int(match.group(2)) if match.group(2) else first
        if first < 1:
            raise InvalidPageSpecError(f"Pages are numbered from 1, got {token!r}")
        if last < first:
            raise InvalidPageSpecError(f"Page range {token!r} ends before it starts")
        pages.update(range(first, last + 1))

    return sorted(pages)


def read_pdf_bytes(path: PathLike) -> bytes:
    """Read the PDF at *path* into memory."""

    resolved = Path(path).expanduser().resolve()
    _LOGGER.debug("Reading PDF bytes from %s", resolved)
    return resolved.read_bytes()


_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_file_size(size: float) -> str:
    """Render a byte count with one decimal, e.g. ``1.5 MB``."""

    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.1f} {_SIZE_UNITS[unit]}"


__all__ = [
    "FailureKind",
    "ToolOutput",
    "classify_failure",
    "raise_for_failure",
    "run_tool",
    "dispatch_ordered",
    "ensure_unlocked",
    "validate_pages",
    "parse_page_spec",
    "mask_args",
    "read_pdf_bytes",
    "format_file_size",
]
