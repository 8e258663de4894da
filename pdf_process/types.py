"""
Value objects that serialize into poppler command-line flags.

Every type here is immutable and turns itself into a deterministic list of
arguments through ``to_args()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


DEFAULT_RESOLUTION = 150


class Secret:
    """Wrapper hiding a sensitive value from ``repr`` and ``str``."""

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    def reveal(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return "******"

    __str__ = __repr__


class PasswordKind(str, Enum):
    """Which of the two PDF passwords is being supplied."""

    OWNER = "owner"
    USER = "user"

    @property
    def flag(self) -> str:
        return "-opw" if self is PasswordKind.OWNER else "-upw"


@dataclass(frozen=True)
class Password:
    """
    Password for a PDF document.

    The owner password bypasses all security restrictions, the user password
    only opens the document.
    """

    kind: PasswordKind
    secret: Secret

    @classmethod
    def owner(cls, value: str) -> "Password":
        return cls(PasswordKind.OWNER, Secret(value))

    @classmethod
    def user(cls, value: str) -> "Password":
        return cls(PasswordKind.USER, Secret(value))

    def to_args(self) -> List[str]:
        return [self.kind.flag, self.secret.reveal()]


class PageColor(str, Enum):
    """Background color of rendered pages."""

    WHITE = "white"
    # Only honoured by the PNG and TIFF output formats
    TRANSPARENT = "transparent"

    def to_args(self) -> List[str]:
        return ["-transp"] if self is PageColor.TRANSPARENT else []


class Antialias(str, Enum):
    """Antialiasing hint forwarded to the cairo backend."""

    DEFAULT = "default"
    NONE = "none"
    GRAY = "gray"
    SUBPIXEL = "subpixel"
    FAST = "fast"
    GOOD = "good"
    BEST = "best"

    def to_args(self) -> List[str]:
        return ["-anti", self.value]


class RenderColor(str, Enum):
    """Color mode used for page content."""

    COLOR = "color"
    MONOCHROME = "mono"
    GRAYSCALE = "gray"

    def to_args(self) -> List[str]:
        if self is RenderColor.MONOCHROME:
            return ["-mono"]
        if self is RenderColor.GRAYSCALE:
            return ["-gray"]
        return []


class RenderArea(str, Enum):
    """Page box used as the rendering area."""

    MEDIA_BOX = "mediabox"
    CROP_BOX = "cropbox"

    def to_args(self) -> List[str]:
        return ["-cropbox"] if self is RenderArea.CROP_BOX else []


class OutputFormat(str, Enum):
    """Image formats requested from ``pdftocairo``."""

    PNG = "png"
    JPEG = "jpeg"
    TIFF = "tiff"

    @property
    def flag(self) -> str:
        return f"-{self.value}"

    @property
    def pil_format(self) -> str:
        """Format name understood by :func:`PIL.Image.open`."""
        return self.value.upper()

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else self.value

    def to_args(self) -> List[str]:
        return [self.flag]


@dataclass(frozen=True)
class Crop:
    """Crop area in pixels, relative to the top left of the rendered page."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            if getattr(self, name) < 0:
                raise ValueError(f"Crop {name} must be >= 0")

    @classmethod
    def uniform(cls, x: int, y: int, size: int) -> "Crop":
        return cls(x, y, size, size)

    def to_args(self) -> List[str]:
        return [
            "-x", str(self.x),
            "-y", str(self.y),
            "-W", str(self.width),
            "-H", str(self.height),
        ]


@dataclass(frozen=True)
class ScaleTo:
    """
    Scale the output image to fit inside the given bounds.

    Either axis may be :attr:`MAINTAIN_ASPECT_RATIO`, in which case it is
    derived from the other axis and the page aspect ratio.
    """

    MAINTAIN_ASPECT_RATIO = -1

    x: int = MAINTAIN_ASPECT_RATIO
    y: int = MAINTAIN_ASPECT_RATIO

    def __post_init__(self) -> None:
        if self.x < self.MAINTAIN_ASPECT_RATIO or self.y < self.MAINTAIN_ASPECT_RATIO:
            raise ValueError("ScaleTo bounds must be positive or MAINTAIN_ASPECT_RATIO")

    @classmethod
    def width(cls, x: int) -> "ScaleTo":
        return cls(x=x)

    @classmethod
    def height(cls, y: int) -> "ScaleTo":
        return cls(y=y)

    @classmethod
    def uniform(cls, size: int) -> "ScaleTo":
        return cls(size, size)

    def to_args(self) -> List[str]:
        return ["-scale-to-x", str(self.x), "-scale-to-y", str(self.y)]


@dataclass(frozen=True)
class Resolution:
    """Render resolution in pixels per inch."""

    x: int = DEFAULT_RESOLUTION
    y: int = DEFAULT_RESOLUTION

    def __post_init__(self) -> None:
        if self.x < 1 or self.y < 1:
            raise ValueError("Resolution must be >= 1 PPI")

    @classmethod
    def uniform(cls, size: int) -> "Resolution":
        return cls(size, size)

    @classmethod
    def with_x(cls, x: int) -> "Resolution":
        return cls(x=x)

    @classmethod
    def with_y(cls, y: int) -> "Resolution":
        return cls(y=y)

    def to_args(self) -> List[str]:
        return ["-rx", str(self.x), "-ry", str(self.y)]


__all__ = [
    "DEFAULT_RESOLUTION",
    "Secret",
    "PasswordKind",
    "Password",
    "PageColor",
    "Antialias",
    "RenderColor",
    "RenderArea",
    "OutputFormat",
    "Crop",
    "ScaleTo",
    "Resolution",
]
