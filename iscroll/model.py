import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import ScrollConstants


@dataclass(frozen=True, order=True)
class Position:
    """Document offset: a logical line and a column within it."""
    line_index: int = 0
    column: int = 0


class Boundary(Enum):
    """Document bound reached by a scroll request."""
    END_OF_DOCUMENT = "end"
    BEGINNING_OF_DOCUMENT = "beginning"

    @property
    def message(self) -> str:
        if self is Boundary.END_OF_DOCUMENT:
            return ScrollConstants.END_OF_DOCUMENT_MESSAGE
        return ScrollConstants.BEGINNING_OF_DOCUMENT_MESSAGE


@dataclass
class ScrollTarget:
    """Outcome of a simulated scroll, not yet applied to the viewport.

    vscroll is None when the target line is shown from its top.
    """
    window_start: Position
    vscroll: Optional[int] = None
    boundary: Optional[Boundary] = None


class ScrollLayout(ABC):
    """What the scrolling core needs from the layout engine.

    Height and visibility queries must not have side effects; the
    simulation phase relies on being able to ask them freely.
    """

    @abstractmethod
    def line_height_at(self, position: Position) -> int:
        """Pixel height of the logical line containing position."""

    @abstractmethod
    def advance(self, position: Position, lines: int) -> Optional[Position]:
        """Start of the logical line `lines` away, or None past a bound."""

    @abstractmethod
    def is_visible(self, position: Position) -> bool:
        """True if position is currently rendered inside the viewport."""

    @abstractmethod
    def default_step_height(self) -> int:
        """Pixel height of an ordinary line."""

    @abstractmethod
    def viewport_height(self) -> int:
        """Pixel height of the viewport."""

    @abstractmethod
    def get_window_start(self) -> Position:
        pass

    @abstractmethod
    def set_window_start(self, position: Position) -> None:
        pass

    @abstractmethod
    def get_vscroll(self) -> int:
        pass

    @abstractmethod
    def set_vscroll(self, pixels: int) -> None:
        pass

    @abstractmethod
    def get_cursor(self) -> Position:
        pass

    @abstractmethod
    def set_cursor(self, position: Position) -> None:
        pass

    def cursor_on_line(self, position: Position) -> Position:
        """Cursor position to use when scrolling moves the cursor onto position's line."""
        return Position(position.line_index, 0)


# [[image:12 Optional caption]]
_IMAGE_MARKER = re.compile(r"^\s*\[\[image:(\d+)(?:\s+(.*?))?\s*\]\]\s*$")


@dataclass
class DocumentLine:
    text: str = ""
    rows: int = 1
    is_image: bool = False

    @classmethod
    def image(cls, rows: int, caption: str = "") -> "DocumentLine":
        return cls(text=caption, rows=max(0, rows), is_image=True)


class LineDocument:
    """Read-only sequence of logical lines. Never empty."""

    def __init__(self, lines: Optional[list[DocumentLine]] = None):
        self.lines: list[DocumentLine] = list(lines) if lines else [DocumentLine()]

    @classmethod
    def empty(cls) -> "LineDocument":
        return cls()

    @classmethod
    def from_text(cls, text: str) -> "LineDocument":
        """Parse plain text, turning image markers into tall lines."""
        if not text:
            return cls.empty()
        lines = []
        for raw in text.split('\n'):
            m = _IMAGE_MARKER.match(raw)
            if m:
                lines.append(DocumentLine.image(int(m.group(1)), m.group(2) or ""))
            else:
                lines.append(DocumentLine(text=raw))
        return cls(lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> DocumentLine:
        return self.lines[index]

    @property
    def last_position(self) -> Position:
        return Position(len(self.lines) - 1, 0)
