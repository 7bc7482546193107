"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from dataclasses import dataclass, field
from typing import Optional
import sys
import select

from .constants import ViewerConstants


@dataclass
class _Frame:
    """What is currently on screen, for diffing the next frame against."""
    left_margin: int
    view_width: int
    rows: list[str] = field(default_factory=list)
    status: Optional[str] = None

    def same_geometry(self, left_margin: int, view_width: int, num_rows: int) -> bool:
        return (self.left_margin == left_margin and self.view_width == view_width
                and len(self.rows) == num_rows)


class TerminalInterface:
    """Full-screen document display with minimal repaints."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._frame: Optional[_Frame] = None

    def setup(self):
        """Enter fullscreen mode and start reading keys."""
        print(self.term.enter_fullscreen + self.term.hide_cursor + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
            except Exception:
                # Justification: curtsies can fail to enter raw mode when stdin
                # is not a tty (CI, pipes). The viewer then runs without input.
                self._curtsies_input = None

    def cleanup(self):
        """Leave fullscreen mode and release the input stream."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception:
                # Justification: teardown must not crash on the way out
                pass
            finally:
                self._curtsies_input = None

    def invalidate_frame(self) -> None:
        """Forget the last frame so the next update repaints everything.

        Needed after something else (the help screen, an error box) has
        drawn over the document area.
        """
        self._frame = None

    def _compose_row(self, text: str, view_width: int, is_image: bool) -> str:
        """Pad a row to view_width; image rows are drawn dim."""
        padded = text[:view_width].ljust(view_width)
        if is_image:
            return self.term.dim + padded + self.term.normal
        return padded

    def _status_text(self, status_override: Optional[str]) -> str:
        if status_override:
            return status_override.ljust(self.term.width)
        hint = ViewerConstants.HELP_HINT
        return hint.rjust(self.term.width - 1)

    def update_frame(
        self,
        rows: list[str],
        cursor_y: int,
        cursor_x: int,
        left_margin: int,
        view_width: int,
        status_override: Optional[str] = None,
        image_rows: Optional[list[bool]] = None,
    ) -> None:
        """Write the rows that differ from what is on screen, then place the cursor.

        The first frame, and any frame with a different margin, width or
        row count, clears the screen and is drawn in full.
        """
        frame = self._frame
        if frame is None or not frame.same_geometry(left_margin, view_width, len(rows)):
            print(self.term.home + self.term.clear, end='')
            frame = _Frame(left_margin, view_width, [""] * len(rows))
            self._frame = frame

        flags = image_rows or []
        for y, text in enumerate(rows):
            shown = self._compose_row(text, view_width, y < len(flags) and flags[y])
            if shown != frame.rows[y]:
                print(self.term.move(y, left_margin) + shown, end='')
                frame.rows[y] = shown

        status = self._status_text(status_override)
        if status != frame.status:
            print(self.term.move(self.term.height - 1, 0) + status, end='')
            frame.status = status

        print(self.term.move(cursor_y, left_margin + cursor_x) + self.term.normal_cursor, end='', flush=True)

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw a double-lined box with the messages in the middle of the screen."""
        print(self.term.home + self.term.clear, end='')

        messages = [m for m in (message1, message2) if m]
        inner = max(len(m) for m in messages) + 2
        box = (["╔" + "═" * inner + "╗"]
               + ["║" + m.center(inner) + "║" for m in messages]
               + ["╚" + "═" * inner + "╝"])
        top = self.term.height // 2 - 2
        left = max(0, (self.term.width - len(box[0])) // 2)
        for i, line in enumerate(box):
            print(self.term.move(top + i, left) + line, end='')

        help_text = "q to quit | Resize terminal to continue"
        print(self.term.move(self.term.height - 1, max(0, (self.term.width - len(help_text)) // 2))
              + help_text, end='', flush=True)
        self.invalidate_frame()

    def get_key(self, timeout=None):
        """Get a single key token from curtsies.

        Args:
            timeout: Seconds to wait (None blocks, 0 polls)

        Returns:
            The key token as a string, or None on timeout or without input.
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            ready, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not ready:
                return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Rows available for the document (the last row is the status line)."""
        return self.term.height - 1
