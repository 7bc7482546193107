from typing import Optional

from .constants import ScrollConstants, ViewerConstants
from .mode import ScrollHandler
from .model import Boundary, DocumentLine, LineDocument, Position, ScrollLayout
from .scroll import scroll_backward, scroll_forward


def render_line(line: DocumentLine, num_columns: int) -> list[str]:
    """Render a logical line into terminal rows.

    Text lines are a single row, truncated to num_columns. Image lines are
    drawn as a framed box `rows` rows tall with the caption in the top
    border; a one-row image collapses to "[caption]".
    """
    if not line.is_image:
        return [line.text[:num_columns]]
    if line.rows == 0:
        return []
    caption = line.text or "image"
    if line.rows == 1:
        return [f"[{caption}]"[:num_columns]]

    inner = max(0, num_columns - 2)
    label = f" {caption} "[:inner]
    top = "┌" + label + "─" * (inner - len(label)) + "┐"
    middle = "│" + " " * inner + "│"
    bottom = "└" + "─" * inner + "┘"
    return [top] + [middle] * (line.rows - 2) + [bottom]


class PixelTextView(ScrollLayout):
    """Viewport over a LineDocument, measured in pixels.

    Every terminal row is line_height pixels tall; a text line is one row
    and an image line is as many rows as it declares. window_start and
    vscroll are the scroll state; lines/image_rows and the visual cursor
    are refreshed by render().
    """
    num_columns: int = ViewerConstants.VIEW_WIDTH
    line_height: int = ScrollConstants.DEFAULT_LINE_HEIGHT
    CONTEXT_LINES: int = ViewerConstants.CONTEXT_LINES

    def __init__(self, document: Optional[LineDocument] = None, num_rows: int = 24,
                 line_height: Optional[int] = None):
        self.document = document or LineDocument.empty()
        if line_height is not None:
            self.line_height = line_height
        self.pixel_height = num_rows * self.line_height
        self.window_start = Position()
        self.vscroll = 0
        self.cursor = Position()
        self.desired_x = 0  # Goal column for up/down motion
        self.lines: list[str] = []
        self.image_rows: list[bool] = []
        self.visual_cursor_y = 0
        self.visual_cursor_x = 0

    @property
    def num_rows(self) -> int:
        return self.pixel_height // self.line_height

    @num_rows.setter
    def num_rows(self, rows: int) -> None:
        self.pixel_height = rows * self.line_height

    def set_document(self, document: LineDocument) -> None:
        self.document = document
        self.goto_beginning()

    # --- ScrollLayout ---

    def _line_pixels(self, line_index: int) -> int:
        return self.document[line_index].rows * self.line_height

    def line_height_at(self, position: Position) -> int:
        return self._line_pixels(position.line_index)

    def advance(self, position: Position, lines: int) -> Optional[Position]:
        target = position.line_index + lines
        if target < 0 or target >= len(self.document):
            return None
        return Position(target, 0)

    def line_extent(self, position: Position) -> Optional[tuple[int, int]]:
        """Return (top, bottom) of position's line in viewport pixels.

        None if the line is above window start or starts below the viewport.
        """
        if position.line_index < self.window_start.line_index:
            return None
        top = -self.vscroll
        for idx in range(self.window_start.line_index, position.line_index):
            top += self._line_pixels(idx)
            if top >= self.pixel_height:
                return None
        return top, top + self._line_pixels(position.line_index)

    def is_visible(self, position: Position) -> bool:
        extent = self.line_extent(position)
        if extent is None:
            return False
        top, bottom = extent
        if top >= self.pixel_height:
            return False
        if bottom == top:
            return top >= 0
        return bottom > 0

    def default_step_height(self) -> int:
        return self.line_height

    def viewport_height(self) -> int:
        return self.pixel_height

    def get_window_start(self) -> Position:
        return self.window_start

    def set_window_start(self, position: Position) -> None:
        self.window_start = position

    def get_vscroll(self) -> int:
        return self.vscroll

    def set_vscroll(self, pixels: int) -> None:
        self.vscroll = pixels

    def get_cursor(self) -> Position:
        return self.cursor

    def set_cursor(self, position: Position) -> None:
        self.cursor = position

    def cursor_on_line(self, position: Position) -> Position:
        # Keep the goal column, as vertical cursor motion does
        return self._at_desired_x(position)

    # --- Rendering ---

    def render(self):
        """Lay out the rows currently in the viewport.

        Rows whose top has been scrolled above the viewport by vscroll are
        dropped; the list is padded with empty rows to num_rows.
        """
        self.lines = []
        self.image_rows = []
        cursor_row = None
        rows = self.num_rows
        y = -self.vscroll
        idx = self.window_start.line_index
        while idx < len(self.document) and len(self.lines) < rows:
            line = self.document[idx]
            for r, text in enumerate(render_line(line, self.num_columns)):
                row_top = y + r * self.line_height
                if row_top < 0:
                    continue
                if len(self.lines) >= rows:
                    break
                if idx == self.cursor.line_index and cursor_row is None:
                    cursor_row = len(self.lines)
                self.lines.append(text)
                self.image_rows.append(line.is_image)
            y += self._line_pixels(idx)
            idx += 1

        while len(self.lines) < rows:
            self.lines.append("")
            self.image_rows.append(False)

        self.visual_cursor_y = cursor_row if cursor_row is not None else 0
        if cursor_row is not None and not self.document[self.cursor.line_index].is_image:
            self.visual_cursor_x = min(self.cursor.column, self.num_columns - 1)
        else:
            self.visual_cursor_x = 0

    # --- Cursor motion ---

    def _at_desired_x(self, position: Position) -> Position:
        line = self.document[position.line_index]
        column = 0 if line.is_image else min(self.desired_x, len(line.text))
        return Position(position.line_index, column)

    def update_desired_x(self):
        self.desired_x = self.cursor.column

    def move_cursor_left(self):
        if self.cursor.column > 0:
            self.cursor = Position(self.cursor.line_index, self.cursor.column - 1)

    def move_cursor_right(self):
        line = self.document[self.cursor.line_index]
        if not line.is_image and self.cursor.column < len(line.text):
            self.cursor = Position(self.cursor.line_index, self.cursor.column + 1)

    def _scroll_cursor_into_view(self, cursor: Position, scroll: ScrollHandler) -> None:
        limit = self.pixel_height // self.line_height + 2
        for _ in range(limit):
            if self.is_visible(cursor):
                break
            if scroll(self, 1) is not None:
                break
        self.cursor = cursor

    def move_cursor_down(self, scroll: ScrollHandler = scroll_forward) -> Optional[Boundary]:
        """Move down one line, scrolling through a tall cursor line first."""
        if not self.is_visible(self.cursor):
            self.cursor = self._at_desired_x(self.window_start)
        extent = self.line_extent(self.cursor)
        if extent is not None and extent[1] > self.pixel_height:
            cursor = self.cursor
            boundary = scroll(self, 1)
            if self.is_visible(cursor):
                self.cursor = cursor
            return boundary

        target = self.advance(self.cursor, 1)
        if target is None:
            return Boundary.END_OF_DOCUMENT
        self._scroll_cursor_into_view(self._at_desired_x(target), scroll)
        return None

    def move_cursor_up(self, scroll: ScrollHandler = scroll_backward) -> Optional[Boundary]:
        """Move up one line, scrolling back through a tall cursor line first."""
        if not self.is_visible(self.cursor):
            self.cursor = self._at_desired_x(self.window_start)
        extent = self.line_extent(self.cursor)
        if extent is not None and extent[0] < 0:
            cursor = self.cursor
            boundary = scroll(self, 1)
            if self.is_visible(cursor):
                self.cursor = cursor
            return boundary

        target = self.advance(self.cursor, -1)
        if target is None:
            return Boundary.BEGINNING_OF_DOCUMENT
        self._scroll_cursor_into_view(self._at_desired_x(target), scroll)
        return None

    # --- Paging ---

    def _page_lines(self) -> int:
        return max(1, self.num_rows - self.CONTEXT_LINES)

    def scroll_page_down(self, scroll: ScrollHandler = scroll_forward) -> Optional[Boundary]:
        return scroll(self, self._page_lines())

    def scroll_page_up(self, scroll: ScrollHandler = scroll_backward) -> Optional[Boundary]:
        return scroll(self, self._page_lines())

    def goto_beginning(self) -> None:
        self.window_start = Position()
        self.vscroll = 0
        self.cursor = Position()

    def goto_end(self) -> None:
        """Show the last line at the bottom of the viewport, cursor on it."""
        last = self.document.last_position
        idx = last.line_index
        used = self._line_pixels(idx)
        while idx > 0 and used + self._line_pixels(idx - 1) <= self.pixel_height:
            idx -= 1
            used += self._line_pixels(idx)
        self.window_start = Position(idx, 0)
        # A last line taller than the viewport is shown by its bottom part
        self.vscroll = max(0, used - self.pixel_height)
        self.cursor = last
