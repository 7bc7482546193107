"""Smooth vertical scrolling over lines of uneven pixel height.

Each scroll request runs in two phases. The simulation walks the layout
from the current window start without touching the viewport and yields a
ScrollTarget; the commit writes window start and vscroll in one go and
then reconciles the cursor. Tall lines (images) are revealed one default
step per request instead of jumping in and out of view.

Reaching either end of the document is not an error: the furthest
reachable position is committed and the Boundary is returned to the
caller, which decides how to tell the user.
"""

import logging
from typing import Optional

from .constants import ScrollConstants
from .model import Boundary, Position, ScrollLayout, ScrollTarget

logger = logging.getLogger(__name__)


def _step_height(layout: ScrollLayout) -> int:
    # A zero step would never make progress through a tall line
    return max(1, layout.default_step_height())


def simulate_forward(layout: ScrollLayout, n: int) -> ScrollTarget:
    """Compute where scrolling forward by n lines would leave the viewport."""
    step = _step_height(layout)
    position = layout.get_window_start()
    scroll_amount: Optional[int] = max(0, layout.get_vscroll())
    line_height: Optional[int] = None
    boundary = None

    while n > 0:
        # vscroll only applies to the window start line; later lines start at their top
        if scroll_amount is None:
            scroll_amount = 0
        if line_height is None:
            line_height = layout.line_height_at(position)

        if scroll_amount + step < line_height:
            # Part of this line stays below after one more tick
            scroll_amount += step
            n -= 1
            continue

        # Line exhausted. An ordinary line shown from its top lands here
        # directly, which is the plain whole-line scroll.
        next_position = layout.advance(position, 1)
        if next_position is None:
            boundary = Boundary.END_OF_DOCUMENT
            # Stay on the last line, keeping at least one step of it in view
            scroll_amount = min(scroll_amount, max(0, line_height - step))
            break
        position = next_position
        scroll_amount = None
        line_height = None
        n -= 1

    if scroll_amount == 0:
        scroll_amount = None
    return ScrollTarget(position, scroll_amount, boundary)


def simulate_backward(layout: ScrollLayout, n: int) -> ScrollTarget:
    """Compute where scrolling backward by n lines would leave the viewport."""
    step = _step_height(layout)
    tall = ScrollConstants.TALL_LINE_FACTOR * step
    very_tall = ScrollConstants.VERY_TALL_LINE_FACTOR * step
    position = layout.get_window_start()
    scroll_amount: Optional[int] = max(0, layout.get_vscroll())
    line_height: Optional[int] = None
    boundary = None

    while n > 0:
        if line_height is None:
            line_height = layout.line_height_at(position)

        if line_height >= tall and scroll_amount:
            scroll_amount = max(0, scroll_amount - step)
            n -= 1
            continue

        previous = layout.advance(position, -1)
        if previous is None:
            boundary = Boundary.BEGINNING_OF_DOCUMENT
            scroll_amount = None
            break
        position = previous
        line_height = layout.line_height_at(position)
        if line_height >= very_tall:
            # Show only the bottom strip so the next forward scroll is short
            scroll_amount = line_height - step
        else:
            scroll_amount = None
        n -= 1

    if scroll_amount == 0:
        scroll_amount = None
    return ScrollTarget(position, scroll_amount, boundary)


def commit(layout: ScrollLayout, target: ScrollTarget) -> None:
    """Apply a simulated target to the viewport."""
    layout.set_window_start(target.window_start)
    layout.set_vscroll(target.vscroll or 0)
    logger.debug("Committed window start %s, vscroll %s", target.window_start, target.vscroll or 0)


def restore_cursor(layout: ScrollLayout, original: Position) -> None:
    """Keep the cursor where it was if still in view, else park it at window start."""
    window_start = layout.get_window_start()
    if original >= window_start and layout.is_visible(original):
        layout.set_cursor(original)
    else:
        layout.set_cursor(layout.cursor_on_line(window_start))


def _visible_line_in_step(layout: ScrollLayout, original: Position) -> Position:
    """Bottom-most visible line at or above original, an even number of lines away.

    This is where the two-line walk would stop; window start if it would
    pass it. Scans the visible lines from window start downward.
    """
    window_start = layout.get_window_start()
    found = window_start
    position = window_start
    while position is not None and position <= original and layout.is_visible(position):
        if (original.line_index - position.line_index) % 2 == 0:
            found = position
        position = layout.advance(position, 1)
    return found


def pull_cursor_into_view(layout: ScrollLayout, original: Position, n: int) -> None:
    """Move the cursor up to the nearest visible line at or above original.

    Steps two lines at a time: a single-line step can stall when the cursor
    sits just below a partially visible tall line at window start. A cursor
    too far below the viewport for the bounded walk is placed directly.
    """
    window_start = layout.get_window_start()
    limit = layout.viewport_height() // _step_height(layout) + max(0, n) + 1
    cursor = original
    steps = 0
    while cursor > window_start and not layout.is_visible(cursor):
        if steps >= limit:
            cursor = _visible_line_in_step(layout, original)
            break
        previous = layout.advance(cursor, -2)
        if previous is None or previous < window_start:
            cursor = window_start
            break
        cursor = previous
        steps += 1
    if cursor != original:
        # The column belonged to the original line
        cursor = layout.cursor_on_line(cursor)
    layout.set_cursor(cursor)


def _report(boundary: Optional[Boundary]) -> Optional[Boundary]:
    if boundary is not None:
        logger.debug("Scroll stopped: %s", boundary.message)
    return boundary


def scroll_forward(layout: ScrollLayout, n: int = 1) -> Optional[Boundary]:
    """Scroll the view down by n lines, ticking through tall lines.

    Returns the Boundary hit, if any. A negative n scrolls backward.
    """
    if n < 0:
        return scroll_backward(layout, -n)
    if n == 0:
        return None
    original = layout.get_cursor()
    target = simulate_forward(layout, n)
    commit(layout, target)
    restore_cursor(layout, original)
    return _report(target.boundary)


def scroll_backward(layout: ScrollLayout, n: int = 1) -> Optional[Boundary]:
    """Scroll the view up by n lines, landing inside very tall lines.

    Returns the Boundary hit, if any. A negative n scrolls forward.
    """
    if n < 0:
        return scroll_forward(layout, -n)
    if n == 0:
        return None
    original = layout.get_cursor()
    target = simulate_backward(layout, n)
    commit(layout, target)
    pull_cursor_into_view(layout, original, n)
    return _report(target.boundary)


def line_scroll_forward(layout: ScrollLayout, n: int = 1) -> Optional[Boundary]:
    """Plain whole-line scroll down, ignoring line heights."""
    if n < 0:
        return line_scroll_backward(layout, -n)
    if n == 0:
        return None
    original = layout.get_cursor()
    target = ScrollTarget(layout.get_window_start())
    for _ in range(n):
        next_position = layout.advance(target.window_start, 1)
        if next_position is None:
            target.boundary = Boundary.END_OF_DOCUMENT
            break
        target.window_start = next_position
    commit(layout, target)
    restore_cursor(layout, original)
    return _report(target.boundary)


def line_scroll_backward(layout: ScrollLayout, n: int = 1) -> Optional[Boundary]:
    """Plain whole-line scroll up, ignoring line heights."""
    if n < 0:
        return line_scroll_forward(layout, -n)
    if n == 0:
        return None
    original = layout.get_cursor()
    target = ScrollTarget(layout.get_window_start())
    if layout.get_vscroll() > 0:
        # Partially scrolled top line: showing its top is the first step
        n -= 1
    for _ in range(n):
        previous = layout.advance(target.window_start, -1)
        if previous is None:
            target.boundary = Boundary.BEGINNING_OF_DOCUMENT
            break
        target.window_start = previous
    commit(layout, target)
    pull_cursor_into_view(layout, original, n)
    return _report(target.boundary)
