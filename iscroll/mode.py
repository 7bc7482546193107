"""Switching between smooth and plain scrolling.

Key bindings never call a scroll function directly; they go through the
handler pair held by a ScrollMode, so turning smooth scrolling on or off
is just swapping the pair.
"""

import logging
from typing import Callable, Optional

from .model import Boundary, ScrollLayout
from .scroll import line_scroll_backward, line_scroll_forward, scroll_backward, scroll_forward

logger = logging.getLogger(__name__)

ScrollHandler = Callable[[ScrollLayout, int], Optional[Boundary]]


class ScrollMode:
    """Pluggable pair of scroll handlers."""

    def __init__(self, enabled: bool = True):
        self.forward: ScrollHandler = line_scroll_forward
        self.backward: ScrollHandler = line_scroll_backward
        self.enabled = False
        if enabled:
            self.enable()

    def enable(self) -> None:
        """Install the smooth handlers."""
        self.forward = scroll_forward
        self.backward = scroll_backward
        self.enabled = True
        logger.debug("Smooth scrolling enabled")

    def disable(self) -> None:
        """Fall back to whole-line scrolling."""
        self.forward = line_scroll_forward
        self.backward = line_scroll_backward
        self.enabled = False
        logger.debug("Smooth scrolling disabled")

    def toggle(self) -> bool:
        """Flip the mode and return whether smooth scrolling is now on."""
        if self.enabled:
            self.disable()
        else:
            self.enable()
        return self.enabled
