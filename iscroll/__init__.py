"""iscroll - Smooth scrolling through documents with tall lines."""

from .model import Boundary, DocumentLine, LineDocument, Position, ScrollLayout, ScrollTarget
from .scroll import scroll_backward, scroll_forward
from .mode import ScrollMode
from .view import PixelTextView

__all__ = [
    'Boundary',
    'DocumentLine',
    'LineDocument',
    'Position',
    'ScrollLayout',
    'ScrollTarget',
    'scroll_forward',
    'scroll_backward',
    'ScrollMode',
    'PixelTextView',
]
