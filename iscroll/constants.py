"""Constants and configuration for iscroll."""


class ScrollConstants:
    """Thresholds and defaults used by the scrolling core."""

    # A line at least this many steps tall is ticked through when scrolling back
    TALL_LINE_FACTOR = 2
    # Scrolling back onto a line at least this many steps tall lands inside it
    VERY_TALL_LINE_FACTOR = 10

    DEFAULT_LINE_HEIGHT = 16  # Pixels per ordinary line (one terminal row)

    END_OF_DOCUMENT_MESSAGE = "End of document"
    BEGINNING_OF_DOCUMENT_MESSAGE = "Beginning of document"


class ViewerConstants:
    """Central configuration constants for the terminal viewer."""

    # Layout
    VIEW_WIDTH = 72  # Columns used for document text
    CONTEXT_LINES = 2  # Overlap lines kept when paging

    # Terminal requirements
    MIN_TERMINAL_WIDTH = 40

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'

    # Status messages
    TERMINAL_TOO_NARROW_MESSAGE = "Terminal too narrow! Need at least {} columns."
    CURRENT_WIDTH_MESSAGE = "Current width: {} columns."
    HELP_HINT = "F1 for help"
    NEW_FILE_MESSAGE = "New file: {}"
    SMOOTH_ON_MESSAGE = "Smooth scrolling on"
    SMOOTH_OFF_MESSAGE = "Smooth scrolling off"
