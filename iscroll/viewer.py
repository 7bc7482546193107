"""Main viewer controller: terminal loop around a PixelTextView."""

import logging
import os
import select
import signal
import sys
import termios
from typing import Optional

from .commands import CommandRegistry
from .constants import ViewerConstants
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .mode import ScrollMode
from .model import LineDocument, Position
from .settings_persistence import SettingsKeys, SettingsPersistence, get_persistence
from .terminal import TerminalInterface
from .view import PixelTextView

logger = logging.getLogger(__name__)

HELP_LINES = [
    "",
    "MOVING                         SCROLLING",
    "  ↓ / Ctrl-N   Next line         Ctrl-E / Alt-↓   Scroll down",
    "  ↑ / Ctrl-P   Previous line     Ctrl-Y / Alt-↑   Scroll up",
    "  ← / Ctrl-B   Left              PgDn / Ctrl-V    Page down",
    "  → / Ctrl-F   Right             PgUp / Alt-V     Page up",
    "  Home / End   Top / bottom      Space            Page down",
    "",
    "OTHER",
    "  F2           Toggle smooth scrolling",
    "  F1           Help",
    "  q / Ctrl-Q   Quit",
]


class Viewer:
    """Terminal document viewer with smooth scrolling through images."""

    def __init__(self, smooth_scroll: Optional[bool] = None,
                 persistence: Optional[SettingsPersistence] = None):
        """Set up terminal, input and view.

        Args:
            smooth_scroll: Force smooth scrolling on or off. None uses the
                setting saved for the document, defaulting to on.
            persistence: Settings store; defaults to the per-user one.
        """
        self.terminal = TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.view = PixelTextView()
        self.view.num_rows = max(1, self.terminal.height)
        self.view.num_columns = ViewerConstants.VIEW_WIDTH
        self._smooth_override = smooth_scroll
        self.scroll_mode = ScrollMode(enabled=smooth_scroll is not False)
        self.command_registry = CommandRegistry()
        self.persistence = persistence or get_persistence()
        self.running = False
        self.error_mode = False  # True when terminal is too narrow
        self._needs_layout = True
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self.filename: Optional[str] = None
        self.status_message: Optional[str] = None
        self.help_visible = False

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        os.write(self._resize_pipe_w, ViewerConstants.RESIZE_PIPE_MARKER)

    def _disable_flow_control(self):
        """Let Ctrl-Q, Ctrl-V and Ctrl-Y reach the viewer. Returns old settings."""
        try:
            old_settings = termios.tcgetattr(sys.stdin)
            new_settings = list(old_settings)
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            new_settings[3] &= ~termios.IEXTEN
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
            return old_settings
        except (termios.error, AttributeError, OSError, ValueError):
            return None

    def _restore_flow_control(self, old_settings) -> None:
        if old_settings is None:
            return
        try:
            termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
        except (termios.error, OSError, ValueError):
            pass

    def run(self):
        """Run the main viewer loop."""
        self.terminal.setup()
        self.running = True
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

        try:
            with self.terminal.term.cbreak():
                old_settings = self._disable_flow_control()
                try:
                    need_draw = True
                    while self.running:
                        if need_draw:
                            self._refresh()
                            need_draw = False

                        # Wait for input on stdin or the resize pipe
                        ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                        if self._resize_pipe_r in ready:
                            os.read(self._resize_pipe_r, 1024)
                            self._needs_layout = True
                            self.terminal.invalidate_frame()
                            need_draw = True
                        elif 0 in ready:
                            key_event = self.keyboard.get_key_event(timeout=0)
                            if key_event:
                                self._handle_key_event(key_event)
                                need_draw = True
                finally:
                    self._restore_flow_control(old_settings)
        except KeyboardInterrupt:
            self.save_settings()
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            self.close()
            self.terminal.cleanup()

    def close(self):
        """Release the resize pipe. Safe to call more than once."""
        for fd in (self._resize_pipe_r, self._resize_pipe_w):
            if fd is not None:
                os.close(fd)
        self._resize_pipe_r = self._resize_pipe_w = None

    def _apply_terminal_size(self):
        """Fit the view to the terminal and keep the cursor on screen."""
        self.view.num_rows = max(1, self.terminal.height)
        self.view.num_columns = min(ViewerConstants.VIEW_WIDTH, self.terminal.width)
        if not self.view.is_visible(self.view.cursor):
            self.view.cursor = self.view.window_start

    def _refresh(self):
        """Re-layout if needed and draw, or show the too-narrow error."""
        if self.terminal.width < ViewerConstants.MIN_TERMINAL_WIDTH:
            self.error_mode = True
            self._draw_error()
            return

        if self.error_mode:
            self._needs_layout = True
        self.error_mode = False
        if self._needs_layout:
            self._apply_terminal_size()
            self.view.render()
            self._needs_layout = False
        self._draw()

    def _draw(self):
        """Draw the current viewer state to the terminal."""
        if self.help_visible:
            self._draw_help()
            return

        left_margin = max(0, (self.terminal.width - self.view.num_columns) // 2)
        status_override = f" {self.status_message}" if self.status_message else None
        self.terminal.update_frame(
            self.view.lines,
            self.view.visual_cursor_y,
            self.view.visual_cursor_x,
            left_margin=left_margin,
            view_width=self.view.num_columns,
            status_override=status_override,
            image_rows=self.view.image_rows,
        )

    def _draw_error(self):
        """Draw error message when terminal is too narrow."""
        self.terminal.draw_error_message(
            ViewerConstants.TERMINAL_TOO_NARROW_MESSAGE.format(ViewerConstants.MIN_TERMINAL_WIDTH),
            ViewerConstants.CURRENT_WIDTH_MESSAGE.format(self.terminal.width)
        )

    def _draw_help(self):
        """Draw the help screen."""
        term = self.terminal.term
        print(term.home + term.clear, end='')

        width = self.terminal.width
        title = "ISCROLL HELP"
        print(f"{term.move(1, max(0, (width - len(title)) // 2))}{term.bold}{title}{term.normal}", end='')

        content_start_y = max(3, (self.terminal.height - len(HELP_LINES)) // 2)
        left_margin = max(0, (width - max(len(line) for line in HELP_LINES)) // 2)
        for i, line in enumerate(HELP_LINES):
            print(f"{term.move(content_start_y + i, left_margin)}{line}", end='')

        print(f"{term.move(self.terminal.height, 0)} Press any key to continue", end='')
        print(term.hide_cursor, end='', flush=True)
        self.terminal.invalidate_frame()

    def show_help(self):
        """Show the help screen."""
        self.help_visible = True

    def hide_help(self):
        """Hide the help screen and return to the document."""
        self.help_visible = False

    def quit(self):
        """Stop the main loop, remembering where the document was left."""
        self.save_settings()
        self.running = False

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        # If help is visible, any key dismisses it
        if self.help_visible:
            self.hide_help()
            return

        # Status messages last until the next key
        self.status_message = None

        if self.error_mode:
            if key_event.value == 'q' and key_event.key_type in (KeyType.CTRL, KeyType.REGULAR):
                self.quit()
            return

        self.command_registry.execute(self, key_event)

    def load_file(self, filename: str) -> bool:
        """Load a document into the viewer.

        A missing file opens an empty document with a status message.

        Returns:
            True if the file was read
        """
        self.filename = filename
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            self.view.set_document(LineDocument.empty())
            self.status_message = ViewerConstants.NEW_FILE_MESSAGE.format(filename)
            return False
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error loading file: {e}")
            self.close()
            sys.exit(1)

        self.view.set_document(LineDocument.from_text(content))
        self._restore_settings()
        self._needs_layout = True
        return True

    def _restore_settings(self):
        """Apply the settings saved for the current document."""
        settings = self.persistence.load_settings(self.filename)

        smooth = settings.get(SettingsKeys.SMOOTH_SCROLL)
        if self._smooth_override is None and smooth is not None:
            if smooth:
                self.scroll_mode.enable()
            else:
                self.scroll_mode.disable()

        line = settings.get(SettingsKeys.WINDOW_START_LINE)
        if line is None or line >= len(self.view.document):
            return
        start = Position(line, 0)
        vscroll = settings.get(SettingsKeys.VSCROLL, 0)
        self.view.window_start = start
        self.view.vscroll = vscroll if vscroll < self.view.line_height_at(start) else 0
        self.view.cursor = start
        logger.debug(f"Restored {self.filename} at line {line}, vscroll {self.view.vscroll}")

    def save_settings(self) -> bool:
        """Remember scroll mode and viewport position for the current document."""
        if self.filename is None:
            return False
        return self.persistence.save_settings(self.filename, {
            SettingsKeys.SMOOTH_SCROLL: self.scroll_mode.enabled,
            SettingsKeys.WINDOW_START_LINE: self.view.window_start.line_index,
            SettingsKeys.VSCROLL: self.view.vscroll,
        })
