"""Command pattern implementation for viewer actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING

from .constants import ViewerConstants
from .keyboard import KeyType

if TYPE_CHECKING:
    from .keyboard import KeyEvent
    from .model import Boundary
    from .viewer import Viewer


class ViewerCommand(ABC):
    """Base class for viewer commands."""

    @abstractmethod
    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Returns:
            True if the viewport or cursor may have changed
        """
        pass


class NavigationCommand(ViewerCommand):
    """Base class for commands that scroll or move the cursor.

    A document bound reached along the way is shown in the status line.
    """

    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> bool:
        boundary = self._navigate(viewer)
        if boundary is not None:
            viewer.status_message = boundary.message
        viewer.view.render()
        return True

    @abstractmethod
    def _navigate(self, viewer: 'Viewer') -> Optional['Boundary']:
        pass


class NextLineCommand(NavigationCommand):
    def _navigate(self, viewer):
        return viewer.view.move_cursor_down(viewer.scroll_mode.forward)


class PreviousLineCommand(NavigationCommand):
    def _navigate(self, viewer):
        return viewer.view.move_cursor_up(viewer.scroll_mode.backward)


class ColumnMovementCommand(NavigationCommand):
    """Horizontal motion; resets the goal column used by up/down."""

    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> bool:
        result = super().execute(viewer, key_event)
        viewer.view.update_desired_x()
        return result


class LeftCharCommand(ColumnMovementCommand):
    def _navigate(self, viewer):
        viewer.view.move_cursor_left()
        return None


class RightCharCommand(ColumnMovementCommand):
    def _navigate(self, viewer):
        viewer.view.move_cursor_right()
        return None


class ScrollForwardCommand(NavigationCommand):
    def _navigate(self, viewer):
        return viewer.scroll_mode.forward(viewer.view, 1)


class ScrollBackwardCommand(NavigationCommand):
    def _navigate(self, viewer):
        return viewer.scroll_mode.backward(viewer.view, 1)


class PageDownCommand(NavigationCommand):
    def _navigate(self, viewer):
        return viewer.view.scroll_page_down(viewer.scroll_mode.forward)


class PageUpCommand(NavigationCommand):
    def _navigate(self, viewer):
        return viewer.view.scroll_page_up(viewer.scroll_mode.backward)


class BeginningOfDocumentCommand(NavigationCommand):
    def _navigate(self, viewer):
        viewer.view.goto_beginning()
        return None


class EndOfDocumentCommand(NavigationCommand):
    def _navigate(self, viewer):
        viewer.view.goto_end()
        return None


class SystemCommand(ViewerCommand):
    """Base class for commands that do not move the view."""

    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> bool:
        self._execute_system(viewer, key_event)
        return False

    @abstractmethod
    def _execute_system(self, viewer: 'Viewer', key_event: 'KeyEvent'):
        pass


class ToggleSmoothScrollCommand(SystemCommand):
    def _execute_system(self, viewer, key_event):
        if viewer.scroll_mode.toggle():
            viewer.status_message = ViewerConstants.SMOOTH_ON_MESSAGE
        else:
            viewer.status_message = ViewerConstants.SMOOTH_OFF_MESSAGE


class QuitCommand(SystemCommand):
    def _execute_system(self, viewer, key_event):
        viewer.quit()


class HelpCommand(SystemCommand):
    def _execute_system(self, viewer, key_event):
        viewer.show_help()


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], ViewerCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Cursor motion
        self.register((KeyType.SPECIAL, 'down'), NextLineCommand())
        self.register((KeyType.CTRL, 'n'), NextLineCommand())
        self.register((KeyType.SPECIAL, 'up'), PreviousLineCommand())
        self.register((KeyType.CTRL, 'p'), PreviousLineCommand())
        self.register((KeyType.SPECIAL, 'left'), LeftCharCommand())
        self.register((KeyType.CTRL, 'b'), LeftCharCommand())
        self.register((KeyType.SPECIAL, 'right'), RightCharCommand())
        self.register((KeyType.CTRL, 'f'), RightCharCommand())

        # Scrolling without moving the cursor
        self.register((KeyType.CTRL, 'e'), ScrollForwardCommand())
        self.register((KeyType.ALT, 'down'), ScrollForwardCommand())
        self.register((KeyType.CTRL, 'y'), ScrollBackwardCommand())
        self.register((KeyType.ALT, 'up'), ScrollBackwardCommand())

        # Paging
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())
        self.register((KeyType.CTRL, 'v'), PageDownCommand())
        self.register((KeyType.REGULAR, ' '), PageDownCommand())
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())
        self.register((KeyType.ALT, 'v'), PageUpCommand())

        self.register((KeyType.SPECIAL, 'home'), BeginningOfDocumentCommand())
        self.register((KeyType.SPECIAL, 'end'), EndOfDocumentCommand())

        # System commands
        self.register((KeyType.SPECIAL, 'f2'), ToggleSmoothScrollCommand())
        self.register((KeyType.SPECIAL, 'f1'), HelpCommand())
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.REGULAR, 'q'), QuitCommand())

    def register(self, key: Tuple[KeyType, str], command: ViewerCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[ViewerCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> bool:
        """Execute the command bound to the given key event.

        Returns:
            True if the view may have changed
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(viewer, key_event)
        return False
