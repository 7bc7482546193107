#!/usr/bin/env python3
"""iscroll - A document viewer that scrolls smoothly through images.

Usage:
    python main.py [filename]

Controls:
    Arrow keys: Move cursor, scrolling through tall images a row at a time
    Ctrl-E / Ctrl-Y: Scroll down / up without moving the cursor
    PgDn / PgUp: Page down / up
    F2: Toggle smooth scrolling
    q: Quit
"""

import sys
from iscroll.viewer import Viewer


def main():
    """Entry point for the viewer."""
    viewer = Viewer()

    if len(sys.argv) > 1:
        viewer.load_file(sys.argv[1])

    viewer.run()


if __name__ == "__main__":
    main()
