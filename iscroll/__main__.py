"""iscroll CLI entry point.

Allows running via `python -m iscroll` and provides the console script
defined in `pyproject.toml`.

Usage:
    iscroll [--version] [--plain] [FILE]

Lines of the form [[image:ROWS caption]] are shown as images ROWS rows
tall. --plain starts with smooth scrolling off (F2 toggles it).
"""

from __future__ import annotations

import sys
from .version import get_version_string


def main() -> None:
    # Very small arg parsing: version, plain mode, and optional filename
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return

    smooth_scroll = None
    if "--plain" in args:
        args.remove("--plain")
        smooth_scroll = False

    # Lazy import to avoid importing UI deps for --version
    from .viewer import Viewer
    viewer = Viewer(smooth_scroll=smooth_scroll)
    if args:
        viewer.load_file(args[0])
    viewer.run()


if __name__ == "__main__":  # pragma: no cover
    main()
