"""Main entry point for Nythic."""

import argparse
import queue
import sys
import threading
from pathlib import Path

from nythic.chapters.natural_sort import sort_chapters
from nythic.runtime.config import DEFAULT_CONFIG_PATH, load_config
from nythic.runtime.session import SessionRuntime


def _read_lines(lines: "queue.Queue[str | None]") -> None:
    for line in sys.stdin:
        lines.put(line.strip())
    lines.put(None)


def watch(config_path: Path) -> int:
    """Run an interactive console session.

    Every input line counts as a key press; "stay" dismisses the warning and
    "quit" ends the session.
    """
    runtime = SessionRuntime(load_config(config_path))
    runtime.start()
    print("Session started. Type to stay active, 'stay' to dismiss a warning, 'quit' to exit.")

    lines: queue.Queue[str | None] = queue.Queue()
    threading.Thread(target=_read_lines, args=(lines,), daemon=True).start()

    try:
        while not runtime.signed_out.is_set():
            try:
                line = lines.get(timeout=0.2)
            except queue.Empty:
                continue

            if line is None or line == "quit":
                break
            if line == "stay":
                runtime.stay_logged_in()
            else:
                runtime.on_input("keydown")
    finally:
        runtime.stop()

    print("Session ended.")
    return 0


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="Nythic - session timeout and chapter ordering tools"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version and exit",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("watch", help="Run a console session with inactivity logout")
    sort_parser = subparsers.add_parser("sort", help="Print chapter numbers in natural order")
    sort_parser.add_argument("chapters", nargs="+", help="Chapter numbers, e.g. 10 2 1b")

    args = parser.parse_args()

    if args.version:
        from nythic import __version__

        print(f"Nythic v{__version__}")
        return 0

    if args.command == "sort":
        for chapter in sort_chapters(args.chapters):
            print(chapter)
        return 0

    if args.command != "watch":
        parser.print_help()
        return 1

    try:
        return watch(args.config)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    except Exception as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
