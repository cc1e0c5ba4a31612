#!/usr/bin/env python3
"""
Tempify - template based design editor

A desktop editor and CLI for customizing design templates: place text and
images over a template background, undo/redo edits, save designs to the
Tempify server and export them as PNG or JPEG.
"""

import logging
import sys
import threading


def _install_exception_hooks() -> None:
    def _log_unhandled(exc_type, exc_value, exc_traceback):
        logging.getLogger(__name__).error(
            "Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback)
        )
        print("\nAn unexpected error occurred. See the Tempify log for details.")
    sys.excepthook = _log_unhandled

    def _thread_excepthook(args):
        logging.getLogger(__name__).error(
            "Unhandled thread exception",
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback)
        )
    threading.excepthook = _thread_excepthook


def _launch_gui(template_id=None) -> None:
    try:
        from gui import launch_gui
    except ImportError as e:
        print(f"Error: GUI dependencies not installed. {e}")
        print("Install with: pip install PySide6")
        sys.exit(1)
    launch_gui(template_id=template_id)


def main():
    """Main entry point for Tempify."""
    from cli import build_arg_parser, run_cli
    from core.logging_config import setup_logging

    parser = build_arg_parser()
    args = parser.parse_args()

    setup_logging(
        log_level=logging.DEBUG if args.verbose else logging.INFO,
        verbose_console=args.verbose,
    )
    _install_exception_hooks()

    # Default to GUI mode when no arguments provided
    if len(sys.argv) == 1 or args.gui:
        _launch_gui(template_id=args.template)
    else:
        sys.exit(run_cli(args))


if __name__ == "__main__":
    main()
