"""Unified entry point for Fire Notes.

This module starts one of the client interfaces:
- CLI (default)
- health check only
"""

import argparse
import sys


def main():
    """Main entry point with interface selection."""
    parser = argparse.ArgumentParser(
        description="Fire Notes - structured notes client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Interfaces:
  cli         Start the command line interface (default)
  health      Check that the notes API is reachable

Examples:
  python -m firenotes                     # Show CLI help
  python -m firenotes cli notes           # List notes
  python -m firenotes cli edit 64f1a2     # Edit a note
  python -m firenotes health              # Check the API
""",
    )

    parser.add_argument(
        "interface",
        nargs="?",
        default="cli",
        choices=["cli", "health"],
        help="Which interface to start (default: cli)",
    )

    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Arguments passed to the interface",
    )

    args = parser.parse_args()

    from firenotes.interfaces.cli.app import run_cli

    if args.interface == "health":
        sys.argv = [sys.argv[0], "health"]
    else:
        sys.argv = [sys.argv[0], *args.args]
    run_cli()


if __name__ == "__main__":
    main()
