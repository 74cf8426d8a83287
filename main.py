"""Thin shim for IDEs and direct execution."""

from bizsite.cli import main

if __name__ == "__main__":
    import sys

    # Default to debug logging when run directly without an explicit level.
    if not any(arg.startswith("--log-level") for arg in sys.argv):
        sys.argv.extend(["--log-level", "DEBUG"])

    sys.exit(main())
