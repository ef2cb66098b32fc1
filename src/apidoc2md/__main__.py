"""Module entry point for running with python -m apidoc2md."""

from apidoc2md.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
