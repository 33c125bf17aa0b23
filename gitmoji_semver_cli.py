#!/usr/bin/env python
"""
Thin wrapper script to invoke the gitmoji_semver CLI.

Running ``python gitmoji_semver_cli.py`` is equivalent to running the
``gitmoji-semver`` console script installed via ``pyproject.toml``.
"""

from gitmoji_semver.cli import main


if __name__ == "__main__":
    main(prog_name="gitmoji-semver")
