#!/usr/bin/env python
"""
Thin wrapper script to invoke the trac_digest CLI.

Running ``python tracdigest.py`` is equivalent to running the
``tracdigest`` console script installed via ``pyproject.toml``.
"""

from trac_digest.cli import main


if __name__ == "__main__":
    main(prog_name="tracdigest")
