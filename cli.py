#!/usr/bin/env python3
"""
Synse CLI.

Entry point for running the CLI from a source checkout. An installed package
provides the same app as the `synse` command.

Usage:
    python cli.py --help
    python cli.py power list
    python cli.py --host lab devices list --type power -o json
"""

from synse_cli.cli.app import app

if __name__ == "__main__":
    app()
