"""
CLI Client Module.

Command-line client built with Typer for querying a Synse Server.

Architecture:
- CLI is a thin presentation layer over synse_cli.devices
- The active host comes from the resolved configuration, passed down
  through typer's context object
- CLI calls the server via HTTP (httpx)
- Rendered output goes to stdout, logs and errors to stderr

Usage:
    synse --help
    synse power list -o json
    synse --host lab server status
"""
