"""
CLI Commands.

Organized by domain/feature area.
"""

from synse_cli.cli.commands.devices import app as devices_app
from synse_cli.cli.commands.hosts import app as hosts_app
from synse_cli.cli.commands.power import app as power_app
from synse_cli.cli.commands.server import app as server_app

__all__ = [
    "devices_app",
    "hosts_app",
    "power_app",
    "server_app",
]
