"""
Synse CLI.

- core/: Configuration, logging, errors, concurrency helpers
- devices/: Inventory, filters, query pipeline, device commands
- cli/: Typer application, HTTP client, output rendering
"""

__version__ = "1.0.0"
