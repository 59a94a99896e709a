"""CLI command implementations for the enclosures application.

- validate: Validate a configuration file and report design advisories
- drivers: Look up and register driver specifications
"""

from enclosures.cli.commands.drivers import drivers_app
from enclosures.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "drivers_app", "validate_command"]
