"""Allow ``python -m enclosures``."""

from enclosures.cli.main import app

app()
