"""Command-line interface for enclosure design."""
