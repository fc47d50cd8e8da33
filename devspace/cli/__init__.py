"""Command-line boundary for the DevSpace core."""
