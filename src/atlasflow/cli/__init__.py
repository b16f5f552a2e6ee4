"""Command-line host for the board store."""
