"""Command-line interface for rulegate."""
