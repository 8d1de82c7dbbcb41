"""Command-line interface for fillpair."""
