"""Command-line interface for stubsmith."""
