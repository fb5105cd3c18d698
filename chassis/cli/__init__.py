"""Command line interface for chassis."""
