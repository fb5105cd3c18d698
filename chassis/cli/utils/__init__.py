"""Helpers shared by the chassis CLI commands."""
