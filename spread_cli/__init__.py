"""Command line interface for spread."""
