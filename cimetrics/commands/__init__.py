"""Command handlers for the cimetrics CLI."""
