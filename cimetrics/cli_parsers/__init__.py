"""Argument parser builders for the cimetrics CLI."""
