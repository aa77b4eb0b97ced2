"""Prewarm command line interface."""
