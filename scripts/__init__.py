"""Command line utilities for the farm assistant."""
