"""HTTP API exposing the farm store."""
