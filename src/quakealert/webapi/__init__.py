"""HTTP API for the QuakeAlert dashboard."""
