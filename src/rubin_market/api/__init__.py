"""HTTP API for the Rubin Market service."""
