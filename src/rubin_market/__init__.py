"""Rubin Market: encrypted negotiation chat and moderation service."""

__version__ = "0.1.0"
