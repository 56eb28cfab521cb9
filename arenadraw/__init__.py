"""Wildcard draw rounds for team events."""
