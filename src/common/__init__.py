"""Shared helpers (HTTP, logging) used across forgefetch modules."""
