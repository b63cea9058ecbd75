"""Forge release/tag listing: models, normalization and pipeline glue."""
