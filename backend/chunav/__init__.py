"""Chunav constituency prediction service."""
