"""Hashing, encoding and validation helpers."""
