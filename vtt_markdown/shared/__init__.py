"""Shared constants, types and helpers."""
