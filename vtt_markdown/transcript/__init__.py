"""Transcript parsing, anonymization and conversion."""
