"""Shared type definitions."""

from __future__ import annotations

from collections.abc import Callable

# Standardized progress callback type: (fraction complete 0.0-1.0, status message)
ProgressCallback = Callable[[float, str], None]
