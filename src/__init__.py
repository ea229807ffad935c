"""Content registry source package.

This package contains:
- config: Configuration loading and management
- registry: Record store, permission matrix and the registry service
"""

from __future__ import annotations

__all__: list[str] = []
