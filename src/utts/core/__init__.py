"""Core package initializer for utts.

Downstream code imports the settings conveniences directly:
    from utts.core.settings import Settings, get_logger, load_settings
"""

from __future__ import annotations

__all__ = ["__doc__"]
