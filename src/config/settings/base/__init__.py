"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
    parse_bool,
)

__all__ = [
    "BaseSettings",
    "Environment",
    "get_base_settings",
    "parse_bool",
]
