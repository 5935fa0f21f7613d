"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    CounterStoreError,
    InfrastructureError,
)

__all__ = [
    "CounterStoreError",
    "InfrastructureError",
]
