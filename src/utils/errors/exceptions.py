"""Exceções de infraestrutura compartilhadas entre camadas."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class CounterStoreError(InfrastructureError):
    """Falha de conexão, timeout ou resposta inválida no store de contadores."""
