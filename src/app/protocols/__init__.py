"""Protocolos e contratos do core da aplicação."""

from .counter_store import AsyncCounterStoreProtocol, CounterSnapshot
from .messaging import MessagingTransportProtocol, TransportResponse

__all__ = [
    "AsyncCounterStoreProtocol",
    "CounterSnapshot",
    "MessagingTransportProtocol",
    "TransportResponse",
]
