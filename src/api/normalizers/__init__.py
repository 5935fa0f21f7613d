"""Normalizers — conversão de dados do transporte para modelos internos.

Estrutura:
- http/: headers e peer da request HTTP → RequestContext
"""

from .http import build_request_context, resolve_client_ip

__all__ = [
    "build_request_context",
    "resolve_client_ip",
]
