"""Normalização de requests HTTP para o RequestContext do domínio."""

from .request_context import build_request_context, resolve_client_ip

__all__ = ["build_request_context", "resolve_client_ip"]
