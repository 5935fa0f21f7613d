"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (submissão, health)
- Extrair contexto da request (headers, IP)
- Delegação para use_cases
- Respostas HTTP apropriadas

Estrutura:
- routes/submit/: endpoint /api/submit
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
