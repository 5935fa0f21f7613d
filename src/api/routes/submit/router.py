"""Endpoint /api/submit.

Endpoints:
- OPTIONS /api/submit: preflight CORS (204 admitida / 403 negada)
- POST /api/submit: submissão do formulário
- demais métodos: 405 com header Allow

O router só traduz HTTP ↔ use case; toda decisão fica no SubmitFormUseCase.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from api.normalizers.http import build_request_context
from app.bootstrap import get_submit_use_case
from app.domain.submission import RequestContext
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from app.use_cases.submit_form import SubmissionResponse, SubmitFormUseCase
from config.settings import get_base_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SUBMIT_PATH = "/api/submit"
ALLOWED_METHODS = "POST, OPTIONS"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), camera=(), microphone=()",
}


def _context_from(request: Request) -> RequestContext:
    return build_request_context(
        headers=request.headers,
        peer_host=request.client.host if request.client else None,
        trust_proxy_headers=get_base_settings().trust_proxy_headers,
    )


def _to_http(result: SubmissionResponse) -> Response:
    headers = {
        **SECURITY_HEADERS,
        **result.headers,
        "X-Correlation-Id": get_correlation_id(),
    }
    if result.body is None:
        return Response(status_code=result.status_code, headers=headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=headers)


@router.options(SUBMIT_PATH)
async def submit_preflight(
    request: Request,
    use_case: SubmitFormUseCase = Depends(get_submit_use_case),
) -> Response:
    """Preflight CORS."""
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        return _to_http(use_case.preflight(_context_from(request)))
    finally:
        reset_correlation_id(token)


@router.post(SUBMIT_PATH)
async def submit_form(
    request: Request,
    use_case: SubmitFormUseCase = Depends(get_submit_use_case),
) -> Response:
    """Recebe a submissão e delega ao use case."""
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        raw_body = await request.body()
        result = await use_case.execute(raw_body, _context_from(request))
        return _to_http(result)
    finally:
        reset_correlation_id(token)


@router.api_route(SUBMIT_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"])
async def submit_method_not_allowed(request: Request) -> Response:
    """Qualquer outro método: 405."""
    logger.info("submit_method_not_allowed", extra={"method": request.method})
    return JSONResponse(
        content={"ok": False, "error": "Method not allowed"},
        status_code=405,
        headers={**SECURITY_HEADERS, "Allow": ALLOWED_METHODS},
    )
