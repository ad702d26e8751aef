"""
API routes for the hosted-model variant.

Endpoints
---------
- ``POST /api/summarize``: ``{mode, blocks, userPrompt?}`` -> ``{summaryText}``
- ``POST /api/ask``: ``{question, blocks}`` -> ``{answerText}``

Every request is counted against a per-client sliding window first. Refusals
and failures come back as ``{"error": <reason>, "detail": <message>}`` with
the status code carried by the :class:`BoundaryError`.

The handlers are plain ``def`` so FastAPI runs the blocking LLM call in its
thread pool.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from recapcanvas.agents.remote_agent import (
    RATE_LIMITED,
    BoundaryError,
    RateLimiter,
    run_remote_answer,
    run_remote_summary,
)
from recapcanvas.api.schemas import (
    ErrorResponse,
    RemoteAnswerResponse,
    RemoteAskRequest,
    RemoteSummarizeRequest,
    RemoteSummaryResponse,
)

router = APIRouter(prefix="/api", tags=["Hosted"])

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _error(error: BoundaryError) -> JSONResponse:
    body = ErrorResponse(error=error.reason, detail=error.message)
    return JSONResponse(status_code=error.status_code, content=body.to_wire())


def _rate_limited(request: Request) -> bool:
    limiter: RateLimiter = request.app.state.rate_limiter
    return limiter.hit(_client_key(request))


@router.post(
    "/summarize",
    response_model=RemoteSummaryResponse,
    responses=_ERROR_RESPONSES,
    summary="Summarize blocks with the hosted model",
)
def remote_summarize(
    payload: RemoteSummarizeRequest, request: Request
) -> RemoteSummaryResponse | JSONResponse:
    if _rate_limited(request):
        return _error(RATE_LIMITED)
    result = run_remote_summary(payload.mode, payload.blocks, focus=payload.user_prompt)
    if result.is_err():
        return _error(result.unwrap_err())
    return RemoteSummaryResponse(summary_text=result.unwrap())


@router.post(
    "/ask",
    response_model=RemoteAnswerResponse,
    responses=_ERROR_RESPONSES,
    summary="Answer a question with the hosted model",
)
def remote_ask(payload: RemoteAskRequest, request: Request) -> RemoteAnswerResponse | JSONResponse:
    if _rate_limited(request):
        return _error(RATE_LIMITED)
    result = run_remote_answer(payload.question, payload.blocks)
    if result.is_err():
        return _error(result.unwrap_err())
    return RemoteAnswerResponse(answer_text=result.unwrap())


__all__ = ["router"]
