# -*- coding: utf-8 -*-
"""Legacy Move code optimization endpoint.

Kept alongside ``/api/v1/optimize`` for clients built against the older
contract: sentence-case comment tags, a minimum length check instead of a
module declaration check, and permissive CORS on every response.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.analyzers.code_optimizer import CodeOptimizer
from app.api.dependencies import get_optimizer
from app.models import (
    ErrorResponse,
    LegacyOptimizationMetrics,
    LegacyOptimizationRequest,
    LegacyOptimizationResponse,
)
from app.parsers.response_parser import InvalidOptimizationResponse, LegacyResponseParser
from app.prompts.optimization_prompt import LEGACY_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["optimization", "legacy"])

LEGACY_OPTIMIZE_PATH = "/api/v1/optimize/legacy"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

ALLOWED_METHODS = "POST, OPTIONS"

_PARSER = LegacyResponseParser()


def method_not_allowed_response() -> JSONResponse:
    """405 returned for every method other than POST and OPTIONS."""
    return JSONResponse(
        status_code=405,
        content={"error": "Method not allowed"},
        headers={**CORS_HEADERS, "Allow": ALLOWED_METHODS},
    )


@router.options("/optimize/legacy")
async def legacy_optimize_options() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post(
    "/optimize/legacy",
    response_model=LegacyOptimizationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def legacy_optimize_move_code(
    payload: LegacyOptimizationRequest,
    optimizer: CodeOptimizer = Depends(get_optimizer),
):
    """Optimize Move code and report the ``// Gas savings:`` style metrics."""

    try:
        result = await run_in_threadpool(
            optimizer.optimize,
            payload.move_code,
            payload.optimization_goals,
            payload.analysis_level,
            system_prompts=(LEGACY_SYSTEM_PROMPT,),
            parser=_PARSER,
        )
    except InvalidOptimizationResponse as exc:
        logger.error("Legacy optimization rejected: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc), headers=CORS_HEADERS) from exc
    except Exception as exc:
        logger.exception("Legacy optimization failed")
        raise HTTPException(
            status_code=500,
            detail="Failed to optimize code",
            headers=CORS_HEADERS,
        ) from exc

    response = LegacyOptimizationResponse(
        optimized_code=result["optimized_code"],
        metrics=LegacyOptimizationMetrics(
            gas_savings=result["gas"],
            security_findings=result["security"],
            performance_improvement=result["performance"],
        ),
        warnings=result["warnings"],
        analysis_level=payload.analysis_level,
    )
    return JSONResponse(content=response.to_payload(), headers=CORS_HEADERS)
