# -*- coding: utf-8 -*-
"""Move code optimization endpoint using the upper-case comment tags."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from app.analyzers.code_optimizer import CodeOptimizer
from app.api.dependencies import get_optimizer
from app.models import (
    ErrorResponse,
    OptimizationAnalysis,
    OptimizationMetrics,
    OptimizationRequest,
    OptimizationResponse,
)
from app.parsers.response_parser import TaggedResponseParser
from app.prompts.optimization_prompt import OPTIMIZATION_SYSTEM_PROMPT, VERSIONING_SYSTEM_PROMPT


router = APIRouter(prefix="/api/v1", tags=["optimization"])

SYSTEM_PROMPTS = (OPTIMIZATION_SYSTEM_PROMPT, VERSIONING_SYSTEM_PROMPT)

_PARSER = TaggedResponseParser()


@router.post(
    "/optimize",
    response_model=OptimizationResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def optimize_move_code(
    payload: OptimizationRequest,
    optimizer: CodeOptimizer = Depends(get_optimizer),
):
    """Optimize a Move module and report the ``// GAS:`` style metrics."""

    try:
        result = await run_in_threadpool(
            optimizer.optimize,
            payload.move_code,
            payload.optimization_goals,
            payload.analysis_level,
            system_prompts=SYSTEM_PROMPTS,
            parser=_PARSER,
        )
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc) or "Optimization failed") from exc

    return OptimizationResponse(
        optimized_code=result["optimized_code"],
        metrics=OptimizationMetrics(
            gas=result["gas"],
            security=result["security"],
            performance=result["performance"],
        ),
        warnings=result["warnings"],
        analysis=OptimizationAnalysis(
            level=payload.analysis_level,
            goals=payload.optimization_goals,
        ),
    )
