"""Shared request dependencies for the optimization endpoints."""

from __future__ import annotations

from functools import lru_cache

from app.analyzers.code_optimizer import CodeOptimizer


@lru_cache(maxsize=1)
def get_optimizer() -> CodeOptimizer:
    """Return the process wide optimizer built from the environment.

    Tests replace this dependency through ``app.dependency_overrides``.
    """
    return CodeOptimizer()
