"""Pydantic models for optimization requests and responses."""

import re
from typing import Any, ClassVar, List, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

AnalysisLevel = Literal["basic", "advanced", "full"]

ANALYSIS_LEVELS: Tuple[str, ...] = get_args(AnalysisLevel)
DEFAULT_ANALYSIS_LEVEL = "advanced"
DEFAULT_OPTIMIZATION_GOALS = ("gas",)

MODULE_DECLARATION = re.compile(r"module\s+\w+\s*{")
MIN_LEGACY_CODE_LENGTH = 50


def _invalid(message: str) -> PydanticCustomError:
    return PydanticCustomError("invalid_request", message)


class CamelModel(BaseModel):
    """Base model that reads and writes the camelCase keys used on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class BaseOptimizationRequest(CamelModel):
    """Fields and checks shared by both optimize endpoints.

    Validators run in ``mode="before"`` so a missing or wrongly typed value
    reports the endpoint's own message instead of a generic type error.
    """

    #: Allowed analysis levels, or None to accept any string.
    analysis_levels: ClassVar[Optional[Tuple[str, ...]]] = None

    move_code: str = Field(default=None, alias="moveCode", validate_default=True)
    optimization_goals: List[str] = Field(
        default=None,
        alias="optimizationGoals",
        validate_default=True,
    )
    analysis_level: str = Field(default=None, alias="analysisLevel", validate_default=True)

    @classmethod
    def check_move_code(cls, value: Any) -> str:
        raise NotImplementedError

    @field_validator("move_code", mode="before")
    @classmethod
    def _validate_move_code(cls, value: Any) -> str:
        return cls.check_move_code(value)

    @field_validator("optimization_goals", mode="before")
    @classmethod
    def _validate_goals(cls, value: Any) -> List[str]:
        if value is None:
            return list(DEFAULT_OPTIMIZATION_GOALS)
        if not isinstance(value, list) or not all(isinstance(goal, str) for goal in value):
            raise _invalid("Invalid optimization goals format")
        return value

    @field_validator("analysis_level", mode="before")
    @classmethod
    def _validate_analysis_level(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_ANALYSIS_LEVEL
        if not isinstance(value, str):
            raise _invalid("Invalid analysis level")
        if cls.analysis_levels is not None and value not in cls.analysis_levels:
            raise _invalid("Invalid analysis level")
        return value


class OptimizationRequest(BaseOptimizationRequest):
    """Body of ``POST /api/v1/optimize``."""

    analysis_levels = ANALYSIS_LEVELS

    @classmethod
    def check_move_code(cls, value: Any) -> str:
        if not isinstance(value, str) or not MODULE_DECLARATION.search(value):
            raise _invalid("Invalid Move module structure")
        return value


class LegacyOptimizationRequest(BaseOptimizationRequest):
    """Body of ``POST /api/v1/optimize/legacy``."""

    @classmethod
    def check_move_code(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise _invalid("Move code is required")
        if len(value.strip()) < MIN_LEGACY_CODE_LENGTH:
            raise _invalid(f"Move code must be at least {MIN_LEGACY_CODE_LENGTH} characters")
        return value


class OptimizationMetrics(BaseModel):
    gas: str
    security: List[str] = Field(default_factory=list)
    performance: str


class OptimizationAnalysis(BaseModel):
    level: AnalysisLevel
    goals: List[str]


class OptimizationResponse(CamelModel):
    """Response of ``POST /api/v1/optimize``."""

    optimized_code: str = Field(alias="optimizedCode")
    metrics: OptimizationMetrics
    warnings: Optional[List[str]] = None
    analysis: OptimizationAnalysis


class LegacyOptimizationMetrics(CamelModel):
    gas_savings: str = Field(alias="gasSavings")
    security_findings: List[str] = Field(default_factory=list, alias="securityFindings")
    performance_improvement: str = Field(alias="performanceImprovement")


class LegacyOptimizationResponse(CamelModel):
    """Response of ``POST /api/v1/optimize/legacy``."""

    optimized_code: str = Field(alias="optimizedCode")
    metrics: LegacyOptimizationMetrics
    warnings: Optional[List[str]] = None
    analysis_level: str = Field(alias="analysisLevel")


class ErrorResponse(BaseModel):
    error: str
