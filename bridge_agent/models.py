# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared models for the response engine."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QueryType(str, Enum):
    """Coarse intent category assigned by the query classifier.

    Attributes:
        SIMPLE (str): Short factual or yes/no question.
        COMPLEX (str): Request for an exhaustive answer.
        ANALYSIS (str): Investigation or root-cause request.
        DATA_RETRIEVAL (str): Listing or bulk lookup request.
    """

    SIMPLE = "simple"
    COMPLEX = "complex"
    ANALYSIS = "analysis"
    DATA_RETRIEVAL = "data_retrieval"


class ResponseProfile(str, Enum):
    """Baseline response size.

    Attributes:
        CONCISE (str): Quick answers and status checks.
        STANDARD (str): Normal conversation, moderate detail.
        DETAILED (str): Complex analysis and comprehensive answers.
    """

    CONCISE = "concise"
    STANDARD = "standard"
    DETAILED = "detailed"


class CompressionMode(str, Enum):
    """Post-processing strength, in increasing order.

    Attributes:
        NONE (str): Identity.
        LIGHT (str): Filler phrase removal and whitespace normalization.
        MODERATE (str): Light plus example and transition removal.
        AGGRESSIVE (str): Key-point extraction.
    """

    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class QueryAnalysis(BaseModel):
    """Classification of a single user message.

    Attributes:
        type (QueryType): Intent category.
        requires_detail (bool): Whether a short answer is insufficient.
        estimated_complexity (float): Complexity score in ``[0, 1]``.
    """

    model_config = ConfigDict(frozen=True)

    type: QueryType
    requires_detail: bool
    estimated_complexity: float = Field(..., ge=0.0, le=1.0)


class LengthConfig(BaseModel):
    """Token ceiling chosen before conversation context is considered.

    Attributes:
        max_tokens (int): Output token ceiling.
        profile (ResponseProfile): Resolved response profile.
        query_type (str): Query type the ceiling was derived from.
    """

    model_config = ConfigDict(frozen=True)

    max_tokens: int
    profile: ResponseProfile
    query_type: str


class ResponseLengthConfig(BaseModel):
    """Generation parameters handed to the orchestrator.

    Attributes:
        max_tokens (int): Final output token ceiling.
        thinking_budget (int): Reasoning token allowance, always strictly
            below ``max_tokens``.
        profile (ResponseProfile): Resolved response profile.
        analysis (QueryAnalysis): Classification of the message.
    """

    model_config = ConfigDict(frozen=True)

    max_tokens: int
    thinking_budget: int
    profile: ResponseProfile
    analysis: QueryAnalysis

    @model_validator(mode="after")
    def _budget_below_ceiling(self) -> "ResponseLengthConfig":
        if self.thinking_budget >= self.max_tokens:
            raise ValueError(
                f"thinking_budget ({self.thinking_budget}) must be less than "
                f"max_tokens ({self.max_tokens})"
            )
        return self
