# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Response length controller.

Turns a query classification plus request context into generation
parameters: an output token ceiling and a reasoning (thinking) budget.

Pipeline applied by ``get_response_length_config``:

  profile ceiling -> query-type cap/floor -> tool multiplier -> 8192 cap
    -> conversation / attachment adjustment -> extended-thinking headroom
    -> hard bounds -> thinking budget (always < max_tokens)

Every clamp is logged at WARNING level and never raised.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Mapping, Optional, Union

from bridge_agent.models import (
    LengthConfig,
    QueryType,
    ResponseLengthConfig,
    ResponseProfile,
)
from bridge_agent.services.response.classifier import analyze_query

logger = logging.getLogger(__name__)

PROFILE_LIMITS: Mapping[ResponseProfile, int] = MappingProxyType(
    {
        ResponseProfile.CONCISE: 1024,  # quick answers, status checks
        ResponseProfile.STANDARD: 4096,  # normal conversation
        ResponseProfile.DETAILED: 8192,  # complex analysis
    }
)

QUERY_TYPE_LIMITS: Mapping[str, int] = MappingProxyType(
    {
        "status_check": 512,
        "yes_no": 256,
        "list": 1024,
        "simple_query": 1024,
        "analysis": 4096,
        "troubleshooting": 6144,
        "comprehensive": 8192,
    }
)

ABSOLUTE_MAX_TOKENS = 8192
TOOL_MULTIPLIER = 1.5

MIN_CONTEXT_TOKENS = 256
LONG_CONVERSATION_MESSAGES = 10
VERY_LONG_CONVERSATION_MESSAGES = 20
LONG_CONVERSATION_FACTOR = 0.8
VERY_LONG_CONVERSATION_FACTOR = 0.6
FILES_FACTOR = 1.2

MIN_TOKENS = 256
MAX_TOKENS = 8192
EXTENDED_MIN_TOKENS = 4096
EXTENDED_MAX_TOKENS = 16000
EXTENDED_THINKING_FLOOR = 8192

THINKING_BUDGET_LOW = 2000
THINKING_BUDGET_MEDIUM = 5000
THINKING_BUDGET_HIGH = 10000
THINKING_RESPONSE_RESERVE = 1024

CONCISE_THRESHOLD = 0.3
DETAILED_THRESHOLD = 0.7


def _round_half_up(value: float) -> int:
    """Round like JavaScript's ``Math.round`` (halves go up, not to even)."""
    return int(math.floor(value + 0.5))


def _resolve_profile(
    complexity: float,
    preferred_profile: Optional[Union[ResponseProfile, str]],
) -> ResponseProfile:
    if preferred_profile:
        return ResponseProfile(preferred_profile)
    if complexity < CONCISE_THRESHOLD:
        return ResponseProfile.CONCISE
    if complexity < DETAILED_THRESHOLD:
        return ResponseProfile.STANDARD
    return ResponseProfile.DETAILED


def get_optimal_max_tokens(
    message: str,
    preferred_profile: Optional[Union[ResponseProfile, str]] = None,
    tools_enabled: bool = False,
) -> LengthConfig:
    """Pick a token ceiling for a message before context is considered.

    Args:
        message (str): Raw user message.
        preferred_profile (Optional[Union[ResponseProfile, str]]): Explicit
            profile override. When ``None`` the profile follows the
            estimated complexity (<0.3 concise, <0.7 standard, else detailed).
        tools_enabled (bool): Whether tool use is possible in this turn; tool
            calls need extra room so the ceiling is multiplied by 1.5.

    Returns:
        LengthConfig: Ceiling (at most 8192), resolved profile and query type.
    """
    analysis = analyze_query(message)
    profile = _resolve_profile(analysis.estimated_complexity, preferred_profile)

    max_tokens = PROFILE_LIMITS[profile]

    if analysis.type == QueryType.SIMPLE and not analysis.requires_detail:
        max_tokens = min(max_tokens, QUERY_TYPE_LIMITS["yes_no"])
    elif analysis.type == QueryType.DATA_RETRIEVAL:
        max_tokens = max(max_tokens, QUERY_TYPE_LIMITS["list"])

    if tools_enabled:
        max_tokens = _round_half_up(max_tokens * TOOL_MULTIPLIER)

    max_tokens = min(max_tokens, ABSOLUTE_MAX_TOKENS)

    return LengthConfig(max_tokens=max_tokens, profile=profile, query_type=analysis.type.value)


def adjust_for_context(
    config: LengthConfig,
    conversation_length: int,
    has_files: bool,
) -> int:
    """Scale a ceiling for conversation length and attachments.

    Long conversations already carry a large context, so output is reduced
    (x0.8 above 10 messages, x0.6 above 20; not cumulative). Attachments may
    need to be referenced, so output is increased by x1.2.

    Args:
        config (LengthConfig): Ceiling from ``get_optimal_max_tokens``.
        conversation_length (int): Number of prior messages.
        has_files (bool): Whether files are attached to the request.

    Returns:
        int: Adjusted ceiling, never below 256.
    """
    adjusted = config.max_tokens

    if conversation_length > VERY_LONG_CONVERSATION_MESSAGES:
        adjusted = _round_half_up(adjusted * VERY_LONG_CONVERSATION_FACTOR)
    elif conversation_length > LONG_CONVERSATION_MESSAGES:
        adjusted = _round_half_up(adjusted * LONG_CONVERSATION_FACTOR)

    if has_files:
        adjusted = _round_half_up(adjusted * FILES_FACTOR)

    return max(adjusted, MIN_CONTEXT_TOKENS)


def get_thinking_budget(complexity: float, max_tokens: int) -> int:
    """Reasoning token allowance for a complexity score.

    Tiers: <0.3 -> 2000, <0.7 -> 5000, else 10000. A tier that does not fit
    under ``max_tokens`` is replaced by ``max(1024, max_tokens - 1024)`` so
    at least 1024 tokens remain for the answer.

    Args:
        complexity (float): Estimated complexity in ``[0, 1]``.
        max_tokens (int): Output ceiling the budget must stay below.

    Returns:
        int: Thinking budget; strictly less than ``max_tokens`` whenever
            ``max_tokens > 1024``.
    """
    if complexity < CONCISE_THRESHOLD:
        budget = THINKING_BUDGET_LOW
    elif complexity < DETAILED_THRESHOLD:
        budget = THINKING_BUDGET_MEDIUM
    else:
        budget = THINKING_BUDGET_HIGH

    if budget >= max_tokens:
        constrained = max(THINKING_RESPONSE_RESERVE, max_tokens - THINKING_RESPONSE_RESERVE)
        logger.warning(
            "Thinking budget %d does not fit max_tokens %d, using %d",
            budget,
            max_tokens,
            constrained,
        )
        budget = constrained

    return budget


def enforce_token_limits(requested_tokens: int, extended_thinking: bool = False) -> int:
    """Clamp a token ceiling to the allowed range.

    Args:
        requested_tokens (int): Candidate ceiling.
        extended_thinking (bool): Use the extended-thinking range
            ``[4096, 16000]`` instead of ``[256, 8192]``.

    Returns:
        int: The clamped ceiling.
    """
    if extended_thinking:
        minimum, maximum = EXTENDED_MIN_TOKENS, EXTENDED_MAX_TOKENS
    else:
        minimum, maximum = MIN_TOKENS, MAX_TOKENS

    if requested_tokens < minimum:
        logger.warning(
            "Requested tokens %d below minimum, using %d (extended_thinking=%s)",
            requested_tokens,
            minimum,
            extended_thinking,
        )
        return minimum

    if requested_tokens > maximum:
        logger.warning(
            "Requested tokens %d above maximum, using %d (extended_thinking=%s)",
            requested_tokens,
            maximum,
            extended_thinking,
        )
        return maximum

    return requested_tokens


def get_response_length_config(
    message: str,
    profile: Optional[Union[ResponseProfile, str]] = None,
    conversation_length: int = 0,
    has_files: bool = False,
    tools_enabled: bool = False,
    extended_thinking: bool = False,
) -> ResponseLengthConfig:
    """Compute generation parameters for a chat turn.

    With extended thinking the context-adjusted ceiling is doubled (or raised
    to 8192 if larger) before bounds are applied, so both the reasoning phase
    and the final answer have room.

    Args:
        message (str): Raw user message.
        profile (Optional[Union[ResponseProfile, str]]): Explicit profile.
        conversation_length (int): Number of prior messages.
        has_files (bool): Whether files are attached.
        tools_enabled (bool): Whether tools are bound for this turn.
        extended_thinking (bool): Whether the model reasons before answering.

    Returns:
        ResponseLengthConfig: Ceiling, thinking budget, profile and analysis.
            ``thinking_budget < max_tokens`` holds for every input.
    """
    base_config = get_optimal_max_tokens(message, profile, tools_enabled)
    adjusted = adjust_for_context(base_config, conversation_length, has_files)

    if extended_thinking:
        adjusted = max(adjusted * 2, EXTENDED_THINKING_FLOOR)

    max_tokens = enforce_token_limits(adjusted, extended_thinking)

    analysis = analyze_query(message)
    thinking_budget = get_thinking_budget(analysis.estimated_complexity, max_tokens)

    # Only reachable without extended thinking, where max_tokens can be <= 1024.
    if thinking_budget >= max_tokens:
        constrained = max_tokens // 2
        logger.warning(
            "Thinking budget %d does not fit max_tokens %d, using %d",
            thinking_budget,
            max_tokens,
            constrained,
        )
        thinking_budget = constrained

    logger.info(
        "Response length config: profile=%s query_type=%s complexity=%.2f "
        "max_tokens=%d thinking_budget=%d",
        base_config.profile.value,
        base_config.query_type,
        analysis.estimated_complexity,
        max_tokens,
        thinking_budget,
    )

    return ResponseLengthConfig(
        max_tokens=max_tokens,
        thinking_budget=thinking_budget,
        profile=base_config.profile,
        analysis=analysis,
    )
