# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Query classification for response budgeting.

Rules are evaluated in a fixed order and the first match wins. The order is
the only tie-breaker for messages matching several rules:

  1. yes/no prefix        -> simple,          complexity 0.1
  2. status check         -> simple,          complexity 0.2
  3. list / bulk lookup   -> data_retrieval,  complexity 0.4
  4. analysis             -> analysis,        complexity 0.7
  5. comprehensive        -> complex,         complexity 0.9
  6. anything else        -> simple (detail), complexity 0.5

Template selection (templates.py) runs its own, differently ordered rules.
"""

from __future__ import annotations

from typing import Tuple

from bridge_agent.models import QueryAnalysis, QueryType

YES_NO_PREFIXES: Tuple[str, ...] = ("is ", "are ", "can ", "does ", "do ")
STATUS_PHRASES: Tuple[str, ...] = ("status of", "what is the status", "check status")
LIST_PREFIXES: Tuple[str, ...] = ("list ",)
LIST_PHRASES: Tuple[str, ...] = ("show me all", "get all")
ANALYSIS_PHRASES: Tuple[str, ...] = ("analyze", "investigate", "why is", "what caused")
COMPREHENSIVE_PHRASES: Tuple[str, ...] = (
    "explain everything",
    "comprehensive",
    "detailed analysis",
    "full report",
)


def _contains_any(text: str, phrases: Tuple[str, ...]) -> bool:
    return any(phrase in text for phrase in phrases)


def analyze_query(message: str) -> QueryAnalysis:
    """Classify a user message into a query type and complexity score.

    Args:
        message (str): Raw user message.

    Returns:
        QueryAnalysis: Type, detail requirement and complexity in ``[0, 1]``.
    """
    lower_msg = message.lower().lstrip()

    if lower_msg.startswith(YES_NO_PREFIXES):
        return QueryAnalysis(type=QueryType.SIMPLE, requires_detail=False, estimated_complexity=0.1)

    if _contains_any(lower_msg, STATUS_PHRASES):
        return QueryAnalysis(type=QueryType.SIMPLE, requires_detail=False, estimated_complexity=0.2)

    if lower_msg.startswith(LIST_PREFIXES) or _contains_any(lower_msg, LIST_PHRASES):
        return QueryAnalysis(
            type=QueryType.DATA_RETRIEVAL, requires_detail=True, estimated_complexity=0.4
        )

    if _contains_any(lower_msg, ANALYSIS_PHRASES):
        return QueryAnalysis(type=QueryType.ANALYSIS, requires_detail=True, estimated_complexity=0.7)

    if _contains_any(lower_msg, COMPREHENSIVE_PHRASES):
        return QueryAnalysis(type=QueryType.COMPLEX, requires_detail=True, estimated_complexity=0.9)

    return QueryAnalysis(type=QueryType.SIMPLE, requires_detail=True, estimated_complexity=0.5)
