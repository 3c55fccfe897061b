# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Schemas for structured assistant responses."""
from .response_templates import (
    ErrorAnalysisResponse,
    ListItem,
    ListItemsResponse,
    MetricAnalysisResponse,
    MetricThreshold,
    StatusCheckResponse,
    StructuredResponse,
    TemplateSchema,
    TroubleshootingResponse,
    YesNoResponse,
)

__all__ = [
    "TemplateSchema",
    "StatusCheckResponse",
    "ErrorAnalysisResponse",
    "ListItem",
    "ListItemsResponse",
    "YesNoResponse",
    "MetricThreshold",
    "MetricAnalysisResponse",
    "TroubleshootingResponse",
    "StructuredResponse",
]
