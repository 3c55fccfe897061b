# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Structured-output schemas for templated assistant responses.

Each schema mirrors one entry of the template catalogue. Field bounds are
part of the output contract handed to the model and must not drift.
Booleans and numbers are strict, so ``"yes"`` is not accepted for a bool.
Unknown keys are ignored. Fields also accept the camelCase names the model
is prompted with.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat

ShortText = Annotated[str, Field(max_length=200)]


class TemplateSchema(BaseModel):
    """Base class for template schemas."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


class StatusCheckResponse(TemplateSchema):
    """Status check answer.

    Attributes:
        status (str): One of ``healthy``, ``degraded``, ``down``, ``unknown``.
        details (str): Brief details, at most 500 characters.
        action_required (bool): Whether someone needs to act.
        recommendation (Optional[str]): Suggested action, at most 200 characters.
    """

    status: Literal["healthy", "degraded", "down", "unknown"]
    details: str = Field(..., max_length=500)
    action_required: StrictBool = Field(..., alias="actionRequired")
    recommendation: Optional[str] = Field(None, max_length=200)


class ErrorAnalysisResponse(TemplateSchema):
    """Error analysis answer.

    Attributes:
        error (str): Error message, at most 300 characters.
        cause (str): Root cause, at most 500 characters.
        solution (List[str]): Fix steps, each at most 200 characters.
        prevention (Optional[str]): Prevention advice, at most 300 characters.
        severity (str): One of ``low``, ``medium``, ``high``, ``critical``.
    """

    error: str = Field(..., max_length=300)
    cause: str = Field(..., max_length=500)
    solution: List[ShortText]
    prevention: Optional[str] = Field(None, max_length=300)
    severity: Literal["low", "medium", "high", "critical"]


class ListItem(TemplateSchema):
    id: str
    name: str
    status: Optional[str] = None


class ListItemsResponse(TemplateSchema):
    """List answer.

    Attributes:
        total (float): Total number of matching items.
        items (List[ListItem]): At most 50 listed items.
        summary (str): Brief summary, at most 200 characters.
    """

    total: StrictFloat
    items: List[ListItem] = Field(..., max_length=50)
    summary: str = Field(..., max_length=200)


class YesNoResponse(TemplateSchema):
    """Yes/no answer.

    Attributes:
        answer (bool): The answer.
        reason (str): Brief explanation, at most 200 characters.
        confidence (Optional[float]): Confidence in ``[0, 1]``.
    """

    answer: StrictBool
    reason: str = Field(..., max_length=200)
    confidence: Optional[StrictFloat] = Field(None, ge=0, le=1)


class MetricThreshold(TemplateSchema):
    value: StrictFloat
    breached: StrictBool


class MetricAnalysisResponse(TemplateSchema):
    """Metric analysis answer.

    Attributes:
        metric (str): Metric name.
        current_value (Union[str, float]): Current reading.
        trend (str): One of ``up``, ``down``, ``stable``.
        status (str): One of ``normal``, ``warning``, ``critical``.
        recommendation (Optional[str]): Action if needed, at most 300 characters.
        threshold (Optional[MetricThreshold]): Alerting threshold, if any.
    """

    metric: str
    current_value: Union[str, StrictFloat] = Field(..., alias="currentValue")
    trend: Literal["up", "down", "stable"]
    status: Literal["normal", "warning", "critical"]
    recommendation: Optional[str] = Field(None, max_length=300)
    threshold: Optional[MetricThreshold] = None


class TroubleshootingResponse(TemplateSchema):
    """Troubleshooting answer.

    Attributes:
        issue (str): Problem description, at most 300 characters.
        investigation_steps (List[str]): Steps taken, each at most 200 characters.
        findings (str): What was found, at most 500 characters.
        root_cause (str): Identified cause, at most 300 characters.
        resolution (List[str]): Solution steps, each at most 200 characters.
        prevention_measures (Optional[List[str]]): Each at most 200 characters.
    """

    issue: str = Field(..., max_length=300)
    investigation_steps: List[ShortText] = Field(..., alias="investigationSteps")
    findings: str = Field(..., max_length=500)
    root_cause: str = Field(..., max_length=300, alias="rootCause")
    resolution: List[ShortText]
    prevention_measures: Optional[List[ShortText]] = Field(None, alias="preventionMeasures")


class StructuredResponse(TemplateSchema):
    """Generic structured answer for messages without a dedicated template.

    Attributes:
        summary (str): At most 500 characters.
        details (Optional[Dict[str, Any]]): Free-form details.
        actions (Optional[List[str]]): Follow-up actions, each at most 200 characters.
        metadata (Optional[Dict[str, str]]): String metadata.
    """

    summary: str = Field(..., max_length=500)
    details: Optional[Dict[str, Any]] = None
    actions: Optional[List[ShortText]] = None
    metadata: Optional[Dict[str, str]] = None
