# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Response templates and structured-output validation.

A message is mapped to at most one template: a display format, an output
token limit and a pydantic schema. The format and limit are injected into
the system prompt; the schema validates structured candidates afterwards.

Template selection uses its own rule order, which intentionally differs from
the length controller's query classification:

  yes/no -> status -> error -> list -> metric -> troubleshooting -> none
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from bridge_agent.schemas.response_templates import (
    ErrorAnalysisResponse,
    ListItemsResponse,
    MetricAnalysisResponse,
    StatusCheckResponse,
    TemplateSchema,
    TroubleshootingResponse,
    YesNoResponse,
)
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class TemplateKey(str, Enum):
    """Template catalogue keys."""

    STATUS_CHECK = "status_check"
    ERROR_ANALYSIS = "error_analysis"
    LIST_ITEMS = "list_items"
    YES_NO = "yes_no"
    METRIC_ANALYSIS = "metric_analysis"
    TROUBLESHOOTING = "troubleshooting"


@dataclass(frozen=True)
class TemplateDescriptor:
    """A response format contract.

    Attributes:
        key (TemplateKey): Catalogue key.
        format (str): Display format with ``[placeholder]`` slots.
        max_tokens (int): Output token limit stated in the prompt.
    """

    key: TemplateKey
    format: str
    max_tokens: int


RESPONSE_TEMPLATES: Mapping[TemplateKey, TemplateDescriptor] = MappingProxyType(
    {
        TemplateKey.STATUS_CHECK: TemplateDescriptor(
            key=TemplateKey.STATUS_CHECK,
            format=(
                "Status: [status]\n"
                "Details: [brief details]\n"
                "Action Required: [yes/no]"
            ),
            max_tokens=512,
        ),
        TemplateKey.ERROR_ANALYSIS: TemplateDescriptor(
            key=TemplateKey.ERROR_ANALYSIS,
            format=(
                "Error: [error message]\n"
                "Cause: [root cause]\n"
                "Solution: [fix steps]\n"
                "Prevention: [how to prevent]"
            ),
            max_tokens=2048,
        ),
        TemplateKey.LIST_ITEMS: TemplateDescriptor(
            key=TemplateKey.LIST_ITEMS,
            format=(
                "Total: [count]\n"
                "\n"
                "[Items listed in structured format]\n"
                "\n"
                "Summary: [brief summary]"
            ),
            max_tokens=1024,
        ),
        TemplateKey.YES_NO: TemplateDescriptor(
            key=TemplateKey.YES_NO,
            format="Answer: [Yes/No]\nReason: [brief explanation]",
            max_tokens=256,
        ),
        TemplateKey.METRIC_ANALYSIS: TemplateDescriptor(
            key=TemplateKey.METRIC_ANALYSIS,
            format=(
                "Metric: [metric name]\n"
                "Current Value: [value]\n"
                "Trend: [up/down/stable]\n"
                "Status: [normal/warning/critical]\n"
                "Recommendation: [action if needed]"
            ),
            max_tokens=1024,
        ),
        TemplateKey.TROUBLESHOOTING: TemplateDescriptor(
            key=TemplateKey.TROUBLESHOOTING,
            format=(
                "Issue: [problem description]\n"
                "Investigation Steps:\n"
                "1. [step 1]\n"
                "2. [step 2]\n"
                "...\n"
                "\n"
                "Findings: [what was found]\n"
                "Root Cause: [identified cause]\n"
                "Resolution: [solution steps]"
            ),
            max_tokens=4096,
        ),
    }
)

TEMPLATE_SCHEMAS: Mapping[TemplateKey, Type[TemplateSchema]] = MappingProxyType(
    {
        TemplateKey.STATUS_CHECK: StatusCheckResponse,
        TemplateKey.ERROR_ANALYSIS: ErrorAnalysisResponse,
        TemplateKey.LIST_ITEMS: ListItemsResponse,
        TemplateKey.YES_NO: YesNoResponse,
        TemplateKey.METRIC_ANALYSIS: MetricAnalysisResponse,
        TemplateKey.TROUBLESHOOTING: TroubleshootingResponse,
    }
)

TEMPLATE_INSTRUCTIONS: Mapping[TemplateKey, str] = MappingProxyType(
    {
        TemplateKey.YES_NO: "Respond with a clear yes/no answer and brief reason.",
        TemplateKey.STATUS_CHECK: "Provide status, brief details, and whether action is required.",
        TemplateKey.ERROR_ANALYSIS: "Analyze the error, identify cause, provide solution steps.",
        TemplateKey.LIST_ITEMS: "List items concisely with total count and brief summary.",
        TemplateKey.METRIC_ANALYSIS: (
            "Analyze metric with current value, trend, status, and recommendation."
        ),
        TemplateKey.TROUBLESHOOTING: "Investigate issue systematically and provide resolution steps.",
    }
)

DEFAULT_INSTRUCTION = "Respond concisely and directly to the question."

_YES_NO_PREFIXES: Tuple[str, ...] = ("is ", "are ", "can ", "does ", "do ")
_STATUS_PHRASES: Tuple[str, ...] = ("status of", "what is the status", "check status")
_ERROR_PHRASES: Tuple[str, ...] = ("error", "failed", "failure", "not working")
_LIST_PHRASES: Tuple[str, ...] = ("show me all", "get all")
_METRIC_PHRASES: Tuple[str, ...] = ("metric", "latency", "error rate", "performance")
_TROUBLESHOOTING_PHRASES: Tuple[str, ...] = ("troubleshoot", "investigate", "why is", "what caused")

_JSON_FENCE_RE = re.compile(r"```json\n(.+?)\n```", re.DOTALL)


@dataclass(frozen=True)
class TemplateSelection:
    """Template chosen for a message.

    Attributes:
        template (Optional[TemplateKey]): Matched template, or ``None``.
        schema (Optional[Type[TemplateSchema]]): Schema for the template.
        instruction (str): Prompt instruction; generic when nothing matched.
    """

    template: Optional[TemplateKey]
    schema: Optional[Type[TemplateSchema]]
    instruction: str


@dataclass
class ValidationOutcome:
    """Result of validating a candidate response.

    Attributes:
        valid (bool): Whether the candidate satisfied the schema.
        data (Any): Validated payload (camelCase keys, unset fields omitted),
            or the candidate itself when no schema applies.
        errors (Optional[List[Dict[str, Any]]]): One entry per violated
            constraint with ``loc``, ``msg`` and ``type`` keys.
    """

    valid: bool
    data: Any = None
    errors: Optional[List[Dict[str, Any]]] = None


@dataclass
class ParseOutcome:
    """Result of extracting structured data from model text.

    Attributes:
        success (bool): Whether JSON was found and validated.
        data (Any): Validated payload on success.
        error (Optional[str]): Failure description otherwise.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None


def _selection(key: TemplateKey) -> TemplateSelection:
    return TemplateSelection(
        template=key,
        schema=TEMPLATE_SCHEMAS[key],
        instruction=TEMPLATE_INSTRUCTIONS[key],
    )


def select_template(message: str) -> TemplateSelection:
    """Choose the response template for a user message.

    Args:
        message (str): Raw user message.

    Returns:
        TemplateSelection: The matched template and schema, or ``None`` for
            both with a generic instruction.
    """
    lower_msg = message.lower().lstrip()

    if lower_msg.startswith(_YES_NO_PREFIXES):
        return _selection(TemplateKey.YES_NO)

    if any(p in lower_msg for p in _STATUS_PHRASES):
        return _selection(TemplateKey.STATUS_CHECK)

    if any(p in lower_msg for p in _ERROR_PHRASES):
        return _selection(TemplateKey.ERROR_ANALYSIS)

    if lower_msg.startswith("list ") or any(p in lower_msg for p in _LIST_PHRASES):
        return _selection(TemplateKey.LIST_ITEMS)

    if any(p in lower_msg for p in _METRIC_PHRASES):
        return _selection(TemplateKey.METRIC_ANALYSIS)

    if any(p in lower_msg for p in _TROUBLESHOOTING_PHRASES):
        return _selection(TemplateKey.TROUBLESHOOTING)

    return TemplateSelection(template=None, schema=None, instruction=DEFAULT_INSTRUCTION)


def get_template_instruction(message: str) -> str:
    """Build the response-format instruction for the system prompt.

    Args:
        message (str): Raw user message.

    Returns:
        str: The template instruction, followed by the literal format and a
            token limit when a template matched.
    """
    selection = select_template(message)
    if selection.template is None:
        return selection.instruction

    descriptor = RESPONSE_TEMPLATES[selection.template]
    return (
        f"{selection.instruction}\n"
        f"\n"
        f"Use this format:\n"
        f"{descriptor.format}\n"
        f"\n"
        f"Keep response under {descriptor.max_tokens} tokens."
    )


def _validate(schema: Type[TemplateSchema], payload: Any) -> Any:
    """Validate ``payload`` and dump it back in the shape the model produced."""
    model = schema.model_validate(payload)
    return model.model_dump(by_alias=True, exclude_unset=True)


def validate_response(message: str, candidate: Any) -> ValidationOutcome:
    """Validate a structured candidate against the message's template schema.

    Messages without a template are trivially valid.

    Args:
        message (str): The user message the candidate answers.
        candidate (Any): Parsed candidate response (usually a dict).

    Returns:
        ValidationOutcome: Validity, the validated data, or the errors.
    """
    selection = select_template(message)
    if selection.schema is None:
        return ValidationOutcome(valid=True, data=candidate)

    try:
        return ValidationOutcome(valid=True, data=_validate(selection.schema, candidate))
    except ValidationError as e:
        errors = [
            {"loc": err["loc"], "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        logger.debug(
            "Response failed %s validation with %d error(s)",
            selection.template.value,
            len(errors),
        )
        return ValidationOutcome(valid=False, errors=errors)


def _parse_and_validate(raw: str, schema: Type[TemplateSchema]) -> Any:
    return _validate(schema, json.loads(raw))


def parse_structured_response(text: str, schema: Type[TemplateSchema]) -> ParseOutcome:
    """Extract and validate structured data from model output.

    A fenced json code block is tried first, then the whole text as JSON.

    Args:
        text (str): Raw model output.
        schema (Type[TemplateSchema]): Schema the data must satisfy.

    Returns:
        ParseOutcome: The validated data, or the first failure encountered.
            Malformed input never raises.
    """
    first_error: Optional[str] = None

    match = _JSON_FENCE_RE.search(text)
    if match:
        try:
            return ParseOutcome(success=True, data=_parse_and_validate(match.group(1), schema))
        except (ValueError, RecursionError) as e:
            first_error = str(e)

    try:
        return ParseOutcome(success=True, data=_parse_and_validate(text, schema))
    except (ValueError, RecursionError) as e:
        error = first_error or str(e)
        logger.debug("Structured response parse failed: %s", error)
        return ParseOutcome(success=False, error=error)


def format_response(template_key: Union[TemplateKey, str], data: Mapping[str, Any]) -> str:
    """Fill a template's ``[placeholder]`` slots for display.

    Placeholders are matched literally: ``{"status": "ok"}`` replaces every
    ``[status]``. Slots without a matching key are left as-is.

    Args:
        template_key (Union[TemplateKey, str]): Catalogue key.
        data (Mapping[str, Any]): Placeholder names to values.

    Returns:
        str: The formatted text.

    Raises:
        ValueError: If ``template_key`` is not in the catalogue.
    """
    formatted = RESPONSE_TEMPLATES[TemplateKey(template_key)].format
    for key, value in data.items():
        formatted = formatted.replace(f"[{key}]", str(value))
    return formatted
