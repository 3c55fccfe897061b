# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Adaptive response budgeting and compression.

Decides how much the assistant may generate and shapes raw model output
before it reaches the user:

  Classifier  (classifier.py)
      Message -> query type + complexity, fixed first-match rules.

  Length controller  (length_controller.py)
      Classification + request context -> max_tokens and thinking budget.
      Invariant: thinking_budget < max_tokens for every input.

  Templates  (templates.py)
      Message -> response format, token limit and schema (independent
      rule order); validation of structured candidates.

  Compressor  (compressor.py, stream.py)
      Full-text compression at four strengths; per-stream batching
      compressor for streamed output.

Usage:

    plan = plan_response(message, conversation_length=12, tools_enabled=True)
    kwargs = plan.generation_kwargs()

    compressor = StreamCompressor(CompressionMode.LIGHT)
    for chunk in upstream:
        forward(compressor.process_chunk(chunk))
    forward(compressor.flush())
"""

from bridge_agent.services.response.classifier import analyze_query
from bridge_agent.services.response.compressor import (
    CompressionReport,
    CompressionResult,
    auto_compress,
    compress_response,
    compress_selective,
    create_compression_report,
    estimate_tokens,
    extract_code_blocks,
    extract_key_points,
    extract_summary,
    remove_code_blocks,
    select_mode,
)
from bridge_agent.services.response.length_controller import (
    PROFILE_LIMITS,
    QUERY_TYPE_LIMITS,
    adjust_for_context,
    enforce_token_limits,
    get_optimal_max_tokens,
    get_response_length_config,
    get_thinking_budget,
)
from bridge_agent.services.response.pipeline import (
    ResponsePlan,
    compress_stream,
    new_stream_compressor,
    plan_response,
    postprocess_response,
    summarize_response,
)
from bridge_agent.services.response.stream import StreamCompressor, StreamState
from bridge_agent.services.response.templates import (
    RESPONSE_TEMPLATES,
    TEMPLATE_SCHEMAS,
    ParseOutcome,
    TemplateDescriptor,
    TemplateKey,
    TemplateSelection,
    ValidationOutcome,
    format_response,
    get_template_instruction,
    parse_structured_response,
    select_template,
    validate_response,
)

__all__ = [
    "analyze_query",
    "PROFILE_LIMITS",
    "QUERY_TYPE_LIMITS",
    "get_optimal_max_tokens",
    "adjust_for_context",
    "get_thinking_budget",
    "enforce_token_limits",
    "get_response_length_config",
    "TemplateKey",
    "TemplateDescriptor",
    "TemplateSelection",
    "ValidationOutcome",
    "ParseOutcome",
    "RESPONSE_TEMPLATES",
    "TEMPLATE_SCHEMAS",
    "select_template",
    "get_template_instruction",
    "validate_response",
    "parse_structured_response",
    "format_response",
    "CompressionResult",
    "CompressionReport",
    "estimate_tokens",
    "extract_key_points",
    "compress_response",
    "select_mode",
    "auto_compress",
    "extract_summary",
    "remove_code_blocks",
    "extract_code_blocks",
    "compress_selective",
    "create_compression_report",
    "StreamCompressor",
    "StreamState",
    "ResponsePlan",
    "plan_response",
    "new_stream_compressor",
    "compress_stream",
    "postprocess_response",
    "summarize_response",
]
