# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Orchestrator-facing entry points.

Budgeting and template selection run independently for the same message:

    plan = plan_response(message, conversation_length=len(history), ...)
    llm = ChatAnthropic(model=..., **plan.generation_kwargs())
    messages = [SystemMessage(plan.system_prompt), *history]

    async for text in compress_stream(llm.astream(messages)):
        await send_to_client(text)

Non-streamed answers go through ``postprocess_response``. Nothing here
performs I/O; the caller owns the model and the transport.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Dict, Optional, Union

from bridge_agent.config import settings
from bridge_agent.models import CompressionMode, ResponseLengthConfig, ResponseProfile
from bridge_agent.services.prompts.base import build_system_prompt
from bridge_agent.services.response.compressor import (
    CompressionResult,
    auto_compress,
    compress_response,
    extract_summary,
)
from bridge_agent.services.response.length_controller import get_response_length_config
from bridge_agent.services.response.stream import StreamCompressor
from bridge_agent.services.response.templates import get_template_instruction
from langchain_core.messages import BaseMessageChunk

logger = logging.getLogger(__name__)

AUTO_MODE = "auto"


@dataclass(frozen=True)
class ResponsePlan:
    """Everything the orchestrator needs before calling the model.

    Attributes:
        length_config (ResponseLengthConfig): Token ceiling and thinking budget.
        template_instruction (str): Response-format instruction.
        system_prompt (str): System prompt including the instruction.
        extended_thinking (bool): Whether the thinking budget should be sent.
    """

    length_config: ResponseLengthConfig
    template_instruction: str
    system_prompt: str
    extended_thinking: bool = False

    def generation_kwargs(self) -> Dict[str, Any]:
        """Model parameters in Anthropic Messages API shape.

        Returns:
            Dict[str, Any]: ``max_tokens`` and, with extended thinking, a
                ``thinking`` block carrying ``budget_tokens``.
        """
        kwargs: Dict[str, Any] = {"max_tokens": self.length_config.max_tokens}
        if self.extended_thinking:
            kwargs["thinking"] = {
                "type": "enabled",
                "budget_tokens": self.length_config.thinking_budget,
            }
        return kwargs


def plan_response(
    message: str,
    profile: Optional[Union[ResponseProfile, str]] = None,
    conversation_length: int = 0,
    has_files: bool = False,
    tools_enabled: bool = False,
    extended_thinking: bool = False,
) -> ResponsePlan:
    """Compute generation parameters and the system prompt for a turn.

    Args:
        message (str): Raw user message.
        profile (Optional[Union[ResponseProfile, str]]): Explicit profile.
        conversation_length (int): Number of prior messages.
        has_files (bool): Whether files are attached.
        tools_enabled (bool): Whether tools are bound for this turn.
        extended_thinking (bool): Whether the model reasons before answering.

    Returns:
        ResponsePlan: Length configuration, instruction and system prompt.
    """
    length_config = get_response_length_config(
        message,
        profile=profile,
        conversation_length=conversation_length,
        has_files=has_files,
        tools_enabled=tools_enabled,
        extended_thinking=extended_thinking,
    )
    instruction = get_template_instruction(message)
    return ResponsePlan(
        length_config=length_config,
        template_instruction=instruction,
        system_prompt=build_system_prompt(instruction),
        extended_thinking=extended_thinking,
    )


def new_stream_compressor() -> StreamCompressor:
    """Fresh compressor for one stream, configured from settings."""
    return StreamCompressor(
        mode=settings.STREAM_COMPRESSION_MODE,
        sentence_threshold=settings.STREAM_SENTENCE_THRESHOLD,
    )


def _chunk_text(chunk: Union[str, BaseMessageChunk]) -> str:
    """Text carried by a raw string or a LangChain message chunk."""
    if isinstance(chunk, str):
        return chunk
    content = chunk.content
    if isinstance(content, str):
        return content
    # Content blocks (e.g. Anthropic thinking + text); only text reaches the user.
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


async def compress_stream(
    chunks: AsyncIterable[Union[str, BaseMessageChunk]],
    compressor: Optional[StreamCompressor] = None,
) -> AsyncIterator[str]:
    """Pass an upstream generation stream through a ``StreamCompressor``.

    Empty outputs are not yielded. The compressor's remainder is flushed
    when the upstream stream ends. If the consumer stops early the
    compressor is simply dropped.

    Args:
        chunks (AsyncIterable[Union[str, BaseMessageChunk]]): Upstream chunks,
            e.g. ``llm.astream(messages)``.
        compressor (Optional[StreamCompressor]): Compressor owned by this
            stream. A new one from settings is created when ``None``.

    Yields:
        str: Text to forward to the client.
    """
    if compressor is None:
        compressor = new_stream_compressor()

    async for chunk in chunks:
        text = _chunk_text(chunk)
        if not text:
            continue
        out = compressor.process_chunk(text)
        if out:
            yield out

    remainder = compressor.flush()
    if remainder:
        yield remainder


def postprocess_response(
    text: str,
    mode: Optional[Union[CompressionMode, str]] = None,
) -> CompressionResult:
    """Compress a complete (non-streamed) response.

    Args:
        text (str): Full model output.
        mode (Optional[Union[CompressionMode, str]]): Explicit mode or
            ``"auto"``. Defaults to ``settings.RESPONSE_COMPRESSION_MODE``.

    Returns:
        CompressionResult: Compressed text and statistics. Identity when
            ``settings.RESPONSE_COMPRESSION_ENABLED`` is off.
    """
    if not settings.RESPONSE_COMPRESSION_ENABLED:
        return compress_response(text, CompressionMode.NONE)

    resolved = mode or settings.RESPONSE_COMPRESSION_MODE
    if resolved == AUTO_MODE:
        return auto_compress(text)

    result = compress_response(text, resolved)
    logger.info(
        "Response compressed (%s): %d -> %d chars, ~%d tokens removed",
        getattr(resolved, "value", resolved),
        result.original_length,
        result.compressed_length,
        result.tokens_removed,
    )
    return result


def summarize_response(text: str, max_length: Optional[int] = None) -> str:
    """Short summary of a complete response, e.g. for notifications.

    Args:
        text (str): Full model output.
        max_length (Optional[int]): Character limit. Defaults to
            ``settings.SUMMARY_MAX_LENGTH``.

    Returns:
        str: Summary within the limit.
    """
    if max_length is None:
        max_length = settings.SUMMARY_MAX_LENGTH
    return extract_summary(text, max_length)
