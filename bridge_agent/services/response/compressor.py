# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Response compression.

Post-processes generated text to strip verbosity or reduce it to key points.
Modes, in increasing strength:

  none        identity
  light       filler phrase removal + whitespace normalization
  moderate    light + example sections (long text) + transition fillers
  aggressive  first sentence + up to 5 key points + code blocks verbatim

Token counts are estimated as ``ceil(chars / 4)``; they drive mode
selection and reporting only, never budget arithmetic.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Pattern, Sequence, Union

from bridge_agent.models import CompressionMode

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4

# Estimated-token thresholds for auto_compress
AUTO_LIGHT_TOKENS = 500
AUTO_MODERATE_TOKENS = 1500
AUTO_AGGRESSIVE_TOKENS = 3000

EXAMPLE_STRIP_MIN_CHARS = 1000
MAX_KEY_POINTS = 5
MAX_SUMMARY_SENTENCES = 3
CODE_BLOCK_PLACEHOLDER = "[code block]"

FILLER_PHRASES: Sequence[Pattern[str]] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"I'll help you with that\.\s*",
        r"Let me help you\s*",
        r"I understand that you want to\s*",
        r"Based on your request,?\s*",
        r"As you can see,?\s*",
        r"It's important to note that\s*",
        r"Please note that\s*",
        r"I hope this helps!?\s*",
        r"Feel free to ask if you have any questions\.?\s*",
        r"Let me know if you need anything else\.?\s*",
        r"Is there anything else I can help you with\??\s*",
    )
)

TRANSITION_FILLERS: Sequence[Pattern[str]] = (
    re.compile(r"In other words,\s+", re.IGNORECASE),
    re.compile(r"To put it another way,\s+", re.IGNORECASE),
)

_EXAMPLE_SECTION_RE = re.compile(r"Example:.+?(?=\n\n|\n#|\Z)", re.IGNORECASE | re.DOTALL)
_CODE_BLOCK_RE = re.compile(r"```.+?```", re.DOTALL)
_NUMBERED_ITEM_RE = re.compile(r"^\d+\.\s+(.+)$", re.MULTILINE)
_BULLET_ITEM_RE = re.compile(r"^[-*]\s+(.+)$", re.MULTILINE)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+\s+")
_MULTI_NEWLINE_RE = re.compile(r"\n{3,}")
_MULTI_SPACE_RE = re.compile(r" {2,}")


@dataclass
class CompressionResult:
    """Outcome of compressing one response.

    Attributes:
        compressed (str): The compressed text.
        original_length (int): Character count before compression.
        compressed_length (int): Character count after compression.
        compression_ratio (float): ``compressed_length / original_length``
            (1.0 for empty input).
        tokens_removed (int): Difference of the token estimates.
    """

    compressed: str
    original_length: int
    compressed_length: int
    compression_ratio: float
    tokens_removed: int


@dataclass
class CompressionReport:
    """Aggregate statistics over several compression results.

    Attributes:
        total_original_tokens (int): Sum of estimated original tokens.
        total_compressed_tokens (int): Sum of estimated compressed tokens.
        total_tokens_saved (int): Sum of ``tokens_removed``.
        average_compression_ratio (float): Mean ratio (0.0 when empty).
        responses_processed (int): Number of results aggregated.
    """

    total_original_tokens: int
    total_compressed_tokens: int
    total_tokens_saved: int
    average_compression_ratio: float
    responses_processed: int


def estimate_tokens(text: str) -> int:
    """Approximate token count (1 token ~ 4 characters).

    Args:
        text (str): Text to estimate.

    Returns:
        int: ``ceil(len(text) / 4)``.
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _remove_verbosity(text: str) -> str:
    for pattern in FILLER_PHRASES:
        text = pattern.sub("", text)
    return text


def _normalize_whitespace(text: str) -> str:
    text = _MULTI_NEWLINE_RE.sub("\n\n", text)
    text = _MULTI_SPACE_RE.sub(" ", text)
    return text.strip()


def _split_sentences(text: str) -> List[str]:
    """Sentence fragments, terminal punctuation stripped, empties dropped."""
    fragments = (s.strip().rstrip(".!?") for s in _SENTENCE_SPLIT_RE.split(text.strip()))
    return [f for f in fragments if f]


def extract_key_points(text: str) -> List[str]:
    """Collect numbered list items, then bullet items, in document order.

    Args:
        text (str): Text to scan.

    Returns:
        List[str]: Item texts without their list markers.
    """
    points = [m.strip() for m in _NUMBERED_ITEM_RE.findall(text)]
    points.extend(m.strip() for m in _BULLET_ITEM_RE.findall(text))
    return points


def _format_key_points(points: List[str]) -> str:
    return "\n".join(f"- {p}" for p in points[:MAX_KEY_POINTS])


def _create_summary(text: str) -> str:
    """First sentence plus key points, or the first few sentences."""
    sentences = _split_sentences(text)
    key_points = extract_key_points(text)

    if not key_points:
        if not sentences:
            return ""
        return ". ".join(sentences[:MAX_SUMMARY_SENTENCES]) + "."

    first_sentence = sentences[0] if sentences else ""
    return f"{first_sentence}.\n\nKey Points:\n{_format_key_points(key_points)}"


def _compress_light(text: str) -> str:
    return _normalize_whitespace(_remove_verbosity(text))


def _compress_moderate(text: str) -> str:
    compressed = _remove_verbosity(text)

    if len(compressed) > EXAMPLE_STRIP_MIN_CHARS:
        compressed = _EXAMPLE_SECTION_RE.sub("", compressed)

    for pattern in TRANSITION_FILLERS:
        compressed = pattern.sub("", compressed)

    return _normalize_whitespace(compressed)


def _compress_aggressive(text: str) -> str:
    code_blocks = extract_code_blocks(text)
    key_points = extract_key_points(text)

    if not code_blocks and not key_points:
        return _create_summary(text)

    sentences = _split_sentences(text)
    parts = [(sentences[0] if sentences else "") + "."]

    if key_points:
        parts.append("\n\nKey Points:\n")
        parts.append(_format_key_points(key_points))

    if code_blocks:
        parts.append("\n\n" + "\n\n".join(code_blocks))

    return "".join(parts)


_COMPRESSORS = {
    CompressionMode.LIGHT: _compress_light,
    CompressionMode.MODERATE: _compress_moderate,
    CompressionMode.AGGRESSIVE: _compress_aggressive,
}


def _coerce_mode(mode: Union[CompressionMode, str]) -> CompressionMode:
    try:
        return CompressionMode(mode)
    except ValueError:
        logger.warning("Unknown compression mode %r, leaving text unchanged", mode)
        return CompressionMode.NONE


def _build_result(original: str, compressed: str) -> CompressionResult:
    original_length = len(original)
    compressed_length = len(compressed)
    ratio = compressed_length / original_length if original_length else 1.0
    return CompressionResult(
        compressed=compressed,
        original_length=original_length,
        compressed_length=compressed_length,
        compression_ratio=ratio,
        tokens_removed=estimate_tokens(original) - estimate_tokens(compressed),
    )


def compress_response(
    text: str,
    mode: Union[CompressionMode, str] = CompressionMode.LIGHT,
) -> CompressionResult:
    """Compress a response with the given mode.

    Compression never lengthens text: if a mode's output would be longer
    than the input (short text in aggressive mode), the input is kept.

    Args:
        text (str): Response text.
        mode (Union[CompressionMode, str]): Compression strength. Unknown
            values behave like ``none``.

    Returns:
        CompressionResult: Compressed text and size statistics.
    """
    resolved = _coerce_mode(mode)
    compressor = _COMPRESSORS.get(resolved)
    if compressor is None:
        return _build_result(text, text)

    compressed = compressor(text)
    if len(compressed) > len(text):
        compressed = text

    return _build_result(text, compressed)


def select_mode(text: str) -> CompressionMode:
    """Compression mode for a response of this size.

    Args:
        text (str): Response text.

    Returns:
        CompressionMode: ``none`` under 500 estimated tokens, ``light`` under
            1500, ``moderate`` under 3000, otherwise ``aggressive``.
    """
    tokens = estimate_tokens(text)
    if tokens < AUTO_LIGHT_TOKENS:
        return CompressionMode.NONE
    if tokens < AUTO_MODERATE_TOKENS:
        return CompressionMode.LIGHT
    if tokens < AUTO_AGGRESSIVE_TOKENS:
        return CompressionMode.MODERATE
    return CompressionMode.AGGRESSIVE


def auto_compress(text: str) -> CompressionResult:
    """Compress with a mode chosen from the estimated token count.

    Args:
        text (str): Response text.

    Returns:
        CompressionResult: Result of ``compress_response`` with the chosen mode.
    """
    mode = select_mode(text)
    logger.info("Auto compression mode: %s (%d estimated tokens)", mode.value, estimate_tokens(text))
    return compress_response(text, mode)


def extract_summary(text: str, max_length: int = 500) -> str:
    """Summarize a response within a character limit.

    Args:
        text (str): Response text.
        max_length (int): Maximum summary length. Defaults to 500.

    Returns:
        str: Summary; cut to ``max_length - 3`` characters plus ``"..."``
            when longer than ``max_length``.
    """
    summary = _create_summary(text)
    if len(summary) <= max_length:
        return summary
    if max_length < 3:
        return "..."[: max(max_length, 0)]
    return summary[: max_length - 3] + "..."


def remove_code_blocks(text: str) -> str:
    """Replace each fenced code block with ``[code block]``.

    Args:
        text (str): Response text.

    Returns:
        str: Text without fenced code blocks.
    """
    return _CODE_BLOCK_RE.sub(CODE_BLOCK_PLACEHOLDER, text)


def extract_code_blocks(text: str) -> List[str]:
    """All fenced code blocks, fences included, in order.

    Args:
        text (str): Response text.

    Returns:
        List[str]: Matched blocks, or an empty list.
    """
    return _CODE_BLOCK_RE.findall(text)


def compress_selective(
    text: str,
    preserve_patterns: Iterable[Union[Pattern[str], str]] = (),
) -> CompressionResult:
    """Moderately compress text while keeping matches of given patterns.

    Any match that moderate compression removed is appended back after the
    compressed text.

    Args:
        text (str): Response text.
        preserve_patterns (Iterable[Union[Pattern[str], str]]): Regexes whose
            matches must survive compression.

    Returns:
        CompressionResult: Compressed text and size statistics.
    """
    preserved: List[str] = []
    for pattern in preserve_patterns:
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        preserved.extend(m.group(0) for m in regex.finditer(text) if m.group(0))

    compressed = _compress_moderate(text)
    for match in preserved:
        if match not in compressed:
            compressed += "\n\n" + match

    return _build_result(text, _normalize_whitespace(compressed))


def create_compression_report(results: Sequence[CompressionResult]) -> CompressionReport:
    """Aggregate compression statistics.

    Args:
        results (Sequence[CompressionResult]): Results to aggregate.

    Returns:
        CompressionReport: Token totals, savings and the mean ratio.
    """
    if not results:
        return CompressionReport(0, 0, 0, 0.0, 0)

    total_original = sum(math.ceil(r.original_length / CHARS_PER_TOKEN) for r in results)
    total_compressed = sum(math.ceil(r.compressed_length / CHARS_PER_TOKEN) for r in results)
    return CompressionReport(
        total_original_tokens=total_original,
        total_compressed_tokens=total_compressed,
        total_tokens_saved=sum(r.tokens_removed for r in results),
        average_compression_ratio=sum(r.compression_ratio for r in results) / len(results),
        responses_processed=len(results),
    )
