# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Streaming compression.

``StreamCompressor`` batches streamed text: chunks are forwarded untouched
while fewer than ``sentence_threshold`` sentences are buffered; once the
threshold is reached the whole buffer is compressed and emitted in place of
the chunk that crossed it.

State machine:

  BUFFERING --threshold reached--> FLUSHED --next chunk--> BUFFERING

Chunks forwarded while BUFFERING have already reached the client, so the
batch emitted on the transition repeats them in compressed form. Callers that
need the compressed text only should forward ``""`` until ``state`` is
``FLUSHED``.

One instance per in-flight stream. Instances are not thread-safe and must
not be shared between requests.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Union

from bridge_agent.models import CompressionMode
from bridge_agent.services.response.compressor import compress_response

logger = logging.getLogger(__name__)

DEFAULT_SENTENCE_THRESHOLD = 3

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+\s+")


class StreamState(str, Enum):
    """Lifecycle of a ``StreamCompressor`` batch.

    Attributes:
        BUFFERING (str): Accumulating chunks below the sentence threshold.
        FLUSHED (str): The last chunk completed a batch; the buffer is empty.
    """

    BUFFERING = "buffering"
    FLUSHED = "flushed"


def count_sentences(text: str) -> int:
    """Number of non-empty fragments when splitting on sentence terminators.

    A trailing terminator followed by whitespace does not open a new
    sentence, so ``"A. B. "`` counts as two.

    Args:
        text (str): Buffered text.

    Returns:
        int: Sentence count.
    """
    return sum(1 for fragment in _SENTENCE_SPLIT_RE.split(text) if fragment.strip())


class StreamCompressor:
    """Per-stream batching compressor.

    Args:
        mode (Union[CompressionMode, str]): Compression applied to each batch.
            Defaults to ``light``.
        sentence_threshold (int): Sentences buffered before a batch is
            compressed. Defaults to 3.
    """

    def __init__(
        self,
        mode: Union[CompressionMode, str] = CompressionMode.LIGHT,
        sentence_threshold: int = DEFAULT_SENTENCE_THRESHOLD,
    ) -> None:
        self._mode = CompressionMode(mode)
        self._sentence_threshold = max(1, sentence_threshold)
        self._buffer = ""
        self._state = StreamState.BUFFERING

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def mode(self) -> CompressionMode:
        return self._mode

    @property
    def sentence_threshold(self) -> int:
        return self._sentence_threshold

    @property
    def state(self) -> StreamState:
        return self._state

    def process_chunk(self, chunk: str) -> str:
        """Buffer a streamed chunk and decide what to forward.

        Args:
            chunk (str): Raw text chunk from the model.

        Returns:
            str: ``chunk`` unchanged while below the threshold, otherwise the
                compressed text of the entire buffer.
        """
        self._state = StreamState.BUFFERING
        self._buffer += chunk

        if count_sentences(self._buffer) < self._sentence_threshold:
            return chunk

        result = compress_response(self._buffer, self._mode)
        logger.debug(
            "Stream batch compressed: %d -> %d chars",
            result.original_length,
            result.compressed_length,
        )
        self._buffer = ""
        self._state = StreamState.FLUSHED
        return result.compressed

    def flush(self) -> str:
        """Compress and return whatever is still buffered.

        Returns:
            str: Compressed remainder, or ``""`` if the buffer is empty.
        """
        if not self._buffer:
            self._state = StreamState.FLUSHED
            return ""

        result = compress_response(self._buffer, self._mode)
        self._buffer = ""
        self._state = StreamState.FLUSHED
        return result.compressed

    def reset(self) -> None:
        """Discard the buffer without emitting anything."""
        self._buffer = ""
        self._state = StreamState.BUFFERING
