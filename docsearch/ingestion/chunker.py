"""Sentence-boundary-aware text chunker with overlapping windows."""

import logging

from docsearch.errors import InvalidParameterError
from docsearch.ingestion.cleaner import normalize_text
from docsearch.models.chunk import Chunk
from docsearch.models.enums import SourceType

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = ".!?"
MAX_BREAK_WINDOW = 100


def validate_chunk_params(chunk_size: int, overlap: int, min_chunk_size: int) -> None:
    """Raise InvalidParameterError for malformed chunking parameters."""
    if chunk_size <= 0:
        raise InvalidParameterError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise InvalidParameterError(f"overlap cannot be negative, got {overlap}")
    if overlap >= chunk_size:
        raise InvalidParameterError(
            f"overlap must be less than chunk_size, got overlap={overlap}, chunk_size={chunk_size}"
        )
    if min_chunk_size <= 0:
        raise InvalidParameterError(f"min_chunk_size must be positive, got {min_chunk_size}")


def find_break_point(text: str, start: int, end: int, chunk_size: int, min_chunk_size: int) -> int:
    """Pick the end offset of the window starting at ``start``.

    Scans ``[end - window, end + window)`` right to left for the latest
    ``.``, ``!`` or ``?`` followed by whitespace or the end of the text, and
    returns the offset just past it. Returns ``end`` unchanged when the
    window holds no sentence boundary. The search never starts before
    ``start + min_chunk_size``.

    The whitespace check rejects periods inside tokens such as "3.14" or
    "e.g" but still splits after "Dr. Smith".
    """
    break_window = min(MAX_BREAK_WINDOW, chunk_size // 4)
    search_start = max(end - break_window, start + min_chunk_size)
    search_end = min(end + break_window, len(text))

    for i in range(search_end - 1, search_start - 1, -1):
        if text[i] in SENTENCE_TERMINATORS:
            if i == len(text) - 1 or text[i + 1].isspace():
                return i + 1
    return end


def chunk_text(
    text: str,
    chunk_size: int = 1200,
    overlap: int = 200,
    min_chunk_size: int = 100,
    source_id: str = "",
    source_type: SourceType = SourceType.PDF,
) -> list[Chunk]:
    """Split a document into overlapping, sentence-aligned chunks.

    The text is normalized first (see ``normalize_text``); chunk offsets
    are half-open ranges into the normalized text. Documents no longer than
    ``chunk_size`` become a single chunk regardless of ``min_chunk_size``.
    Longer documents are windowed: each window ends at the latest sentence
    boundary near ``start + chunk_size``, windows shorter than
    ``min_chunk_size`` are dropped unless they reach the end of the text,
    and the next window starts ``overlap`` characters before the previous
    end (always at least one character further than the previous start).

    Raises:
        InvalidParameterError: If any size parameter is out of range.
    """
    validate_chunk_params(chunk_size, overlap, min_chunk_size)

    cleaned = normalize_text(text)
    if not cleaned:
        logger.warning("No text to chunk for source %r", source_id)
        return []

    length = len(cleaned)
    logger.debug(
        "Chunking %d chars from %r (chunk_size=%d, overlap=%d)",
        length, source_id, chunk_size, overlap,
    )

    if length <= chunk_size:
        return [
            Chunk(
                text=cleaned,
                source_id=source_id,
                source_type=source_type,
                chunk_index=0,
                start_char=0,
                end_char=length,
            )
        ]

    chunks: list[Chunk] = []
    start = 0
    chunk_index = 0

    while start < length:
        end = start + chunk_size
        if end < length:
            end = find_break_point(cleaned, start, end, chunk_size, min_chunk_size)
        end = min(end, length)

        piece = cleaned[start:end].strip()
        reaches_end = end >= length

        if piece and (len(piece) >= min_chunk_size or reaches_end):
            chunks.append(
                Chunk(
                    text=piece,
                    source_id=source_id,
                    source_type=source_type,
                    chunk_index=chunk_index,
                    start_char=start,
                    end_char=end,
                )
            )
            logger.debug("Chunk %d: [%d, %d) %d chars", chunk_index, start, end, len(piece))
            chunk_index += 1

        if reaches_end:
            break
        start = max(start + 1, end - overlap)

    logger.info(
        "Chunked %r into %d chunks (avg %d chars)",
        source_id,
        len(chunks),
        sum(len(c) for c in chunks) // max(1, len(chunks)),
    )
    return chunks
