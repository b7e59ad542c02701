"""Text normalization applied to every document before chunking."""

import re

# Control characters other than \t, \n and \r, plus DEL and the byte-order mark
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ufeff]")
_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Clean extracted document text.

    Removes null bytes, control characters and BOMs, normalizes line
    endings, collapses whitespace runs to a single space and keeps at most
    one blank line between paragraphs. Offsets of emitted chunks refer to
    the text returned here.
    """
    if not text:
        return ""

    text = _CONTROL_CHARS.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _normalize_whitespace(text)
    return text.strip()


def _normalize_whitespace(text: str) -> str:
    """Normalize whitespace while preserving paragraph breaks."""
    text = _HORIZONTAL_WS.sub(" ", text)
    # Spaces hugging a newline carry no information
    text = re.sub(r" ?\n ?", "\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text
