"""
Input filtering before vectorization.

Uploaded "documents" are sometimes binary payloads or extraction placeholders
rather than text. These are dropped so they do not form clusters of their own.
"""

import logging
import re
from typing import Any, List, Sequence, Tuple

logger = logging.getLogger(__name__)

BINARY_PREFIXES = ("data:", "PK", "%PDF")

# Control characters (tab, newline, carriage return allowed) and the upper
# Latin-1 range, checked in the first 100 characters only.
_BINARY_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\xFF]")

_PLACEHOLDER_MARKERS = ("File:", "Type:", "Size:")
_PLACEHOLDER_MAX_LINES = 10


def is_likely_binary(text: str) -> bool:
    """
    Heuristic check for binary data or a file placeholder posing as text.

    True for data URLs, zip containers (PK), PDF headers, control or high-byte
    characters near the start, and short "File:/Type:/Size:" placeholder blocks.
    """
    if text.startswith(BINARY_PREFIXES):
        return True
    if _BINARY_CHARS.search(text[:100]):
        return True
    if all(marker in text for marker in _PLACEHOLDER_MARKERS):
        if len(text.split("\n")) < _PLACEHOLDER_MAX_LINES:
            return True
    return False


def prepare_documents(
    documents: Sequence[Any],
    min_length: int = 10,
) -> Tuple[List[str], List[int]]:
    """
    Keep usable text documents.

    Args:
        documents: Caller-supplied documents (non-strings are rejected)
        min_length: Minimum number of characters

    Returns:
        (accepted_texts, accepted_indices) where accepted_indices are positions
        in the caller's list
    """
    accepted_texts: List[str] = []
    accepted_indices: List[int] = []

    for index, document in enumerate(documents):
        if document is None:
            logger.debug(f"Document {index}: missing")
            continue
        if not isinstance(document, str):
            logger.debug(f"Document {index}: not a string ({type(document).__name__})")
            continue

        is_binary = is_likely_binary(document)
        is_blank = not document.strip()
        is_short = len(document) < min_length
        logger.debug(
            f"Document {index}: length={len(document)}, binary={is_binary}, "
            f"blank={is_blank}, too_short={is_short}"
        )

        if is_binary or is_blank or is_short:
            continue
        accepted_texts.append(document)
        accepted_indices.append(index)

    logger.info(
        f"Accepted {len(accepted_texts)} of {len(documents)} documents "
        f"({len(documents) - len(accepted_texts)} filtered)"
    )
    return accepted_texts, accepted_indices
