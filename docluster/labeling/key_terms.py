"""
TF-IDF key-term extraction.

tf is the raw count of a term in the document, idf = log(N / df). Terms that
occur in every document therefore score 0 and only fill the tail of the list.
"""

import logging
import math
import re
from collections import Counter
from typing import AbstractSet, List, Optional, Sequence

from docluster.vectorization.catalogue import STOP_WORDS

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(document: str, stop_words: Optional[AbstractSet[str]] = None) -> List[str]:
    """Lower-case, punctuation to spaces, drop stop words and words of length <= 2."""
    stop_words = STOP_WORDS if stop_words is None else stop_words
    normalized = _NON_WORD.sub(" ", document.lower())
    return [w for w in normalized.split() if len(w) > 2 and w not in stop_words]


def _rank_terms(
    tokens: List[str],
    document_frequency: Counter,
    n_documents: int,
    count: int,
) -> List[str]:
    if not tokens:
        return []
    tf = Counter(tokens)
    # Counter keeps first-appearance order; sorted() is stable for ties
    scores = {
        term: freq * math.log(n_documents / max(document_frequency[term], 1))
        for term, freq in tf.items()
    }
    ranked = sorted(scores, key=lambda term: scores[term], reverse=True)
    return ranked[:count]


def extract_all_key_terms(
    documents: Sequence[str],
    count: int = 8,
    stop_words: Optional[AbstractSet[str]] = None,
) -> List[List[str]]:
    """Top `count` TF-IDF terms for every document."""
    tokenized = [tokenize(doc, stop_words) for doc in documents]
    document_frequency: Counter = Counter()
    for tokens in tokenized:
        document_frequency.update(set(tokens))

    key_terms = [
        _rank_terms(tokens, document_frequency, len(documents), count) for tokens in tokenized
    ]
    logger.debug(f"Extracted key terms for {len(documents)} documents")
    return key_terms


def extract_key_terms(
    documents: Sequence[str],
    index: int,
    count: int = 8,
    stop_words: Optional[AbstractSet[str]] = None,
) -> List[str]:
    """
    Top `count` TF-IDF terms of documents[index] against the whole collection.

    Raises:
        IndexError: If index is outside the collection
    """
    if not 0 <= index < len(documents):
        raise IndexError(f"Document index {index} out of range for {len(documents)} documents")

    tokenized = [tokenize(doc, stop_words) for doc in documents]
    document_frequency: Counter = Counter()
    for tokens in tokenized:
        document_frequency.update(set(tokens))
    return _rank_terms(tokenized[index], document_frequency, len(documents), count)
