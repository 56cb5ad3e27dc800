"""
Category-based cluster labeling.

Each category of the catalogue is scored against a cluster:

- every keyword contained in the cluster's lower-cased text adds
  frequency_weight * frequency when the keyword has a measured frequency,
  otherwise presence_score;
- every top term that is a substring of a keyword (or contains one) adds
  top_term_bonus.

The highest positive score wins; ties go to the category listed first.
"""

import logging
from typing import Iterable, List, Mapping, Optional, Sequence

from docluster.config import LabelingConfig
from docluster.vectorization.catalogue import LABEL_CATEGORIES, LabelCategory

logger = logging.getLogger(__name__)


def make_unique(labels: Iterable[str]) -> List[str]:
    """
    Disambiguate repeated labels.

    The first occurrence is kept; later ones become "Label (2)", "Label (3)",
    ... skipping any candidate that is already taken.
    """
    taken = set()
    counts = {}
    unique = []
    for label in labels:
        if label not in taken:
            counts.setdefault(label, 1)
            taken.add(label)
            unique.append(label)
            continue

        n = counts.get(label, 1)
        candidate = label
        while candidate in taken:
            n += 1
            candidate = f"{label} ({n})"
        counts[label] = n
        taken.add(candidate)
        unique.append(candidate)
    return unique


class ClusterLabeler:
    """Assigns a display label to a cluster from its texts and top terms."""

    def __init__(
        self,
        categories: Optional[Sequence[LabelCategory]] = None,
        config: Optional[LabelingConfig] = None,
    ):
        self.categories = tuple(LABEL_CATEGORIES if categories is None else categories)
        self.config = config or LabelingConfig()

    def score(
        self,
        category: LabelCategory,
        combined_text: str,
        top_terms: Sequence[str],
        term_frequency: Mapping[str, int],
    ) -> float:
        """Score of one category for already lower-cased cluster text."""
        keywords = [k.lower() for k in category.keywords]
        score = 0.0

        for keyword in keywords:
            if keyword in combined_text:
                frequency = term_frequency.get(keyword, 0)
                if frequency > 0:
                    score += self.config.frequency_weight * frequency
                else:
                    score += self.config.presence_score

        for term in top_terms:
            term = term.lower()
            if any(term in keyword or keyword in term for keyword in keywords):
                score += self.config.top_term_bonus

        return score

    def fallback_label(self, top_terms: Sequence[str]) -> str:
        main_terms = [t[:1].upper() + t[1:] for t in top_terms[:3]]
        main_terms = [t for t in main_terms if len(t) > 2]
        if main_terms:
            return f"{', '.join(main_terms)} Documents"
        return self.config.fallback_label

    def label(
        self,
        cluster_texts: Sequence[str],
        top_terms: Sequence[str],
        term_frequency: Optional[Mapping[str, int]] = None,
    ) -> str:
        """
        Pick a label for one cluster.

        Args:
            cluster_texts: Raw texts of the cluster's documents
            top_terms: The cluster's most frequent key terms
            term_frequency: Key term -> number of the cluster's documents listing it

        Returns:
            Category label, or a label built from the top terms
        """
        term_frequency = term_frequency or {}
        combined_text = " ".join(cluster_texts).lower()

        best_category = None
        best_score = 0.0
        for category in self.categories:
            score = self.score(category, combined_text, top_terms, term_frequency)
            # Strictly greater keeps the earlier category on ties
            if score > best_score:
                best_score = score
                best_category = category

        if best_category is not None:
            logger.debug(f"Label {best_category.label!r} scored {best_score}")
            return best_category.label

        label = self.fallback_label(top_terms)
        logger.debug(f"No category matched, using fallback label {label!r}")
        return label
