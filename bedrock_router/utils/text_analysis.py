from __future__ import annotations

from typing import Set


def split_words(text: str) -> list:
    return text.split()


def count_words(text: str) -> int:
    # Rough token estimate used by the evaluation report
    return len(split_words(text))


def word_set(text: str) -> Set[str]:
    return set(text.lower().split())


def word_overlap_similarity(output: str, ground_truth: str) -> float:
    """
    Fraction of ground-truth words that also appear in the output.

    Case-insensitive, whitespace tokenised, no stemming. Returns 0.0 when the
    ground truth has no words.
    """
    truth_words = word_set(ground_truth)
    if not truth_words:
        return 0.0
    output_words = word_set(output)
    return len(output_words & truth_words) / len(truth_words)
