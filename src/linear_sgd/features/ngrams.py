"""Word n-gram expansion for hashed text features."""

from __future__ import annotations

from collections.abc import Sequence

NGRAM_SEPARATOR = '_'


def make_ngrams(words: Sequence[str], ngrams: int) -> list[str]:
    """Expand words into unigrams plus the n-grams starting at each word.

    For every position the word itself is emitted first, followed by the
    grams that extend it with the next 1..ngrams-1 words. Grams are cut short
    at the end of the sentence. ``ngrams`` of 0 or 1 returns the unigrams.

    >>> make_ngrams(['a', 'b', 'c'], 2)
    ['a', 'a_b', 'b', 'b_c', 'c']
    """
    if ngrams < 0:
        raise ValueError(f'ngrams must not be negative, got {ngrams}')

    result: list[str] = []
    for i, word in enumerate(words):
        feature = word
        result.append(feature)
        for j in range(1, ngrams):
            if i + j >= len(words):
                break
            feature = f'{feature}{NGRAM_SEPARATOR}{words[i + j]}'
            result.append(feature)
    return result
