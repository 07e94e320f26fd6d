"""Text normalization and fuzzy term matching for transcript search."""

import re
import unicodedata

# Combining Diacritical Marks block
_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WORD_SPLIT = re.compile(r"\W+")

# Terms of this length or shorter are only ever matched as substrings.
FUZZY_MIN_LENGTH = 3
# Terms up to this length tolerate one edit; longer terms tolerate two.
SHORT_TERM_LENGTH = 5


def normalize_text(text: str) -> str:
    """Fold case and strip diacritics.

    Lowercases, applies canonical (NFD) decomposition and removes the
    combining marks, so "João" and "JOAO" both become "joao". The result
    is stable: ``normalize_text(normalize_text(s)) == normalize_text(s)``.

    Args:
        text: Raw text.

    Returns:
        Normalized text.
    """
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", text.lower()))


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit insertion, deletion and substitution costs."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(a) + 1))
    for j, char_b in enumerate(b, start=1):
        current = [j]
        for i, char_a in enumerate(a, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    current[i - 1] + 1,
                    previous[i] + 1,
                    previous[i - 1] + cost,
                )
            )
        previous = current
    return previous[-1]


def fuzzy_threshold(term: str) -> int:
    """Maximum edit distance tolerated for a normalized term."""
    return 1 if len(term) <= SHORT_TERM_LENGTH else 2


def match_term(normalized_content: str, raw_term: str) -> bool:
    """Match a single search term against normalized content.

    The term matches when its normalized form is a substring of the
    content. Failing that, single-word terms longer than three characters
    are compared word by word using edit distance, which tolerates
    transcription noise such as "lisbao" for "lisboa".

    Args:
        normalized_content: Content already passed through `normalize_text`.
        raw_term: Search term as typed.

    Returns:
        True if the term matches exactly or approximately.

    Example:
        >>> match_term(normalize_text("Vou para Lisboa"), "lisbao")
        True
    """
    term = normalize_text(raw_term)
    if term in normalized_content:
        return True

    if len(term) <= FUZZY_MIN_LENGTH or any(ch.isspace() for ch in term):
        return False

    threshold = fuzzy_threshold(term)
    for word in _WORD_SPLIT.split(normalized_content):
        if abs(len(word) - len(term)) > threshold:
            continue
        if levenshtein_distance(word, term) <= threshold:
            return True
    return False


def match_phrase(normalized_content: str, phrase: str) -> bool:
    """Exact (normalized) substring match, never fuzzy."""
    return normalize_text(phrase) in normalized_content
