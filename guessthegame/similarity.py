# guessthegame/similarity.py
from __future__ import annotations

import re
from typing import List, Optional

STOP_WORDS = frozenset(
    ["the", "a", "an", "of", "and", "or", "in", "on", "at", "to", "for"])

_LEADING_ARTICLE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)

# Applied in order; each match is replaced by a space.
_REMOVAL_PATTERNS = [
    # roman numerals I..XX and plain numbers
    re.compile(r"\b(I{1,3}|IV|V|VI{0,3}|IX|X|XI{0,3}|XIV|XV|XVI{0,3}|XIX|XX)\b",
               re.IGNORECASE),
    re.compile(r"\b\d+\b"),
    # edition markers
    re.compile(r"\b(HD|Remastered|Definitive|Enhanced|Special|Collector'?s?|Ultimate"
               r"|Complete|GOTY|Game of the Year)\s*(Edition)?\b", re.IGNORECASE),
    # platforms
    re.compile(r"\b(PS[1-5]|Xbox|PC|Windows|Mac|Linux|Switch|Mobile|iOS|Android)\b",
               re.IGNORECASE),
    re.compile(r"\b(Online|Offline|Multiplayer|Single[ -]?player)\b", re.IGNORECASE),
    # years
    re.compile(r"\b(19\d{2}|20\d{2})\b"),
    # parentheticals
    re.compile(r"\([^)]*\)"),
]

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Drop articles, numerals, editions, platforms, years; lowercase."""
    normalized = _LEADING_ARTICLE.sub("", name.strip())
    for pattern in _REMOVAL_PATTERNS:
        normalized = pattern.sub(" ", normalized)
    return _WHITESPACE.sub(" ", normalized).strip().lower()


def core_name(name: str) -> str:
    return normalize_name(name.split(":")[0])


def tokenize(name: str) -> List[str]:
    words = _PUNCTUATION.sub(" ", name.lower()).split()
    return [w for w in words if w not in STOP_WORDS]


def first_significant_word(name: str) -> Optional[str]:
    for token in tokenize(name):
        if len(token) >= 3:
            return token
    return None


def token_overlap(a: str, b: str) -> float:
    """Shared tokens as a fraction of the smaller token set."""
    set_a = set(tokenize(a))
    set_b = set(tokenize(b))
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / min(len(set_a), len(set_b))


def _same_core_name(a: str, b: str) -> bool:
    core_a = core_name(a)
    core_b = core_name(b)
    # "the", "star" and friends are too short to mean anything
    if len(core_a) < 3 or len(core_b) < 3:
        return False
    return core_a == core_b


def _same_first_word(a: str, b: str) -> bool:
    # "Metro 2033" / "Metro Exodus" yes, "Call of Duty" / "Call of Juarez" no
    first_a = first_significant_word(a)
    first_b = first_significant_word(b)
    if not first_a or not first_b:
        return False
    return first_a == first_b and len(first_a) >= 4


def _significant_overlap(a: str, b: str) -> bool:
    min_tokens = min(len(tokenize(a)), len(tokenize(b)))
    overlap = token_overlap(a, b)
    if min_tokens < 2:
        return overlap == 1.0
    # "Star Fox" vs "Star Wars" is only 50%
    return overlap >= 0.7


def _substring_match(a: str, b: str) -> bool:
    norm_a = normalize_name(a)
    norm_b = normalize_name(b)
    if len(norm_a) < 3 or len(norm_b) < 3:
        return False
    shorter, longer = (norm_a, norm_b) if len(norm_a) < len(norm_b) else (norm_b, norm_a)
    # word-bounded so "metro" does not hit "metroid"
    return re.search(r"\b" + re.escape(shorter) + r"\b", longer) is not None


def is_same_series(a: str, b: str) -> bool:
    """
    True when two different game names look like the same franchise.
    Only softens wrong-guess feedback; never awards points.
    """
    if a.lower() == b.lower():
        return False
    return (
        _same_core_name(a, b)
        or _same_first_word(a, b)
        or _significant_overlap(a, b)
        or _substring_match(a, b)
    )
