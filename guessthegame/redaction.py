# guessthegame/redaction.py
from __future__ import annotations

import re
from typing import List

from guessthegame.config import REDACTION_MARKER

STOP_WORDS = frozenset([
    "a", "an", "the", "and", "or", "but", "nor", "yet", "so",
    "at", "by", "for", "in", "of", "on", "to", "up", "with", "from",
    "is", "are", "was", "were", "be", "been", "being",
    "it", "its", "this", "that", "these", "those",
    "game", "video", "series", "edition", "version",
    "episode", "part", "vol", "volume", "chapter", "season",
    "remastered", "remake", "definitive", "collection", "anthology", "bundle", "pack",
])

_SPLITTERS = re.compile(r"[:\-–—]")
_NUMBER_SUFFIX = re.compile(r"\s+(I{1,3}|IV|VI{0,3}|IX|X|XI{0,3}|\d+)$", re.IGNORECASE)
_PUNCTUATION = re.compile(r"[^\w\s]")


def name_variants(answer: str) -> List[str]:
    """
    Every way a synopsis might spell out the answer, longest first so whole
    phrases get replaced before their component words.
    """
    variants = [answer]

    for part in _SPLITTERS.split(answer):
        part = part.strip()
        if len(part) >= 3:
            variants.append(part)

    base = _NUMBER_SUFFIX.sub("", answer)
    base = re.sub(r"[:\-–]", " ", base).strip()
    if len(base) >= 4 and base != answer:
        variants.append(base)

    for token in _PUNCTUATION.sub("", answer.lower()).split():
        if token not in STOP_WORDS and len(token) >= 3:
            variants.append(token)

    seen = set()
    out: List[str] = []
    for v in (v.strip() for v in variants):
        if len(v) >= 3 and v not in seen:
            seen.add(v)
            out.append(v)
    # stable sort keeps first-seen order among equal lengths
    out.sort(key=len, reverse=True)
    return out


def redact(text: str, answer_name: str) -> str:
    """Replace every giveaway of `answer_name` in `text` with the marker."""
    alternatives = []
    for variant in name_variants(answer_name):
        escaped = re.escape(variant)
        # phrases match literally, single tokens only as whole words
        alternatives.append(escaped if " " in variant else r"\b" + escaped + r"\b")
    if not alternatives:
        return text
    # alternation is tried left to right, so longer variants still win
    pattern = re.compile("|".join(alternatives), re.IGNORECASE)

    # one pass per segment; markers already in the text are never rescanned
    segments = text.split(REDACTION_MARKER)
    redacted = REDACTION_MARKER.join(
        pattern.sub(lambda _m: REDACTION_MARKER, segment) for segment in segments)

    marker = re.escape(REDACTION_MARKER)
    return re.sub(marker + r"(\s*" + marker + r")+", REDACTION_MARKER, redacted)
