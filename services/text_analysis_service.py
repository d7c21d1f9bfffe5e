"""Text analysis engine: length, affix, character, casing and format statistics.

Runs on the non-blank display strings of Text and Mixed columns.
"""

from __future__ import annotations

import re
import string
from collections import Counter
from collections.abc import Sequence
from typing import Any

from logger import get_logger
from schemas.profiling import (
    AffixFrequency,
    CaseComposition,
    CharacterComposition,
    FormatMatch,
    LengthStats,
    TextSummary,
)
from services.column_values import display_string, is_blank

logger = get_logger(__name__)

AFFIX_MIN_LENGTH = 2
AFFIX_MAX_LENGTH = 10
AFFIX_MIN_OCCURRENCES = 2
AFFIX_LIMIT = 10
FORMAT_SAMPLE_LIMIT = 5

_ASCII_ALNUM = frozenset(string.ascii_letters + string.digits)
_ASCII_LETTERS = frozenset(string.ascii_letters)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
URL_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})[/\w .-]*/?$", re.IGNORECASE)

# First matching variant wins
PHONE_PATTERNS: dict[str, re.Pattern[str]] = {
    "US": re.compile(r"^(\+1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}$"),
    "UK": re.compile(r"^(\+44[-.\s]?)?(\d{4}[-.\s]?\d{6}|\d{5}[-.\s]?\d{5})$"),
    "DE": re.compile(r"^(\+49[-.\s]?\d{2,4}[-.\s]?\d{5,8}|0\d{2,4}[-.\s]?\d{5,8})$"),
    "FR": re.compile(r"^(\+33[-.\s]?\d[-.\s]?\d{2}[-.\s]?\d{2}[-.\s]?\d{2}[-.\s]?\d{2}|0\d[-.\s]?\d{2}[-.\s]?\d{2}[-.\s]?\d{2}[-.\s]?\d{2})$"),
    "generic": re.compile(r"^\+\d{1,3}[-.\s]?\d{4,14}$"),
}

DATE_PATTERNS: dict[str, re.Pattern[str]] = {
    "ISO 8601": re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2}(\.\d{1,3})?(Z|[+-]\d{2}:\d{2})?)?$"),
    "US format": re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"),
    "EU format": re.compile(r"^\d{1,2}\.\d{1,2}\.\d{2,4}$"),
    "Long format": re.compile(r"^\w{3,9}\s+\d{1,2},?\s+\d{4}$"),
}


def _length_stats(texts: list[str]) -> LengthStats:
    lengths = [len(t) for t in texts]
    freq = Counter(lengths)
    # Ties resolve to the shortest length
    most_common, most_common_count = min(freq.items(), key=lambda kv: (-kv[1], kv[0]))
    return LengthStats(
        min=min(lengths),
        max=max(lengths),
        average=round(sum(lengths) / len(lengths), 2),
        most_common=most_common,
        most_common_count=most_common_count,
    )


def _common_affixes(texts: list[str], *, suffix: bool) -> list[AffixFrequency]:
    """Prefixes (or suffixes) of length 2..10 shared by at least two values."""
    freq: Counter[str] = Counter()
    for t in texts:
        top = min(len(t), AFFIX_MAX_LENGTH)
        for size in range(AFFIX_MIN_LENGTH, top + 1):
            freq[t[-size:] if suffix else t[:size]] += 1

    common = sorted(
        ((affix, count) for affix, count in freq.items() if count >= AFFIX_MIN_OCCURRENCES),
        key=lambda kv: (-kv[1], kv[0]),
    )
    return [
        AffixFrequency(affix=affix, count=count, percentage=round(count / len(texts) * 100, 1))
        for affix, count in common[:AFFIX_LIMIT]
    ]


def _character_composition(texts: list[str]) -> CharacterComposition:
    total = alnum = alpha = digit = special = space = non_ascii = 0
    leading = trailing = 0
    for t in texts:
        total += len(t)
        if t[:1].isspace():
            leading += 1
        if t[-1:].isspace():
            trailing += 1
        for ch in t:
            if ch in _ASCII_ALNUM:
                alnum += 1
                if ch in _ASCII_LETTERS:
                    alpha += 1
                else:
                    digit += 1
            elif ch.isspace():
                space += 1
            else:
                special += 1
            if ord(ch) > 127:
                non_ascii += 1

    def share(n: int) -> float:
        return round(n / total * 100, 1) if total else 0.0

    return CharacterComposition(
        alphanumeric_percentage=share(alnum),
        alphabetic_percentage=share(alpha),
        numeric_percentage=share(digit),
        special_percentage=share(special),
        whitespace_percentage=share(space),
        non_ascii_percentage=share(non_ascii),
        non_ascii_count=non_ascii,
        leading_whitespace_count=leading,
        trailing_whitespace_count=trailing,
    )


def _is_title_case(text: str) -> bool:
    for word in text.split():
        if word[0] not in string.ascii_uppercase:
            return False
        if any(ch in string.ascii_uppercase for ch in word[1:]):
            return False
    return True


def _case_composition(texts: list[str]) -> CaseComposition:
    upper = lower = mixed = title = 0
    for t in texts:
        has_upper = any(ch in string.ascii_uppercase for ch in t)
        has_lower = any(ch in string.ascii_lowercase for ch in t)
        if has_upper and has_lower:
            mixed += 1
            if _is_title_case(t):
                title += 1
        elif has_upper:
            upper += 1
        elif has_lower:
            lower += 1
    return CaseComposition(
        uppercase_count=upper,
        lowercase_count=lower,
        mixed_case_count=mixed,
        title_case_count=title,
    )


class _FormatTally:
    def __init__(self) -> None:
        self.count = 0
        self.samples: list[str] = []
        self.breakdown: Counter[str] = Counter()

    def add(self, value: str, variant: str | None = None) -> None:
        self.count += 1
        if len(self.samples) < FORMAT_SAMPLE_LIMIT:
            self.samples.append(value)
        if variant:
            self.breakdown[variant] += 1

    def to_model(self, total: int) -> FormatMatch:
        return FormatMatch(
            count=self.count,
            percentage=round(self.count / total * 100, 1),
            samples=self.samples,
            breakdown=dict(sorted(self.breakdown.items())),
        )


def _first_match(patterns: dict[str, re.Pattern[str]], value: str) -> str | None:
    for name, pattern in patterns.items():
        if pattern.match(value):
            return name
    return None


def _detect_formats(texts: list[str]) -> dict[str, FormatMatch]:
    tallies = {name: _FormatTally() for name in ("email", "url", "phone", "date_string")}
    for t in texts:
        value = t.strip()
        if EMAIL_PATTERN.match(value):
            tallies["email"].add(value)
        if URL_PATTERN.match(value):
            tallies["url"].add(value)
        phone = _first_match(PHONE_PATTERNS, value)
        if phone:
            tallies["phone"].add(value, phone)
        date_format = _first_match(DATE_PATTERNS, value)
        if date_format:
            tallies["date_string"].add(value, date_format)
    return {name: tally.to_model(len(texts)) for name, tally in tallies.items()}


class TextAnalysisEngine:
    """Computes TextSummary over the non-blank values of a column."""

    def analyze(self, values: Sequence[Any]) -> TextSummary | None:
        """Return None when the column holds no non-blank values."""
        texts = [display_string(v) for v in values if not is_blank(v)]
        if not texts:
            logger.debug("Text analysis skipped: no non-blank values")
            return None
        return TextSummary(
            value_count=len(texts),
            length=_length_stats(texts),
            prefixes=_common_affixes(texts, suffix=False),
            suffixes=_common_affixes(texts, suffix=True),
            characters=_character_composition(texts),
            casing=_case_composition(texts),
            formats=_detect_formats(texts),
        )
