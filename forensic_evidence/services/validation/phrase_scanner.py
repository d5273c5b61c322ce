"""Forbidden-phrase scanning and sanitization over the rule table."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from forensic_evidence.services.validation.rule_table import (
    Rule,
    RuleTable,
    get_rule_table,
)
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)

CONTEXT_WINDOW = 100
INFERENCE_REPLACEMENT = "[INFERENCE REMOVED]"


@dataclass(frozen=True)
class PhraseMatch:
    """A forbidden phrase found in a text.

    Attributes:
        phrase: Normalized phrase from the rule table
        start: Offset of the match in the scanned text
        end: End offset of the match (exclusive)
        context: Text surrounding the match
    """

    phrase: str
    start: int
    end: int
    context: str


@dataclass(frozen=True)
class SanitizedText:
    """Text with forbidden phrases replaced."""

    sanitized: str
    removed_phrases: Tuple[str, ...] = field(default=())

    @property
    def was_modified(self) -> bool:
        return bool(self.removed_phrases)


def extract_context(text: str, position: int, length: int = CONTEXT_WINDOW) -> str:
    """Return the text around a position, with ``...`` where it was cut."""
    half = length // 2
    start = max(0, position - half)
    end = min(len(text), position + half)

    context = text[start:end]
    if start > 0:
        context = "..." + context
    if end < len(text):
        context = context + "..."
    return context


def find_phrases(text: str, rule: Rule) -> List[PhraseMatch]:
    """Find the first occurrence of each of a rule's phrases in text.

    Args:
        text: Text to scan
        rule: Phrase rule from the rule table

    Returns:
        One match per phrase present, in rule-table order
    """
    if not text:
        return []

    matches = []
    for phrase_rule in rule.phrases:
        match = phrase_rule.pattern.search(text)
        if match:
            matches.append(
                PhraseMatch(
                    phrase=phrase_rule.phrase,
                    start=match.start(),
                    end=match.end(),
                    context=extract_context(text, match.start()),
                )
            )
    return matches


def sanitize_text(text: str, table: Optional[RuleTable] = None) -> SanitizedText:
    """Replace every forbidden phrase in text with a removal marker.

    Longer phrases are replaced first so ``this could be`` is removed whole
    instead of leaving ``this`` behind a ``could be`` replacement.

    Args:
        text: Text to sanitize
        table: Rule table (default: process-wide table)

    Returns:
        SanitizedText: Sanitized text and the phrases that were removed
    """
    if not text:
        return SanitizedText(sanitized=text or "")

    table = table or get_rule_table()
    phrase_rules = sorted(
        {p.phrase: p for rule in table.phrase_rules for p in rule.phrases}.values(),
        key=lambda p: len(p.phrase),
        reverse=True,
    )

    sanitized = text
    removed = []
    for phrase_rule in phrase_rules:
        sanitized, count = phrase_rule.pattern.subn(INFERENCE_REPLACEMENT, sanitized)
        if count:
            removed.append(phrase_rule.phrase)

    if removed:
        LOGGER.info(f"Sanitized {len(removed)} forbidden phrases")
    return SanitizedText(sanitized=sanitized, removed_phrases=tuple(removed))
