"""Versioned redaction rule table.

The rule table is data, not code: forbidden phrases, identity-equivalence
relationship types and uncertainty markers live in ``rules/redaction_rules.yaml``.
It is loaded once per process and shared read-only by every validator.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple

import yaml

from forensic_evidence.config.settings import settings
from forensic_evidence.schemas.validation import ViolationSeverity
from forensic_evidence.utils.exceptions import RuleTableError
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_RULE_TABLE_PATH = Path(__file__).parent / "rules" / "redaction_rules.yaml"


class RuleId(str, Enum):
    """Identifiers of the rules the validator knows how to evaluate."""

    NO_IDENTITY_INFERENCE = "NO_IDENTITY_INFERENCE"
    NO_ENTITY_COLLAPSE = "NO_ENTITY_COLLAPSE"
    NO_PROBABILISTIC_IDENTITY = "NO_PROBABILISTIC_IDENTITY"
    CITATION_REQUIRED = "CITATION_REQUIRED"
    EXPLICIT_UNKNOWNS = "EXPLICIT_UNKNOWNS"
    NO_EXCLUSIVITY_REASONING = "NO_EXCLUSIVITY_REASONING"
    # Reserved: wrong input shape, never listed in the table
    MALFORMED_INPUT = "MALFORMED_INPUT"


class PhraseScope(str, Enum):
    """Which texts a phrase rule scans."""

    CLAIM = "claim"
    CLAIM_AND_RAW_OUTPUT = "claim_and_raw_output"


@dataclass(frozen=True)
class PhraseRule:
    """A forbidden phrase with its compiled matcher."""

    phrase: str
    pattern: re.Pattern


@dataclass(frozen=True)
class Rule:
    """One rule of the table.

    Attributes:
        rule_id: Stable rule identifier
        code: Short code (R1..R6)
        severity: Severity of a breach
        description: What the rule forbids or requires
        scope: Texts scanned by phrase rules
        phrases: Compiled forbidden phrases (empty for structural rules)
    """

    rule_id: RuleId
    code: str
    severity: ViolationSeverity
    description: str
    scope: PhraseScope = PhraseScope.CLAIM
    phrases: Tuple[PhraseRule, ...] = ()

    @property
    def is_phrase_rule(self) -> bool:
        return bool(self.phrases)


@dataclass(frozen=True)
class RuleTable:
    """Immutable, versioned rule set."""

    version: str
    rules: Tuple[Rule, ...]
    identity_relationship_types: FrozenSet[str]
    uncertainty_markers: Tuple[str, ...]

    def rule(self, rule_id: RuleId) -> Rule:
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        raise KeyError(rule_id)

    @property
    def phrase_rules(self) -> Tuple[Rule, ...]:
        return tuple(r for r in self.rules if r.is_phrase_rule)

    def is_identity_relationship(self, normalized_type: str) -> bool:
        return normalized_type in self.identity_relationship_types


def _compile_phrase(phrase: str) -> PhraseRule:
    normalized = " ".join(phrase.lower().split())
    # Whitespace inside a phrase matches any run of whitespace (OCR line wraps)
    pattern = r"\s+".join(re.escape(word) for word in normalized.split(" "))
    return PhraseRule(phrase=normalized, pattern=re.compile(pattern, re.IGNORECASE))


def _parse_rule(raw: Dict[str, Any]) -> Rule:
    try:
        rule_id = RuleId(raw["id"])
        severity = ViolationSeverity(raw.get("severity", "hard"))
        scope = PhraseScope(raw.get("scope", PhraseScope.CLAIM.value))
    except (KeyError, ValueError) as e:
        raise RuleTableError(f"Invalid rule definition: {raw!r}", original_error=e)

    if rule_id == RuleId.MALFORMED_INPUT:
        raise RuleTableError("MALFORMED_INPUT is reserved and cannot be defined in the rule table")

    phrases = raw.get("phrases") or []
    if not isinstance(phrases, list) or not all(isinstance(p, str) and p.strip() for p in phrases):
        raise RuleTableError(f"Rule {rule_id.value} has invalid phrases")

    return Rule(
        rule_id=rule_id,
        code=str(raw.get("code", "")),
        severity=severity,
        description=str(raw.get("description", "")),
        scope=scope,
        phrases=tuple(_compile_phrase(p) for p in phrases),
    )


def parse_rule_table(data: Any) -> RuleTable:
    """Build a RuleTable from parsed YAML data.

    Args:
        data: Mapping loaded from the rule table file

    Returns:
        RuleTable: Validated, immutable rule table

    Raises:
        RuleTableError: If the data is not a complete rule table
    """
    if not isinstance(data, dict):
        raise RuleTableError("Rule table must be a mapping")

    version = data.get("version")
    if not version:
        raise RuleTableError("Rule table is missing a version")

    raw_rules = data.get("rules")
    if not isinstance(raw_rules, list) or not raw_rules:
        raise RuleTableError("Rule table has no rules")

    if not all(isinstance(r, dict) for r in raw_rules):
        raise RuleTableError("Every rule must be a mapping")

    rules = tuple(_parse_rule(r) for r in raw_rules)
    defined = {r.rule_id for r in rules}
    missing = [r.value for r in RuleId if r != RuleId.MALFORMED_INPUT and r not in defined]
    if missing:
        raise RuleTableError(f"Rule table is missing rules: {', '.join(missing)}")
    if len(defined) != len(rules):
        raise RuleTableError("Rule table defines a rule more than once")

    identity_types = set()
    for raw in raw_rules:
        if raw.get("id") == RuleId.NO_ENTITY_COLLAPSE.value:
            identity_types.update(
                "_".join(str(t).strip().lower().replace("-", " ").split())
                for t in raw.get("identity_relationship_types") or []
            )
    if not identity_types:
        raise RuleTableError("NO_ENTITY_COLLAPSE needs identity_relationship_types")

    markers = tuple(str(m).lower() for m in data.get("uncertainty_markers") or [])

    return RuleTable(
        version=str(version),
        rules=rules,
        identity_relationship_types=frozenset(identity_types),
        uncertainty_markers=markers,
    )


def load_rule_table(path: Optional[Path] = None) -> RuleTable:
    """Load and validate a rule table file.

    Args:
        path: YAML file (default: bundled redaction_rules.yaml)

    Returns:
        RuleTable: Parsed rule table

    Raises:
        RuleTableError: If the file is missing, unreadable or invalid
    """
    path = Path(path) if path else DEFAULT_RULE_TABLE_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        LOGGER.error(f"Failed to load rule table from {path}: {e}")
        raise RuleTableError(f"Failed to load rule table from {path}", original_error=e)

    table = parse_rule_table(data)
    LOGGER.info(f"Loaded rule table v{table.version} ({len(table.rules)} rules) from {path}")
    return table


@lru_cache(maxsize=1)
def get_rule_table() -> RuleTable:
    """Process-wide rule table, loaded on first use."""
    return load_rule_table(settings.rule_table_path)
