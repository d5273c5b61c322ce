"""Unit tests for loading the redaction rule table."""

import pytest
import yaml

from forensic_evidence.schemas.validation import ViolationSeverity
from forensic_evidence.services.validation import (
    DEFAULT_RULE_TABLE_PATH,
    PhraseScope,
    RedactionValidator,
    RuleId,
    get_rule_table,
    load_rule_table,
)
from forensic_evidence.utils.exceptions import ConfigurationError, RuleTableError


@pytest.fixture
def rule_data():
    with open(DEFAULT_RULE_TABLE_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_table(tmp_path, data):
    path = tmp_path / "rules.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestBundledRuleTable:
    """Tests for the rule table shipped with the package."""

    def test_defines_every_rule(self, rule_table):
        defined = {r.rule_id for r in rule_table.rules}

        assert defined == {r for r in RuleId if r != RuleId.MALFORMED_INPUT}
        assert rule_table.version == "1.0.0"

    def test_all_rules_are_hard(self, rule_table):
        assert all(r.severity == ViolationSeverity.HARD for r in rule_table.rules)

    def test_scopes(self, rule_table):
        assert rule_table.rule(RuleId.NO_PROBABILISTIC_IDENTITY).scope == PhraseScope.CLAIM
        assert rule_table.rule(RuleId.NO_IDENTITY_INFERENCE).scope == PhraseScope.CLAIM_AND_RAW_OUTPUT
        assert rule_table.rule(RuleId.NO_EXCLUSIVITY_REASONING).scope == PhraseScope.CLAIM_AND_RAW_OUTPUT

    def test_required_phrases_present(self, rule_table):
        phrases = {
            rule_id: {p.phrase for p in rule_table.rule(rule_id).phrases}
            for rule_id in (
                RuleId.NO_IDENTITY_INFERENCE,
                RuleId.NO_PROBABILISTIC_IDENTITY,
                RuleId.NO_EXCLUSIVITY_REASONING,
            )
        }

        assert {"this could be", "consistent with", "aligns with"} <= phrases[RuleId.NO_IDENTITY_INFERENCE]
        assert {"likely", "probably", "possibly", "may be", "could be", "appears to be"} <= phrases[
            RuleId.NO_PROBABILISTIC_IDENTITY
        ]
        assert {"only person present", "must have been", "no one else could"} <= phrases[
            RuleId.NO_EXCLUSIVITY_REASONING
        ]

    def test_identity_relationship_types(self, rule_table):
        assert rule_table.is_identity_relationship("same_as")
        assert rule_table.is_identity_relationship("also_known_as")
        assert not rule_table.is_identity_relationship("employed_by")

    def test_loaded_once(self):
        assert get_rule_table() is get_rule_table()

    def test_rules_are_immutable(self, rule_table):
        with pytest.raises(AttributeError):
            rule_table.version = "9.9.9"


class TestLoadRuleTable:
    """Tests for load_rule_table error handling."""

    def test_custom_table_version_flows_into_results(self, tmp_path, rule_data):
        rule_data["version"] = "2.0.0"
        table = load_rule_table(write_table(tmp_path, rule_data))
        result = RedactionValidator(rule_table=table).validate_evidence_packet(
            "The ledger lists a payment.", "Observed", 0.5, ["doc-1.1.0-10"], []
        )

        assert table.version == "2.0.0"
        assert result.rule_version == "2.0.0"

    def test_phrase_added_without_code_change(self, tmp_path, rule_data):
        for rule in rule_data["rules"]:
            if rule["id"] == "NO_PROBABILISTIC_IDENTITY":
                rule["phrases"].append("in all likelihood")
        table = load_rule_table(write_table(tmp_path, rule_data))
        result = RedactionValidator(rule_table=table).validate_evidence_packet(
            "In all likelihood the pilot flew.", "Observed", 0.5, ["doc-1.1.0-10"], []
        )

        assert result.has_violation("NO_PROBABILISTIC_IDENTITY")

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleTableError):
            load_rule_table(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: [unclosed", encoding="utf-8")

        with pytest.raises(RuleTableError) as exc_info:
            load_rule_table(path)

        assert isinstance(exc_info.value.original_error, yaml.YAMLError)

    def test_missing_rule(self, tmp_path, rule_data):
        rule_data["rules"] = [r for r in rule_data["rules"] if r["id"] != "CITATION_REQUIRED"]

        with pytest.raises(RuleTableError, match="CITATION_REQUIRED"):
            load_rule_table(write_table(tmp_path, rule_data))

    def test_missing_version(self, tmp_path, rule_data):
        del rule_data["version"]

        with pytest.raises(RuleTableError):
            load_rule_table(write_table(tmp_path, rule_data))

    def test_reserved_rule_cannot_be_defined(self, tmp_path, rule_data):
        rule_data["rules"].append({"id": "MALFORMED_INPUT", "severity": "hard"})

        with pytest.raises(RuleTableError):
            load_rule_table(write_table(tmp_path, rule_data))

    def test_unknown_severity(self, tmp_path, rule_data):
        rule_data["rules"][0]["severity"] = "catastrophic"

        with pytest.raises(RuleTableError):
            load_rule_table(write_table(tmp_path, rule_data))

    def test_rule_table_error_is_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_rule_table(tmp_path / "missing.yaml")
