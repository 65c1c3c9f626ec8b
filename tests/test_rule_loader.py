"""
Unit Tests for the Reference Rule Loader
"""

import pytest

from rips_validator.config.constants import RuleId, RuleProfile
from rips_validator.utils.error_handler import ErrorCode, RipsError
from rips_validator.validation.rule_loader import RuleLoader


@pytest.mark.unit
class TestBundledRules:
    """Test the reference file shipped with the package"""

    def test_finality_sets(self, rule_loader):
        sets = {s.name: s for s in rule_loader.get_finality_sets()}

        assert sets["planificacion_familiar"].required_purpose == "19"
        assert len(sets["planificacion_familiar"].codes) == 17
        assert sets["control_prenatal"].required_purpose == "23"
        assert len(sets["control_prenatal"].codes) == 24

    def test_guideline_set(self, rule_loader):
        guideline = rule_loader.get_guideline_diagnoses()
        assert len(guideline.codes) == 33
        assert guideline.contains("z000")
        assert not guideline.contains(None)

    def test_profiles(self, rule_loader):
        full = rule_loader.get_profile_rules(RuleProfile.COMPLETO)
        assert full == [
            RuleId.DUPLICATES,
            RuleId.DOCUMENT_AGE,
            RuleId.DIAGNOSIS_FINALITY,
            RuleId.DIAGNOSIS_CONSISTENCY,
        ]
        assert rule_loader.get_profile_rules(RuleProfile.PYP) == full
        assert rule_loader.get_profile_rules(RuleProfile.MORB) == [
            RuleId.DUPLICATES,
            RuleId.DOCUMENT_AGE,
        ]

    def test_rules_are_cached(self, rule_loader):
        assert rule_loader.load_rules() is rule_loader.load_rules()
        assert rule_loader.reload_rules() is not None


@pytest.mark.unit
class TestBrokenConfiguration:
    """Test configuration errors at startup"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(RipsError) as exc_info:
            RuleLoader(tmp_path / "no_existe.yaml").load_rules()
        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR

    def test_unparsable_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("finality_sets: [unclosed", encoding="utf-8")

        with pytest.raises(RipsError) as exc_info:
            RuleLoader(path).load_rules()
        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR

    def test_unexpected_structure(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "finality_sets:\n"
            "  planificacion_familiar:\n"
            "    label: x\n"
            "    required_purpose: '19'\n"
            "    codes: Z300\n"
            "guideline_diagnoses:\n"
            "  label: y\n"
            "  codes: [Z000]\n",
            encoding="utf-8",
        )

        with pytest.raises(RipsError) as exc_info:
            RuleLoader(path).load_rules()
        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        assert "unexpected structure" in exc_info.value.message
