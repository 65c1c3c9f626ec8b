"""
Reference Rule Loader

Loads the diagnosis reference sets and the rule profiles from
reference_codes.yaml. Provides type-safe, immutable access to them.
"""

import yaml
from pathlib import Path
from typing import Dict, FrozenSet, Optional, List, Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from functools import lru_cache

from ..config.constants import RuleId, RuleProfile
from ..config.settings import get_settings
from ..utils.error_handler import configuration_error


def normalize_code(code: Optional[str]) -> str:
    """Upper-case and trim a diagnosis code for membership checks."""
    return (code or "").strip().upper()


class ReferenceCodeSet(BaseModel):
    """A fixed set of diagnosis codes"""

    label: str = Field(..., description="Name shown in findings")
    codes: FrozenSet[str] = Field(..., description="Normalized diagnosis codes")

    model_config = ConfigDict(frozen=True)

    @field_validator("codes", mode="before")
    @classmethod
    def _normalize_codes(cls, value: Any) -> FrozenSet[str]:
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValueError("codes must be a list")
        return frozenset(normalize_code(str(code)) for code in value)

    def contains(self, code: Optional[str]) -> bool:
        """Exact membership after normalization."""
        normalized = normalize_code(code)
        return bool(normalized) and normalized in self.codes


class FinalityCodeSet(ReferenceCodeSet):
    """Diagnosis codes that must be billed with one purpose code"""

    name: str = Field(..., description="Key of the set in the YAML file")
    required_purpose: str = Field(..., description="Mandated finalidadTecnologiaSalud")


class ReferenceRules(BaseModel):
    """Everything the diagnosis rules and the profile selection need"""

    finality_sets: List[FinalityCodeSet]
    guideline_diagnoses: ReferenceCodeSet
    rule_profiles: Dict[RuleProfile, List[RuleId]]

    model_config = ConfigDict(frozen=True)

    def rules_for(self, profile: RuleProfile) -> List[RuleId]:
        """Enabled rules of a profile, in evaluation order."""
        return list(self.rule_profiles.get(profile, []))


class RuleLoader:
    """
    Loads reference rules from YAML configuration.

    The file is read once; later calls return the cached rules.
    """

    def __init__(self, rules_path: Optional[Path] = None):
        """
        Initialize the RuleLoader.

        Args:
            rules_path: Path to reference_codes.yaml. If None, uses default location.
        """
        if rules_path is None:
            current_file = Path(__file__)
            rules_path = current_file.parent.parent / "config" / "reference_codes.yaml"

        self.rules_path = Path(rules_path)
        self._rules: Optional[ReferenceRules] = None

    def load_rules(self, force_reload: bool = False) -> ReferenceRules:
        """
        Load reference rules from the YAML file.

        Args:
            force_reload: If True, reload rules even if already loaded

        Returns:
            ReferenceRules

        Raises:
            RipsError: If the file is missing, unparsable or malformed
        """
        if self._rules is not None and not force_reload:
            return self._rules

        if not self.rules_path.exists():
            raise configuration_error(str(self.rules_path), "file not found")

        try:
            with open(self.rules_path, 'r', encoding='utf-8') as f:
                raw_yaml = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise configuration_error(str(self.rules_path), "YAML parse error", cause=e)

        if not isinstance(raw_yaml, dict):
            raise configuration_error(str(self.rules_path), "top level must be a mapping")

        raw_sets = raw_yaml.get("finality_sets") or {}
        if not isinstance(raw_sets, dict):
            raise configuration_error(str(self.rules_path), "finality_sets must be a mapping")

        try:
            self._rules = ReferenceRules(
                finality_sets=[
                    FinalityCodeSet(name=name, **set_dict)
                    for name, set_dict in raw_sets.items()
                ],
                guideline_diagnoses=ReferenceCodeSet(**(raw_yaml.get("guideline_diagnoses") or {})),
                rule_profiles=raw_yaml.get("rule_profiles") or {},
            )
        except (TypeError, ValidationError) as e:
            raise configuration_error(str(self.rules_path), "unexpected structure", cause=e)

        return self._rules

    def reload_rules(self) -> ReferenceRules:
        """Force reload of reference rules from file."""
        return self.load_rules(force_reload=True)

    def get_finality_sets(self) -> List[FinalityCodeSet]:
        return self.load_rules().finality_sets

    def get_guideline_diagnoses(self) -> ReferenceCodeSet:
        return self.load_rules().guideline_diagnoses

    def get_profile_rules(self, profile: RuleProfile) -> List[RuleId]:
        return self.load_rules().rules_for(profile)


# Singleton instance for global access
@lru_cache(maxsize=1)
def get_rule_loader() -> RuleLoader:
    """
    Get singleton instance of RuleLoader.

    Honors RIPS_RULES_PATH through the application settings.
    """
    rules_path = get_settings().rules_path
    return RuleLoader(Path(rules_path) if rules_path else None)
