"""YAML rule-set loader.

A rule file holds either a single rule, a list of rules, or a mapping with a
``rules`` list::

    rules:
      - name: Greater than 12, but not 13, and not Steve
        criteria:
          - property_path: response.answer
            operator_name: GreaterThan
            value: "12"
          - property_path: name
            operator_name: NotEqual
            value: Steve
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from criteria_engine.core.config import Settings, get_settings
from .models import Rule
from .validator import RuleValidator

logger = logging.getLogger(__name__)


class RuleLoader:
    """Loads rules from YAML files or directories, in file order."""

    def __init__(self, rules_dir: str | Path | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        rules_dir = rules_dir or self.settings.rules_dir
        self.rules_dir = Path(rules_dir) if rules_dir else None
        self._rules: list[Rule] = []
        self._validator = RuleValidator()

    def load_file(self, path: str | Path) -> list[Rule]:
        """Load rules from a single YAML file, adding them to the loaded rules."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Rule file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)

        rules = self._parse_content(content, source=str(path))
        logger.info(f"Loaded {len(rules)} rules from {path}")
        return rules

    def load_string(self, text: str) -> list[Rule]:
        """Load rules from YAML text, adding them to the loaded rules."""
        return self._parse_content(yaml.safe_load(text), source="<string>")

    def load_directory(self, path: str | Path | None = None) -> list[Rule]:
        """Load all rule files from a directory.

        Replaces any previously loaded rules. Files that fail to parse are
        skipped with a warning.
        """
        path = Path(path) if path else self.rules_dir
        if not path:
            raise ValueError("No rules directory specified")
        if not path.exists():
            raise FileNotFoundError(f"Rules directory not found: {path}")

        self._rules = []
        rules = []
        for rule_file in sorted(path.glob(self.settings.rule_file_glob)):
            try:
                rules.extend(self.load_file(rule_file))
            except (OSError, yaml.YAMLError, ValueError) as e:
                logger.warning(f"Failed to load {rule_file}: {e}")

        return rules

    def get_rule(self, name: str) -> Rule | None:
        """Get the first loaded rule with the given name."""
        for rule in self._rules:
            if rule.name == name:
                return rule
        return None

    def get_all_rules(self) -> list[Rule]:
        """Get all loaded rules, in load order."""
        return list(self._rules)

    def save_rule(self, rule: Rule, path: str | Path | None = None) -> Path:
        """Save a rule to a YAML file.

        Args:
            rule: The rule to save.
            path: Optional path. If not provided, saves to rules_dir/{slug}.yaml

        Returns:
            Path to the saved file.
        """
        if path is None:
            if self.rules_dir is None:
                raise ValueError("No rules directory specified and no path provided")
            path = self.rules_dir / f"{_slug(rule.name)}.yaml"
        else:
            path = Path(path)

        data = rule.model_dump(mode="json", exclude_none=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

        return path

    def _parse_content(self, content: Any, source: str) -> list[Rule]:
        if content is None:
            return []
        if isinstance(content, dict) and "rules" in content:
            content = content["rules"]

        items = content if isinstance(content, list) else [content]
        rules = []
        for item in items:
            if not isinstance(item, dict):
                raise ValueError(f"Rule entry must be a mapping in {source}: {item!r}")
            rule = Rule.model_validate(item)
            self._check(rule, source)
            rules.append(rule)

        self._rules.extend(rules)
        return rules

    def _check(self, rule: Rule, source: str) -> None:
        """Log advisory validation errors; they never block loading."""
        if not self.settings.validate_on_load:
            return
        for error in self._validator.validate_rule(rule):
            logger.warning(f"Rule {rule.name!r} in {source}: {error}")


def _slug(name: str) -> str:
    slug = re.sub(r"\W+", "_", name.strip().lower()).strip("_")
    return slug or "rule"
