"""Eligibility rule-set configuration loading and persistence."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Iterable

import structlog
from pydantic import ValidationError

from .schemas import Rule

STARTER_RULES_RESOURCE = "starter_rules.json"

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class LoadedRuleSet:
    """Rules ready for evaluation plus where they came from."""

    rules: list[Rule]
    source: str
    errors: list[str] = field(default_factory=list)


def parse_rules(document: Any) -> tuple[list[Rule], list[str]]:
    """Validate a configuration document rule by rule.

    Accepts a bare array of rules or an object with a ``rules`` array.
    Malformed entries are skipped and reported, never raised.
    """
    if isinstance(document, dict):
        document = document.get("rules")
    if not isinstance(document, list):
        return [], ["document: expected an array of rules"]

    rules: list[Rule] = []
    errors: list[str] = []
    for idx, entry in enumerate(document):
        try:
            rules.append(Rule.model_validate(entry))
        except ValidationError as exc:
            name = entry.get("name") if isinstance(entry, dict) else None
            errors.append(f"rule {idx} ({name or 'unnamed'}): {exc.error_count()} validation error(s)")
    return rules, errors


def dump_rules(rules: Iterable[Rule]) -> list[dict[str, Any]]:
    return [rule.to_document() for rule in rules]


@lru_cache(maxsize=1)
def _starter_document() -> str:
    return (
        resources.files("recruitscreen.data")
        .joinpath(STARTER_RULES_RESOURCE)
        .read_text(encoding="utf-8")
    )


def starter_rules() -> list[Rule]:
    """Starter rule set shipped with the package."""
    rules, _ = parse_rules(json.loads(_starter_document()))
    return rules


class RuleSetLoader:
    """Read the operator-editable rule set, falling back to the starter rules."""

    def load(self, path: Path | None) -> LoadedRuleSet:
        if path is None:
            return LoadedRuleSet(rules=starter_rules(), source="starter")
        if not path.exists():
            logger.info("rules.file_missing", path=str(path))
            return LoadedRuleSet(rules=starter_rules(), source="starter")

        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("rules.load_failed", path=str(path), error=str(exc))
            return LoadedRuleSet(
                rules=starter_rules(),
                source="starter",
                errors=[f"{path.name}: {exc}"],
            )

        rules, errors = parse_rules(document)
        for error in errors:
            logger.warning("rules.rule_skipped", path=str(path), error=error)
        if not rules:
            logger.warning("rules.empty_rule_set", path=str(path))
            return LoadedRuleSet(rules=starter_rules(), source="starter", errors=errors)
        return LoadedRuleSet(rules=rules, source=str(path), errors=errors)


def write_rules(path: Path, rules: Iterable[Rule]) -> None:
    """Write a rule document, replacing any existing file atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(dump_rules(rules), ensure_ascii=False, indent=2)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info("rules.written", path=str(path))


def write_starter_rules(path: Path) -> None:
    write_rules(path, starter_rules())
