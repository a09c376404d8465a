"""Batch assessment pipeline assembly and execution."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

import pendulum
import structlog
from pydantic import ValidationError

from . import __version__
from .core import (
    BodyCompositionEvaluator,
    RulesEngine,
    order_by_severity,
    summarize_aging,
)
from .rules_store import RuleSetLoader
from .schemas import Candidate


class CandidateLoadError(ValueError):
    """Raised when candidate loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[Candidate]):
        super().__init__("Candidate loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Candidate loading failed: {self.errors}"


class CandidateLoader:
    """Load candidate snapshots from JSON lines."""

    def load(self, path: Path) -> list[Candidate]:
        candidates: list[Candidate] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                try:
                    candidate = Candidate.model_validate(record)
                except ValidationError as exc:
                    errors.append(f"line {idx}: {exc.error_count()} validation error(s)")
                    continue
                candidates.append(candidate)
        if errors:
            raise CandidateLoadError(errors, candidates)
        return candidates


class OutputWriter:
    """Persist assessment reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


class AssessmentPipeline:
    """Evaluates every candidate in a file against the rules and fitness tables."""

    def __init__(
        self,
        *,
        rules_engine: RulesEngine,
        body_composition: BodyCompositionEvaluator,
        rule_loader: RuleSetLoader,
        evaluators: Iterable[Any] = (),
        rules_path: str | Path | None = None,
        include_body_composition: bool = False,
        severity_order: bool = False,
        candidate_loader: CandidateLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._rules_engine = rules_engine
        self._body_composition = body_composition
        self._rule_loader = rule_loader
        self._evaluators = list(evaluators)
        self._rules_path = Path(rules_path) if rules_path else None
        self._include_body_composition = bool(include_body_composition)
        self._severity_order = bool(severity_order)
        self._candidates = candidate_loader or CandidateLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def assess(self, candidate: Candidate, rules: list, context: dict[str, Any]) -> dict[str, Any]:
        """Assess one candidate; the input snapshot is never modified."""
        body_comp = self._body_composition.evaluate_candidate(candidate)

        status = body_comp.status.value if self._include_body_composition else None
        subject = candidate.model_copy(update={"body_composition_status": status})
        outcome = self._rules_engine.evaluate(rules, subject)

        serialized_candidate = candidate.model_dump(mode="python")
        evaluations = [
            evaluator.evaluate(serialized_candidate, context) for evaluator in self._evaluators
        ]

        return {
            "candidate_id": candidate.candidate_id,
            "full_name": candidate.full_name,
            "stage": candidate.stage.value,
            "eligibility": asdict(outcome),
            "body_composition": asdict(body_comp),
            "evaluations": evaluations,
        }

    def run(
        self,
        *,
        candidates_path: Path,
        output_path: Path,
        as_of: str | None = None,
        audit_logger: "AuditLogger | None" = None,
    ) -> list[dict]:
        rule_set = self._rule_loader.load(self._rules_path)
        rules = order_by_severity(rule_set.rules) if self._severity_order else rule_set.rules

        load_errors: list[str] = list(rule_set.errors)
        try:
            candidates = self._candidates.load(candidates_path)
        except CandidateLoadError as exc:
            candidates = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("candidates.partial_load", errors=exc.errors)

        context: dict[str, Any] = {"as_of": as_of} if as_of else {}
        ordered = sorted(candidates, key=lambda item: item.stage.sort_order)

        serialized_results: list[dict] = []
        for candidate in ordered:
            result = json.loads(
                json.dumps(self.assess(candidate, rules, context), default=_json_default, ensure_ascii=False)
            )
            serialized_results.append(result)

            if audit_logger:
                audit_logger.append(
                    {
                        "candidate_id": candidate.candidate_id,
                        "headline": result["eligibility"]["headline"],
                        "chips": result["eligibility"]["chips"],
                        "body_composition_status": result["body_composition"]["status"],
                        "rules_source": rule_set.source,
                    }
                )

            self._logger.info(
                "assessment.result",
                candidate_id=candidate.candidate_id,
                headline=result["eligibility"]["headline"],
                chips=result["eligibility"]["chips"],
                body_composition=result["body_composition"]["status"],
            )

        metadata = {
            "candidate_count": len(candidates),
            "rules_source": rule_set.source,
            "rule_count": len(rules),
            "aging": summarize_aging(_aging_levels(serialized_results)),
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": serialized_results})
        return serialized_results


def _aging_levels(results: list[dict]) -> list[str]:
    return [
        evaluation["metadata"]["level"]
        for result in results
        for evaluation in result["evaluations"]
        if evaluation.get("method") == "aging"
    ]


def _json_default(value):  # type: ignore[override]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False, default=_json_default))
            handle.write("\n")
