"""Dependency injection container for the screening system."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import (
    ActivityAgingEvaluator,
    AgingConfig,
    BodyCompositionEvaluator,
    ProspectScorer,
    RulesEngine,
    ScoringConfig,
)
from .core.bodycomp import load_tables
from .pipeline import AssessmentPipeline
from .rules_store import RuleSetLoader


class ScreeningContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    rule_loader = providers.Singleton(RuleSetLoader)
    rules_engine = providers.Singleton(RulesEngine)

    tables = providers.Singleton(
        load_tables,
        tables_dir=config.body_composition.tables_dir,
    )
    body_composition = providers.Singleton(BodyCompositionEvaluator, tables=tables)

    prospect_scorer = providers.Singleton(ProspectScorer)
    aging_evaluator = providers.Singleton(ActivityAgingEvaluator)

    evaluators = providers.List(
        prospect_scorer,
        aging_evaluator,
    )

    pipeline = providers.Factory(
        AssessmentPipeline,
        rules_engine=rules_engine,
        body_composition=body_composition,
        rule_loader=rule_loader,
        evaluators=evaluators,
        rules_path=config.eligibility.rules_path,
        include_body_composition=config.eligibility.include_body_composition,
        severity_order=config.eligibility.order_by_severity,
    )


def create_container(*, settings: dict | None = None) -> ScreeningContainer:
    """Instantiate container with optional overrides."""

    container = ScreeningContainer()

    if not settings:
        return container

    container.config.from_dict(
        {
            key: settings[key]
            for key in ("eligibility", "body_composition")
            if isinstance(settings.get(key), dict)
        }
    )

    evaluator_settings = settings.get("evaluators", {}) if isinstance(settings, dict) else {}

    if "scoring" in evaluator_settings:
        scoring_config = ScoringConfig(**evaluator_settings["scoring"])
        container.prospect_scorer.override(
            providers.Singleton(ProspectScorer, config=scoring_config)
        )

    if "aging" in evaluator_settings:
        aging_config = AgingConfig(**evaluator_settings["aging"])
        container.aging_evaluator.override(
            providers.Singleton(ActivityAgingEvaluator, config=aging_config)
        )

    return container
