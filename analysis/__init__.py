"""
Growth Analysis Package

ARCHITECTURAL BOUNDARY:
=======================
This package turns a validated parenting observation into a psychological
interpretation with suggestions. It knows nothing about HTTP, identity or
persistence; callers hand in an AnalysisRequest and embed the returned
AnalysisResult unmodified.

DIRECTION OF DEPENDENCY:
========================
backend.api → analysis.orchestrator → analysis.analyzers

DESIGN PRINCIPLES:
==================
1. Analyzers implement one contract and never raise out of try_analyze()
2. The orchestrator is constructed explicitly and injected, never global
3. analyze() always returns a complete result
"""

from __future__ import annotations
from typing import Optional
import logging

from .contracts import (
    AnalysisRequest,
    AnalysisResult,
    ParentingSuggestion,
    SuggestionKind,
    ConfidenceLevel,
    ResultSource,
    BehaviorCategory,
    BackendStatus,
    format_age,
)
from .config import AnalysisSettings, RemoteServiceConfig, ConfigurationError
from .fallback import build_fallback_result
from .orchestrator import (
    AnalysisOrchestrator,
    AnalysisTrace,
    AttemptRecord,
    AttemptStatus,
)
from .analyzers import (
    Analyzer,
    AnalyzerOutcome,
    AnalyzerErrorCode,
    LocalHeuristicAnalyzer,
    RemoteServiceAnalyzer,
    RuleBook,
)

__all__ = [
    # Contracts
    'AnalysisRequest', 'AnalysisResult', 'ParentingSuggestion', 'SuggestionKind',
    'ConfidenceLevel', 'ResultSource', 'BehaviorCategory', 'BackendStatus',
    'format_age',
    # Config
    'AnalysisSettings', 'RemoteServiceConfig', 'ConfigurationError',
    # Orchestration
    'AnalysisOrchestrator', 'AnalysisTrace', 'AttemptRecord', 'AttemptStatus',
    'build_fallback_result', 'build_default_orchestrator',
    # Analyzers
    'Analyzer', 'AnalyzerOutcome', 'AnalyzerErrorCode',
    'LocalHeuristicAnalyzer', 'RemoteServiceAnalyzer', 'RuleBook',
]


logger = logging.getLogger(__name__)


def build_default_orchestrator(settings: Optional[AnalysisSettings] = None) -> AnalysisOrchestrator:
    """
    Wire the production chain: remote service first, local heuristic last.

    Usage:
        orchestrator = build_default_orchestrator(AnalysisSettings.from_env())
        result = await orchestrator.analyze(request)
    """
    settings = settings or AnalysisSettings.from_env()

    rule_book = None
    if settings.local_rules_path is not None:
        rule_book = RuleBook.load(settings.local_rules_path)
        logger.info("Loaded local rule book from %s", settings.local_rules_path)

    orchestrator = AnalysisOrchestrator([
        RemoteServiceAnalyzer(settings.remote),
        LocalHeuristicAnalyzer(rule_book=rule_book),
    ])
    logger.info(
        "Analysis chain: %s (remote: %r)",
        " -> ".join(a.name for a in orchestrator.analyzers), settings.remote
    )
    return orchestrator
