"""
Local Heuristic Analyzer
========================

Rule-based interpretation computed in-process.

GUARANTEES:
- Always available; the guaranteed terminus of the chain
- No I/O, no network
- Confidence is never HIGH (rule-based approximation)
- Unknown categories get generic, non-empty suggestions
"""

from __future__ import annotations
from typing import Optional, Tuple
import logging

from ..contracts import (
    AnalysisRequest,
    AnalysisResult,
    ParentingSuggestion,
    SuggestionKind,
    ConfidenceLevel,
    ResultSource,
    format_age,
)
from .base import Analyzer, AnalyzerOutcome, AnalyzerErrorCode
from .rules import RuleBook, DEFAULT_RULE_BOOK


logger = logging.getLogger(__name__)

# Suggestion kinds by position in the advice list; extra items reuse the last kind
POSITIONAL_KINDS = (
    SuggestionKind.OBSERVE,
    SuggestionKind.GUIDANCE,
    SuggestionKind.EMOTIONAL,
)

GENERAL_MILESTONE = "General development observation"


class LocalHeuristicAnalyzer(Analyzer):
    """
    Maps age bracket + category + behavior keywords to an interpretation.
    """

    def __init__(
        self,
        rule_book: Optional[RuleBook] = None,
        name: str = "local-heuristic",
        priority: int = 0
    ):
        self._rule_book = rule_book or DEFAULT_RULE_BOOK
        self._name = name
        self._priority = priority

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def rule_book(self) -> RuleBook:
        return self._rule_book

    async def is_available(self) -> bool:
        return True

    async def try_analyze(self, request: AnalysisRequest) -> AnalyzerOutcome:
        try:
            return AnalyzerOutcome.succeeded(self.analyze(request))
        except Exception as e:
            logger.exception("Local analysis failed for category=%s", request.category)
            return AnalyzerOutcome.failed(AnalyzerErrorCode.INTERNAL_ERROR, str(e))

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Synchronous core of try_analyze()."""
        book = self._rule_book
        bracket = book.bracket_for(request.child_age_months)
        rule = book.find_rule(bracket.key, request.category, request.behavior_text)

        if rule is not None:
            interpretation = rule.interpretation
            milestone = rule.milestone
            confidence = (
                ConfidenceLevel.MEDIUM
                if rule.importance in ("critical", "important")
                else ConfidenceLevel.LOW
            )
        else:
            interpretation = (
                f"Recorded a {request.category} observation at {format_age(request.child_age_months)}. "
                "Keeping a steady record helps reveal the child's developmental path. "
                "If one area seems ahead or behind, look at it together with other behaviors."
            )
            milestone = GENERAL_MILESTONE
            confidence = ConfidenceLevel.LOW

        return AnalysisResult(
            development_stage_label=bracket.stage_label,
            psychological_interpretation=interpretation,
            suggestions=self._suggestions(request.category),
            confidence_level=confidence,
            source=ResultSource.LOCAL,
            emotional_interpretation=(
                book.emotional_note_for(request.category)
                if confidence != ConfidenceLevel.LOW else None
            ),
            milestone=milestone,
        )

    def _suggestions(self, category: str) -> Tuple[ParentingSuggestion, ...]:
        advice = self._rule_book.advice_for(category)
        return tuple(
            ParentingSuggestion(
                kind=POSITIONAL_KINDS[min(i, len(POSITIONAL_KINDS) - 1)],
                content=content
            )
            for i, content in enumerate(advice)
        )
