"""
Analysis Test Fixtures

Explicit requests, results and spy analyzers. No random generation.
"""

import asyncio
from typing import Optional

from analysis.analyzers.base import Analyzer, AnalyzerOutcome, AnalyzerErrorCode
from analysis.contracts import (
    AnalysisRequest,
    AnalysisResult,
    ParentingSuggestion,
    SuggestionKind,
    ConfidenceLevel,
    ResultSource,
)


def run(coro):
    """Drive a coroutine from a synchronous test."""
    return asyncio.run(coro)


# =============================================================================
# REQUEST FIXTURES
# =============================================================================

def create_request_sharing() -> AnalysisRequest:
    """36-month-old sharing with a sibling."""
    return AnalysisRequest(
        child_age_months=36,
        behavior_text="shares a toy with a sibling",
        category="social",
    )


def create_request_unknown_category() -> AnalysisRequest:
    return AnalysisRequest(
        child_age_months=18,
        behavior_text="hums while stacking cups",
        category="musical",
    )


def create_request_newborn() -> AnalysisRequest:
    return AnalysisRequest(
        child_age_months=0,
        behavior_text="follows a rattle with her eyes",
        category="cognitive",
        context="during bath time",
    )


# =============================================================================
# RESULT FIXTURES
# =============================================================================

def make_result(source: ResultSource, confidence: ConfidenceLevel = ConfidenceLevel.HIGH) -> AnalysisResult:
    return AnalysisResult(
        development_stage_label="Preoperational stage",
        psychological_interpretation=f"Interpretation from {source.value}",
        suggestions=(
            ParentingSuggestion(SuggestionKind.OBSERVE, "Keep watching"),
        ),
        confidence_level=confidence,
        source=source,
    )


REMOTE_RESULT = make_result(ResultSource.REMOTE)


# =============================================================================
# SPY ANALYZERS
# =============================================================================

class SpyAnalyzer(Analyzer):
    """
    Configurable analyzer that counts its calls.

    Exactly one of result / error_code / raises drives try_analyze().
    """

    def __init__(
        self,
        name: str,
        priority: int,
        available: bool = True,
        result: Optional[AnalysisResult] = None,
        error_code: Optional[AnalyzerErrorCode] = None,
        raises: Optional[Exception] = None,
        availability_raises: Optional[Exception] = None,
        call_log: Optional[list] = None
    ):
        self._name = name
        self._priority = priority
        self._available = available
        self._result = result
        self._error_code = error_code
        self._raises = raises
        self._availability_raises = availability_raises
        self._call_log = call_log if call_log is not None else []
        self.availability_calls = 0
        self.analyze_calls = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return self._priority

    async def is_available(self) -> bool:
        self.availability_calls += 1
        self._call_log.append(("is_available", self._name))
        if self._availability_raises is not None:
            raise self._availability_raises
        return self._available

    async def try_analyze(self, request: AnalysisRequest) -> AnalyzerOutcome:
        self.analyze_calls += 1
        self._call_log.append(("try_analyze", self._name))
        if self._raises is not None:
            raise self._raises
        if self._error_code is not None:
            return AnalyzerOutcome.failed(self._error_code, f"{self._name} failed")
        return AnalyzerOutcome.succeeded(self._result or make_result(ResultSource.LOCAL))


def succeeding(name: str, priority: int, source: ResultSource = ResultSource.LOCAL, **kwargs) -> SpyAnalyzer:
    return SpyAnalyzer(name, priority, result=make_result(source), **kwargs)


def failing(name: str, priority: int, code: AnalyzerErrorCode = AnalyzerErrorCode.NETWORK_ERROR, **kwargs) -> SpyAnalyzer:
    return SpyAnalyzer(name, priority, error_code=code, **kwargs)


def unavailable(name: str, priority: int, **kwargs) -> SpyAnalyzer:
    return SpyAnalyzer(name, priority, available=False, **kwargs)
