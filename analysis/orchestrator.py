"""
Analysis Orchestrator

Priority-ordered fallback chain over registered analyzers.

GUARANTEES:
===========
1. Analyzers are tried strictly in descending priority (stable for ties)
2. Availability is checked before every invocation; unavailable analyzers
   are never invoked
3. First success short-circuits the chain
4. Failures are recorded per request and never surfaced
5. analyze() never raises; exhaustion yields the fallback result
6. Status probing runs concurrently and never mutates chain state

PER-CALL STATE:
===============
Trying(i) → Succeeded            on analyzer i success
Trying(i) → Trying(i+1)          on analyzer i unavailable or failed
Trying(last) → Exhausted → Succeeded(fallback)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from enum import Enum
import asyncio
import logging

from .contracts import AnalysisRequest, AnalysisResult, BackendStatus
from .fallback import build_fallback_result
from .analyzers.base import Analyzer, AnalyzerOutcome, AnalyzerErrorCode


logger = logging.getLogger(__name__)


# =============================================================================
# ATTEMPT TRACE
# =============================================================================

class AttemptStatus(Enum):
    SKIPPED_UNAVAILABLE = "skipped_unavailable"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class AttemptRecord:
    """One analyzer's part in a single analyze() call."""
    analyzer_name: str
    status: AttemptStatus
    error_code: Optional[AnalyzerErrorCode] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class AnalysisTrace:
    """
    Request-scoped record of the fallback chain.

    Exists only for observability; discarded after the call.
    """
    attempts: Tuple[AttemptRecord, ...]
    exhausted: bool

    @property
    def failures(self) -> Tuple[AttemptRecord, ...]:
        return tuple(a for a in self.attempts if a.status == AttemptStatus.FAILED)

    @property
    def succeeded_by(self) -> Optional[str]:
        for attempt in self.attempts:
            if attempt.status == AttemptStatus.SUCCEEDED:
                return attempt.analyzer_name
        return None


# =============================================================================
# ORCHESTRATOR
# =============================================================================

class AnalysisOrchestrator:
    """
    Holds the ordered analyzer chain for the process lifetime.

    Construct once at startup and pass to request handlers.
    """

    def __init__(self, analyzers: Sequence[Analyzer]):
        # sorted() is stable: equal priorities keep registration order
        self._analyzers: Tuple[Analyzer, ...] = tuple(
            sorted(analyzers, key=lambda a: -a.priority)
        )

    @property
    def analyzers(self) -> Tuple[Analyzer, ...]:
        return self._analyzers

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Run the fallback chain. Never raises."""
        result, _ = await self.analyze_with_trace(request)
        return result

    async def analyze_with_trace(
        self,
        request: AnalysisRequest
    ) -> Tuple[AnalysisResult, AnalysisTrace]:
        """
        Run the fallback chain and return (result, trace).

        NEVER raises. The trace is fresh for every call.
        """
        attempts = []

        for analyzer in self._analyzers:
            if not await self._probe(analyzer):
                logger.debug("Analyzer %s unavailable, skipping", analyzer.name)
                attempts.append(AttemptRecord(
                    analyzer_name=analyzer.name,
                    status=AttemptStatus.SKIPPED_UNAVAILABLE
                ))
                continue

            outcome = await self._attempt(analyzer, request)

            if outcome.success:
                attempts.append(AttemptRecord(
                    analyzer_name=analyzer.name,
                    status=AttemptStatus.SUCCEEDED
                ))
                logger.info(
                    "Analysis served by %s (source=%s)",
                    analyzer.name, outcome.result.source.value
                )
                return outcome.result, AnalysisTrace(tuple(attempts), exhausted=False)

            logger.warning(
                "Analyzer %s failed [%s]: %s",
                analyzer.name, outcome.error_code.value, outcome.error_message
            )
            attempts.append(AttemptRecord(
                analyzer_name=analyzer.name,
                status=AttemptStatus.FAILED,
                error_code=outcome.error_code,
                error_message=outcome.error_message
            ))

        failed = [a.analyzer_name for a in attempts if a.status == AttemptStatus.FAILED]
        logger.error(
            "All %d analyzers exhausted (failed: %s); returning fallback result",
            len(self._analyzers), ", ".join(failed) or "none"
        )
        return build_fallback_result(request), AnalysisTrace(tuple(attempts), exhausted=True)

    async def list_backend_status(self) -> Tuple[BackendStatus, ...]:
        """
        Availability of every analyzer, probed concurrently.

        Order matches the chain. Never raises.
        """
        available = await asyncio.gather(
            *(self._probe(analyzer) for analyzer in self._analyzers)
        )
        return tuple(
            BackendStatus(name=analyzer.name, available=flag)
            for analyzer, flag in zip(self._analyzers, available)
        )

    async def current_backend(
        self,
        statuses: Optional[Sequence[BackendStatus]] = None
    ) -> Optional[str]:
        """
        Name of the analyzer analyze() would try first, if any.

        Pass the result of list_backend_status() to reuse it instead of checking again.
        """
        if statuses is None:
            statuses = await self.list_backend_status()
        for status in statuses:
            if status.available:
                return status.name
        return None

    async def _probe(self, analyzer: Analyzer) -> bool:
        """Availability check; a raising check counts as unavailable."""
        try:
            return bool(await analyzer.is_available())
        except Exception as e:
            logger.warning("Availability check for %s raised: %s", analyzer.name, e)
            return False

    async def _attempt(self, analyzer: Analyzer, request: AnalysisRequest) -> AnalyzerOutcome:
        """
        Invoke one analyzer, converting a contract violation (raised
        exception or non-outcome return) into an INTERNAL_ERROR failure.
        """
        try:
            outcome = await analyzer.try_analyze(request)
        except Exception as e:
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.INTERNAL_ERROR,
                f"{type(e).__name__}: {e}"
            )

        if not isinstance(outcome, AnalyzerOutcome):
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.INTERNAL_ERROR,
                f"Analyzer returned {type(outcome).__name__}, expected AnalyzerOutcome"
            )
        return outcome
