"""
Analyzer Abstraction Layer
==========================

Capability contract every interpretation backend implements.

BOUNDARY ENFORCEMENT:
- Analyzers are stateless with respect to request data
- Availability checks are read-only and cheap
- Failures are explicit AnalyzerOutcome values, never partial results
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from ..contracts import AnalysisRequest, AnalysisResult


class AnalyzerErrorCode(Enum):
    """Explicit failure codes for analysis attempts."""
    NOT_CONFIGURED = "not_configured"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    INVALID_RESPONSE = "invalid_response"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class AnalyzerOutcome:
    """
    Immutable outcome of one try_analyze() call.

    INVARIANT: Either (success=True, result set) or (success=False, error_code set)
    """
    success: bool
    result: Optional[AnalysisResult] = None

    # Failure info (only set if success=False)
    error_code: Optional[AnalyzerErrorCode] = None
    error_message: Optional[str] = None

    def __post_init__(self):
        if self.success and self.result is None:
            raise ValueError("Successful outcome must have a result")
        if self.success and self.error_code is not None:
            raise ValueError("Successful outcome must not carry an error_code")
        if not self.success and self.error_code is None:
            raise ValueError("Failed outcome must have error_code")
        if not self.success and self.result is not None:
            raise ValueError("Failed outcome must not carry a result")

    @staticmethod
    def succeeded(result: AnalysisResult) -> AnalyzerOutcome:
        return AnalyzerOutcome(success=True, result=result)

    @staticmethod
    def failed(error_code: AnalyzerErrorCode, message: str) -> AnalyzerOutcome:
        return AnalyzerOutcome(
            success=False,
            error_code=error_code,
            error_message=message
        )


class Analyzer(ABC):
    """
    Abstract interpretation backend.

    GUARANTEES:
    - is_available() never raises and performs no analysis
    - try_analyze() returns AnalyzerOutcome; the orchestrator still treats
      a raised exception as an INTERNAL_ERROR failure
    - Higher priority is tried first
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier used in status reports and attempt records."""
        pass

    @property
    @abstractmethod
    def priority(self) -> int:
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Whether this analyzer should be attempted at all."""
        pass

    @abstractmethod
    async def try_analyze(self, request: AnalysisRequest) -> AnalyzerOutcome:
        """
        Attempt one analysis.

        MUST return AnalyzerOutcome. A successful outcome carries a
        fully-populated AnalysisResult tagged with this analyzer's source.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"
