"""
Fallback Result Builder

Synthesizes the last-resort result when every analyzer is unavailable
or fails. Pure function of the request: no I/O, no analyzer state,
cannot fail for a well-formed request.
"""

from __future__ import annotations

from .contracts import (
    AnalysisRequest,
    AnalysisResult,
    ParentingSuggestion,
    SuggestionKind,
    ConfidenceLevel,
    ResultSource,
    format_age,
)


FALLBACK_INTERPRETATION = (
    "This behavior has been recorded. Continued observation helps build a "
    "picture of the child's developmental path."
)

FALLBACK_SUGGESTIONS = (
    ParentingSuggestion(SuggestionKind.OBSERVE, "Provide a safe, supportive environment"),
    ParentingSuggestion(SuggestionKind.OBSERVE, "Observe reactions and interests"),
    ParentingSuggestion(SuggestionKind.GUIDANCE, "Offer encouragement and guidance at the right moment"),
)


def build_fallback_result(request: AnalysisRequest) -> AnalysisResult:
    return AnalysisResult(
        development_stage_label=format_age(request.child_age_months),
        psychological_interpretation=FALLBACK_INTERPRETATION,
        suggestions=FALLBACK_SUGGESTIONS,
        confidence_level=ConfidenceLevel.LOW,
        source=ResultSource.FALLBACK,
    )
