"""
API Mapper
==========

Transforms analysis contracts into the JSON shapes the mobile client reads.
Wire names are camelCase; values are passed through without smoothing.
"""
from typing import Any, Dict, Optional, Sequence

from analysis.contracts import AnalysisResult, BackendStatus, ParentingSuggestion


def map_result_to_dto(result: AnalysisResult) -> Dict[str, Any]:
    """Map AnalysisResult to the client's GrowthAnalysisOutput."""
    return {
        "developmentStage": result.development_stage_label,
        "psychologicalInterpretation": result.psychological_interpretation,
        "emotionalInterpretation": result.emotional_interpretation,
        "parentingSuggestions": [_map_suggestion(s) for s in result.suggestions],
        "milestone": result.milestone,
        "confidenceLevel": result.confidence_level.value,
        "source": result.source.value,
    }


def _map_suggestion(suggestion: ParentingSuggestion) -> Dict[str, Any]:
    return {
        "type": suggestion.kind.value,
        "content": suggestion.content,
        "theoryReference": suggestion.theory_reference,
        "deepInsight": suggestion.deep_insight,
    }


def map_status_to_dto(statuses: Sequence[BackendStatus], current: Optional[str]) -> Dict[str, Any]:
    """Analyzer availability plus the one analyze() would try first."""
    return {
        "analyzers": [
            {"name": s.name, "available": s.available}
            for s in statuses
        ],
        "current": current or "none",
    }
