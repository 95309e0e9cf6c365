"""
Analysis Contracts

Typed request/result schemas shared by every analyzer, the orchestrator
and the fallback builder.

BOUNDARY ENFORCEMENT:
=====================
- All types are FROZEN (immutable)
- Results carry the tag of the analyzer that produced them
- Suggestion order is presentation order
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class BehaviorCategory(Enum):
    """Known behavior categories. Unknown tags are still accepted."""
    MOTOR = "motor"
    LANGUAGE = "language"
    SOCIAL = "social"
    COGNITIVE = "cognitive"
    EMOTIONAL = "emotional"

    @classmethod
    def is_known(cls, tag: str) -> bool:
        return tag in {c.value for c in cls}


class SuggestionKind(Enum):
    """Closed set of parenting suggestion kinds."""
    OBSERVE = "observe"        # keep observing, no intervention
    EMOTIONAL = "emotional"    # emotional support and acceptance
    GUIDANCE = "guidance"      # gentle guidance, never forced
    NONE = "none"              # all normal, nothing to suggest


class ConfidenceLevel(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ResultSource(Enum):
    """Which analyzer produced a result."""
    REMOTE = "remote"
    LOCAL = "local"
    FALLBACK = "fallback"


# =============================================================================
# REQUEST
# =============================================================================

@dataclass(frozen=True)
class AnalysisRequest:
    """
    One parenting observation to interpret.

    Shape is validated upstream. Use create() at the boundary where
    raw input becomes a request.
    """
    child_age_months: int
    behavior_text: str
    category: str
    context: Optional[str] = None
    child_name: Optional[str] = None

    @staticmethod
    def create(
        child_age_months: int,
        behavior_text: str,
        category: str,
        context: Optional[str] = None,
        child_name: Optional[str] = None
    ) -> AnalysisRequest:
        """Validating factory. Raises ValueError on a malformed request."""
        if isinstance(child_age_months, bool) or not isinstance(child_age_months, int):
            raise ValueError("child_age_months must be an integer")
        if child_age_months < 0:
            raise ValueError("child_age_months must be non-negative")
        if not behavior_text or not behavior_text.strip():
            raise ValueError("behavior_text must be non-empty")
        if not category or not category.strip():
            raise ValueError("category must be non-empty")

        return AnalysisRequest(
            child_age_months=child_age_months,
            behavior_text=behavior_text.strip(),
            category=category.strip(),
            context=context.strip() if context and context.strip() else None,
            child_name=child_name.strip() if child_name and child_name.strip() else None
        )


# =============================================================================
# RESULT
# =============================================================================

@dataclass(frozen=True)
class ParentingSuggestion:
    kind: SuggestionKind
    content: str
    theory_reference: Optional[str] = None
    deep_insight: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "content": self.content,
            "theory_reference": self.theory_reference,
            "deep_insight": self.deep_insight,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Interpretation returned by any analyzer or by the fallback builder.

    INVARIANT: Never partially populated. Stage label and interpretation
    are non-empty, suggestions is a tuple.
    """
    development_stage_label: str
    psychological_interpretation: str
    suggestions: Tuple[ParentingSuggestion, ...]
    confidence_level: ConfidenceLevel
    source: ResultSource

    emotional_interpretation: Optional[str] = None
    milestone: Optional[str] = None

    def __post_init__(self):
        if not self.development_stage_label:
            raise ValueError("development_stage_label must be non-empty")
        if not self.psychological_interpretation:
            raise ValueError("psychological_interpretation must be non-empty")
        if not isinstance(self.suggestions, tuple):
            # Accept any sequence, store as tuple
            object.__setattr__(self, "suggestions", tuple(self.suggestions))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "development_stage_label": self.development_stage_label,
            "psychological_interpretation": self.psychological_interpretation,
            "emotional_interpretation": self.emotional_interpretation,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "milestone": self.milestone,
            "confidence_level": self.confidence_level.value,
            "source": self.source.value,
        }


# =============================================================================
# STATUS
# =============================================================================

@dataclass(frozen=True)
class BackendStatus:
    """Availability snapshot of one registered analyzer."""
    name: str
    available: bool


# =============================================================================
# AGE HELPERS
# =============================================================================

def format_age(age_in_months: int) -> str:
    """
    Human-readable age: "7 months", "2 years", "2 years 4 months".
    """
    if age_in_months < 12:
        return f"{age_in_months} month" if age_in_months == 1 else f"{age_in_months} months"

    years, months = divmod(age_in_months, 12)
    year_part = "1 year" if years == 1 else f"{years} years"
    if months == 0:
        return year_part
    month_part = "1 month" if months == 1 else f"{months} months"
    return f"{year_part} {month_part}"
