"""
Remote Analysis Prompts
=======================

Pure functions for the remote service wire payload:
- prompt text rendered from an AnalysisRequest
- tolerant parsing of the model's JSON reply into an AnalysisResult

INVARIANT: Same request → same prompt_hash
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import hashlib
import json
import re

from .contracts import (
    AnalysisRequest,
    AnalysisResult,
    ParentingSuggestion,
    SuggestionKind,
    ConfidenceLevel,
    ResultSource,
    format_age,
)


CATEGORY_LABELS = {
    "motor": "motor development",
    "language": "language development",
    "social": "social skills",
    "cognitive": "cognitive development",
    "emotional": "emotional development",
}

SYSTEM_PROMPT = (
    "You are an expert in child developmental psychology, versed in the classic "
    "theories of Piaget, Vygotsky, Erikson and Bowlby. Reply strictly in the JSON "
    "format the user asks for, with no additional text."
)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class ResponseParseError(ValueError):
    """Remote reply could not be turned into a complete AnalysisResult."""
    pass


@dataclass(frozen=True)
class AnalysisPrompt:
    """
    Frozen prompt with hash for tracing.

    INVARIANT: Same request → same prompt_hash
    """
    system_text: str
    prompt_text: str
    prompt_hash: str

    @staticmethod
    def create(request: AnalysisRequest) -> AnalysisPrompt:
        prompt_text = render_prompt(request)
        return AnalysisPrompt(
            system_text=SYSTEM_PROMPT,
            prompt_text=prompt_text,
            prompt_hash=hashlib.sha256(prompt_text.encode()).hexdigest()
        )


def render_prompt(request: AnalysisRequest) -> str:
    """Render the user prompt for one request."""
    months = request.child_age_months
    category_label = CATEGORY_LABELS.get(request.category, request.category)

    child_lines = []
    if request.child_name:
        child_lines.append(f"- Name: {request.child_name}")
    child_lines.append(f"- Age: {format_age(months)} ({months} months)")
    child_lines.append(f"- Behavior category: {category_label}")
    child_lines.append(f"- Behavior: {request.behavior_text}")
    child_lines.append(f"- Context: {request.context or 'none'}")

    return f"""Analyze the following child behavior and reply strictly in JSON (no text outside the JSON).

Child:
{chr(10).join(child_lines)}

Reply with JSON in this format:
{{
  "developmentStage": "description of the developmental stage",
  "psychologicalInterpretation": "professional interpretation grounded in developmental psychology (about 200 words), citing specific theories such as Piaget, Vygotsky or Erikson",
  "emotionalInterpretation": "empathetic interpretation addressed to the parents (about 100 words)",
  "parentingSuggestions": [
    {{
      "type": "observe|emotional|guidance|none",
      "content": "the suggestion",
      "theoryReference": "theory the suggestion is based on",
      "deepInsight": "insight into the mechanism behind this specific behavior (about 100 words)"
    }}
  ],
  "milestone": "matching developmental milestone, if any",
  "confidenceLevel": "high|medium|low"
}}

Suggestion types:
- observe: keep observing, no intervention needed
- emotional: offer emotional support, acceptance and empathy
- guidance: gentle guidance, never forced
- none: all normal, nothing to suggest

Requirements:
1. Base the analysis on classic developmental theory (Piaget, Vygotsky, Erikson, Bowlby, Montessori, Thomas and Chess)
2. Every suggestion must name its theoretical source
3. Insights must tie back to the specific behavior described
4. Be measured; do not exaggerate or cause parents anxiety
5. Most cases should be "observe", stressing that no special intervention is needed
6. Suggestions must be practical and actionable
7. Take the child's age into account
8. Describe age as "X years Y months", never as a raw month count
9. Piaget stages: sensorimotor (0-2 years), preoperational (2-7), concrete operational (7-11), formal operational (11+)
10. Erikson stages: trust vs mistrust (0-1), autonomy vs shame (1-3), initiative vs guilt (3-6), industry vs inferiority (6-12), identity vs role confusion (12-18)
"""


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Pull a JSON object out of a model reply.

    Order: fenced ```json block, whole text, outermost braces.
    """
    match = _FENCED_JSON.search(text)
    candidate = match.group(1).strip() if match else text.strip()

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            raise ResponseParseError("Failed to parse remote response as JSON")
        try:
            parsed = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Failed to parse remote response as JSON: {e}")

    if not isinstance(parsed, dict):
        raise ResponseParseError("Remote response JSON is not an object")
    return parsed


def _optional_text(value: Any) -> Optional[str]:
    # Objects and arrays are not text
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def _parse_suggestions(raw: Any) -> List[ParentingSuggestion]:
    if not isinstance(raw, list):
        return []

    valid_kinds = {k.value for k in SuggestionKind}
    suggestions = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        content = _optional_text(item.get("content"))
        if content is None:
            continue
        kind = item.get("type")
        suggestions.append(ParentingSuggestion(
            kind=SuggestionKind(kind) if isinstance(kind, str) and kind in valid_kinds else SuggestionKind.OBSERVE,
            content=content,
            theory_reference=_optional_text(item.get("theoryReference")),
            deep_insight=_optional_text(item.get("deepInsight")),
        ))
    return suggestions


def parse_analysis_response(text: str, request: AnalysisRequest) -> AnalysisResult:
    """
    Map the remote reply into an AnalysisResult tagged REMOTE.

    Unknown suggestion types become "observe", an unknown confidence
    becomes "medium", a missing one "high". Non-string values count as
    unknown. A reply with no interpretation is rejected rather than
    returned half-filled.
    """
    if not text or not text.strip():
        raise ResponseParseError("Remote response was empty")

    parsed = extract_json_object(text)

    interpretation = _optional_text(parsed.get("psychologicalInterpretation"))
    if interpretation is None:
        raise ResponseParseError("Remote response has no psychologicalInterpretation")

    stage = _optional_text(parsed.get("developmentStage")) or format_age(request.child_age_months)

    raw_confidence = parsed.get("confidenceLevel")
    if raw_confidence is None:
        confidence = ConfidenceLevel.HIGH
    elif isinstance(raw_confidence, str) and raw_confidence in {c.value for c in ConfidenceLevel}:
        confidence = ConfidenceLevel(raw_confidence)
    else:
        confidence = ConfidenceLevel.MEDIUM

    return AnalysisResult(
        development_stage_label=stage,
        psychological_interpretation=interpretation,
        suggestions=tuple(_parse_suggestions(parsed.get("parentingSuggestions"))),
        confidence_level=confidence,
        source=ResultSource.REMOTE,
        emotional_interpretation=_optional_text(parsed.get("emotionalInterpretation")),
        milestone=_optional_text(parsed.get("milestone")),
    )
