"""
Property Tests for the Analysis Chain
Verifies the chain invariants over generated requests and chain shapes.
"""

from hypothesis import given, settings, strategies as st
from hypothesis.strategies import composite

from analysis.analyzers.local import LocalHeuristicAnalyzer
from analysis.analyzers.base import AnalyzerErrorCode
from analysis.contracts import AnalysisRequest, ConfidenceLevel, ResultSource, format_age
from analysis.fallback import build_fallback_result
from analysis.orchestrator import AnalysisOrchestrator, AttemptStatus

from .fixtures import run, SpyAnalyzer

# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

CATEGORIES = st.sampled_from(["motor", "language", "social", "cognitive", "emotional", "musical", "other"])

@composite
def requests(draw):
    """Generates well-formed AnalysisRequests."""
    return AnalysisRequest(
        child_age_months=draw(st.integers(min_value=0, max_value=216)),
        behavior_text=draw(st.text(min_size=1, max_size=80).filter(lambda s: s.strip())),
        category=draw(CATEGORIES),
        context=draw(st.one_of(st.none(), st.text(min_size=1, max_size=40))),
    )

@composite
def chain_shapes(draw):
    """(priority, behavior) pairs for a chain of spy analyzers."""
    return draw(st.lists(
        st.tuples(
            st.integers(min_value=-5, max_value=5),
            st.sampled_from(["succeed", "fail", "unavailable", "raise", "probe_raises"]),
        ),
        max_size=6,
    ))


def build_spy(index, priority, behavior):
    name = f"a{index}"
    if behavior == "succeed":
        return SpyAnalyzer(name, priority)
    if behavior == "fail":
        return SpyAnalyzer(name, priority, error_code=AnalyzerErrorCode.HTTP_ERROR)
    if behavior == "unavailable":
        return SpyAnalyzer(name, priority, available=False)
    if behavior == "raise":
        return SpyAnalyzer(name, priority, raises=RuntimeError(name))
    return SpyAnalyzer(name, priority, availability_raises=RuntimeError(name))


# =============================================================================
# PROPERTIES
# =============================================================================

@given(requests())
def test_local_never_high_and_never_empty(analysis_request):
    result = LocalHeuristicAnalyzer().analyze(analysis_request)

    assert result.source == ResultSource.LOCAL
    assert result.confidence_level != ConfidenceLevel.HIGH
    assert len(result.suggestions) >= 1


@given(requests())
def test_fallback_is_pure_function_of_request(analysis_request):
    result = build_fallback_result(analysis_request)

    assert result == build_fallback_result(analysis_request)
    assert result.development_stage_label == format_age(analysis_request.child_age_months)
    assert result.confidence_level == ConfidenceLevel.LOW


@settings(max_examples=50, deadline=None)
@given(requests(), chain_shapes())
def test_chain_follows_priority_and_stops_at_first_success(analysis_request, shapes):
    spies = [build_spy(i, p, b) for i, (p, b) in enumerate(shapes)]
    orchestrator = AnalysisOrchestrator(spies)

    result, trace = run(orchestrator.analyze_with_trace(analysis_request))

    # Stable descending priority
    expected_order = [s.name for s in sorted(spies, key=lambda s: -s.priority)]
    assert [a.name for a in orchestrator.analyzers] == expected_order

    # Attempts walk the chain in order and end at the first success
    attempted = [a.analyzer_name for a in trace.attempts]
    assert attempted == expected_order[:len(attempted)]
    for record in trace.attempts[:-1]:
        assert record.status != AttemptStatus.SUCCEEDED

    # Unavailable analyzers were never invoked
    for spy, (_, behavior) in zip(spies, shapes):
        if behavior in ("unavailable", "probe_raises"):
            assert spy.analyze_calls == 0
        assert spy.analyze_calls <= spy.availability_calls <= 1

    if trace.exhausted:
        assert result == build_fallback_result(analysis_request)
        assert len(attempted) == len(spies)
    else:
        assert trace.attempts[-1].status == AttemptStatus.SUCCEEDED
