"""
Local Heuristic Analyzer Tests

INVARIANTS TESTED:
1. Always available, never fails for a valid request
2. Confidence is never HIGH
3. Unknown categories still get non-empty suggestions
4. Age brackets are inclusive at the upper bound
"""

import json

import pytest

from analysis.analyzers.local import LocalHeuristicAnalyzer, GENERAL_MILESTONE
from analysis.analyzers.rules import RuleBook, DEFAULT_RULE_BOOK, DEFAULT_ADVICE, DEFAULT_EMOTIONAL_NOTES
from analysis.config import ConfigurationError
from analysis.contracts import (
    AnalysisRequest,
    ConfidenceLevel,
    ResultSource,
    SuggestionKind,
)

from .fixtures import run, create_request_sharing, create_request_unknown_category


class TestLocalContract:

    def test_always_available(self):
        assert run(LocalHeuristicAnalyzer().is_available()) is True

    def test_default_identity(self):
        analyzer = LocalHeuristicAnalyzer()
        assert analyzer.name == "local-heuristic"
        assert analyzer.priority == 0

    def test_try_analyze_succeeds_with_local_source(self):
        outcome = run(LocalHeuristicAnalyzer().try_analyze(create_request_sharing()))

        assert outcome.success
        assert outcome.result.source == ResultSource.LOCAL

    @pytest.mark.parametrize("months", [0, 1, 3, 4, 6, 11, 12, 24, 25, 36, 37, 120, 240])
    @pytest.mark.parametrize("category", ["motor", "language", "social", "cognitive", "emotional", "other"])
    def test_never_high_confidence(self, months, category):
        request = AnalysisRequest(months, "walks, talks, shares and jumps", category)
        result = LocalHeuristicAnalyzer().analyze(request)

        assert result.confidence_level in (ConfidenceLevel.LOW, ConfidenceLevel.MEDIUM)
        assert result.suggestions


class TestRuleMatching:

    def test_sharing_at_three_matches_social_rule(self):
        result = LocalHeuristicAnalyzer().analyze(create_request_sharing())

        assert result.development_stage_label == "Toddlerhood (2-3 years)"
        assert result.milestone == "Social: cooperative play, learning to share"
        assert result.confidence_level == ConfidenceLevel.MEDIUM

    def test_keyword_match_is_case_insensitive(self):
        request = AnalysisRequest(8, "Finally CRAWLING across the room", "motor")
        result = LocalHeuristicAnalyzer().analyze(request)

        assert result.milestone == "Gross motor: crawls on hands and knees"

    def test_chinese_keyword_matches(self):
        request = AnalysisRequest(5, "今天会翻身了", "motor")
        result = LocalHeuristicAnalyzer().analyze(request)

        assert result.milestone == "Gross motor: rolls from back to tummy"

    def test_normal_importance_gives_low_confidence(self):
        request = AnalysisRequest(9, "cries when a stranger visits", "social")
        result = LocalHeuristicAnalyzer().analyze(request)

        assert result.milestone == "Social: stranger anxiety"
        assert result.confidence_level == ConfidenceLevel.LOW

    def test_rule_from_other_bracket_not_applied(self):
        # Crawling rule belongs to 6-12 months
        request = AnalysisRequest(30, "crawls under the table", "motor")
        result = LocalHeuristicAnalyzer().analyze(request)

        assert result.milestone == GENERAL_MILESTONE
        assert result.confidence_level == ConfidenceLevel.LOW

    def test_no_match_gives_generic_interpretation(self):
        request = AnalysisRequest(30, "hums a tune", "language")
        result = LocalHeuristicAnalyzer().analyze(request)

        assert "2 years 6 months" in result.psychological_interpretation
        assert "language" in result.psychological_interpretation


class TestAgeBrackets:

    @pytest.mark.parametrize("months,key", [
        (0, "0-3"), (3, "0-3"), (4, "3-6"), (6, "3-6"), (7, "6-12"),
        (12, "6-12"), (13, "12-24"), (24, "12-24"), (25, "24-36"),
        (36, "24-36"), (37, "36+"), (200, "36+"),
    ])
    def test_bracket_boundaries(self, months, key):
        assert DEFAULT_RULE_BOOK.bracket_for(months).key == key


class TestSuggestions:

    def test_category_advice_with_positional_kinds(self):
        result = LocalHeuristicAnalyzer().analyze(create_request_sharing())

        assert [s.content for s in result.suggestions] == list(DEFAULT_ADVICE["social"])
        assert [s.kind for s in result.suggestions] == [
            SuggestionKind.OBSERVE,
            SuggestionKind.GUIDANCE,
            SuggestionKind.EMOTIONAL,
        ]

    def test_unknown_category_gets_generic_advice(self):
        result = LocalHeuristicAnalyzer().analyze(create_request_unknown_category())

        assert len(result.suggestions) >= 1
        assert all(s.content for s in result.suggestions)
        assert result.milestone == GENERAL_MILESTONE


class TestEmotionalInterpretation:
    """Parent-facing note per category, only when a rule matched with MEDIUM confidence."""

    def test_matched_rule_gets_category_note(self):
        result = LocalHeuristicAnalyzer().analyze(create_request_sharing())

        assert result.emotional_interpretation == DEFAULT_EMOTIONAL_NOTES["social"]

    def test_low_confidence_has_no_note(self):
        request = AnalysisRequest(9, "cries when a stranger visits", "social")
        result = LocalHeuristicAnalyzer().analyze(request)

        assert result.emotional_interpretation is None

    def test_unknown_category_has_no_note(self):
        result = LocalHeuristicAnalyzer().analyze(create_request_unknown_category())

        assert result.emotional_interpretation is None

    def test_note_reaches_wire_format(self):
        data = LocalHeuristicAnalyzer().analyze(create_request_sharing()).to_dict()

        assert data["emotional_interpretation"] == DEFAULT_EMOTIONAL_NOTES["social"]


class TestRuleBookLoading:
    """Rule tables are data and can be replaced from JSON."""

    def _write(self, tmp_path, data):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_custom_rule_book_drives_analysis(self, tmp_path):
        path = self._write(tmp_path, {
            "brackets": [
                {"key": "baby", "stage_label": "Baby", "max_months": 24},
                {"key": "kid", "stage_label": "Kid"},
            ],
            "rules": [{
                "bracket": "kid",
                "category": "social",
                "keywords": ["wave"],
                "interpretation": "Waving is a greeting.",
                "milestone": "Social: waves",
                "importance": "critical",
            }],
            "advice": {"social": ["Wave back"]},
            "generic_advice": ["Keep going"],
            "emotional_notes": {"social": "Enjoy the hello."},
        })
        analyzer = LocalHeuristicAnalyzer(rule_book=RuleBook.load(path))

        result = analyzer.analyze(AnalysisRequest(40, "waves at neighbours", "social"))

        assert result.development_stage_label == "Kid"
        assert result.psychological_interpretation == "Waving is a greeting."
        assert result.confidence_level == ConfidenceLevel.MEDIUM
        assert [s.content for s in result.suggestions] == ["Wave back"]
        assert result.emotional_interpretation == "Enjoy the hello."

    def test_non_mapping_emotional_notes_rejected(self, tmp_path):
        path = self._write(tmp_path, {
            "brackets": [{"key": "a", "stage_label": "A"}],
            "emotional_notes": ["not", "a", "mapping"],
        })
        with pytest.raises(ConfigurationError):
            RuleBook.load(path)

    def test_missing_file_raises_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            RuleBook.load(tmp_path / "missing.json")

    def test_bounded_last_bracket_rejected(self, tmp_path):
        path = self._write(tmp_path, {
            "brackets": [{"key": "a", "stage_label": "A", "max_months": 12}],
        })
        with pytest.raises(ConfigurationError):
            RuleBook.load(path)

    def test_unknown_importance_rejected(self, tmp_path):
        path = self._write(tmp_path, {
            "brackets": [{"key": "a", "stage_label": "A"}],
            "rules": [{
                "bracket": "a", "category": "motor", "keywords": ["x"],
                "interpretation": "i", "milestone": "m", "importance": "urgent",
            }],
        })
        with pytest.raises(ConfigurationError):
            RuleBook.load(path)

    def test_malformed_structure_rejected(self, tmp_path):
        path = self._write(tmp_path, {"rules": []})
        with pytest.raises(ConfigurationError):
            RuleBook.load(path)
