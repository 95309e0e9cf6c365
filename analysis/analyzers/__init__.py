"""
Analyzers Package
=================

Interpretation backends.

Available analyzers:
- RemoteServiceAnalyzer: external LLM service (priority 10)
- LocalHeuristicAnalyzer: in-process rule tables, always available (priority 0)
"""

from .base import (
    Analyzer,
    AnalyzerOutcome,
    AnalyzerErrorCode,
)
from .rules import RuleBook, AgeBracket, BehaviorRule, DEFAULT_RULE_BOOK
from .local import LocalHeuristicAnalyzer
from .remote import RemoteServiceAnalyzer

__all__ = [
    'Analyzer',
    'AnalyzerOutcome',
    'AnalyzerErrorCode',
    'RuleBook',
    'AgeBracket',
    'BehaviorRule',
    'DEFAULT_RULE_BOOK',
    'LocalHeuristicAnalyzer',
    'RemoteServiceAnalyzer',
]
