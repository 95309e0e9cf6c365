"""
Analysis Tests Package

TEST AXIOMS:
=============
1. analyze() never raises and always returns a complete result
2. Analyzers are attempted strictly in priority order
3. Unavailable analyzers are never invoked
"""
