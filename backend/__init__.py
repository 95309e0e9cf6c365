"""
Growth Analysis Backend

Request-handling layer around the analysis package.

LAYER STRUCTURE:
================

1. API LAYER (api/)
   - Responsibility: JSON body validation, response envelopes, status query
   - Allowed inputs: HTTP requests
   - Outputs: {"success": ..., "data": ...} envelopes
   - MUST NOT: Choose analyzers, retry, or alter analysis results

Identity, ownership checks and persistence live outside this package.
"""
