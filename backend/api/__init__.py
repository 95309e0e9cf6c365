"""HTTP surface for the analysis orchestrator."""
