"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return {"success": ...} JSON envelopes

Design Decisions:
    - Thin routes delegate to services; services delegate decisions to core
"""
