"""API Layer: FastAPI routes, rate limiting, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON; errors always carry a single "error" field
"""
