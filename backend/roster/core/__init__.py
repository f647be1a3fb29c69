"""Core Layer: pure domain logic, no DB, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - The throttle is the only stateful object; everything else is pure
"""
