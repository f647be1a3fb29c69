"""Services: the imperative shell: store access, request orchestration, background tasks.

Invariants:
    - Services may import core/, infrastructure/, models/, schemas/: never api/
"""
