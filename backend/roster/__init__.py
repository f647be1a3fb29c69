"""Roster: user record management API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
