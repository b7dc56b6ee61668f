"""BlogNest Application Package — accounts and connection workflow API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
