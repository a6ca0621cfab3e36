"""Core Layer: error types, Result values and the lifecycle state machine. No IO, no DB.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or db/
"""
