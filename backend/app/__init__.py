"""Todo Backend: REST API for a todo list with Prometheus instrumentation.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
