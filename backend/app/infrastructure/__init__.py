"""Infrastructure Layer: database store, metrics registry and logging setup.

Invariants:
    - Infrastructure never imports from api/
    - Store failures leave this layer as Result values, not exceptions
"""
