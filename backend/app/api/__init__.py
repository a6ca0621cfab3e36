"""API Layer: FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in create_app() (no auto-discovery)
    - Routes never touch SQLAlchemy; they call TodoStore and unwrap its Results
"""
