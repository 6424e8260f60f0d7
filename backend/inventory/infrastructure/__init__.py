"""Infrastructure Layer — database pool and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ domain logic (errors excepted)
    - All database failures mapped to core DatabaseError

Design Decisions:
    - Thin wrappers over SQLAlchemy and logging; business rules live in core/
"""
