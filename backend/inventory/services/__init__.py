"""Services Layer — repositories, reference lookups and writers around the pure core.

Invariants:
    - Every query is scoped by organization_id
    - Writers receive validated data only; they never re-validate form input
    - No business rule lives here that core/ could express as a pure function

Design Decisions:
    - One class per aggregate (AssetWriter, BookingWriter) holding the AsyncSession
"""
