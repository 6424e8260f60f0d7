"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - No caching or retry policy here: that belongs to the implementation

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the pure merger/validator
      never call these — the shell fetches first, then runs the pipeline
"""

from collections.abc import Sequence
from typing import Protocol

from inventory.core.domain_types import OrganizationId
from inventory.core.schema_merger import CustomFieldDefinition


class CustomFieldSource(Protocol):
    """Contract for reading an organization's custom field definitions."""
    async def list_active_custom_fields(
        self, organization_id: OrganizationId,
    ) -> Sequence[CustomFieldDefinition]: ...
