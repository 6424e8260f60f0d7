"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Organization is the tenant root; every other entity is scoped by organization_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from inventory.models.organization import Organization  # noqa: F401
from inventory.models.custom_field import CustomField  # noqa: F401
from inventory.models.category import Category  # noqa: F401
from inventory.models.location import Location  # noqa: F401
from inventory.models.tag import Tag  # noqa: F401
from inventory.models.team_member import TeamMember  # noqa: F401
from inventory.models.asset import Asset, AssetCustomFieldValue, asset_tags  # noqa: F401
from inventory.models.booking import Booking, booking_assets  # noqa: F401
