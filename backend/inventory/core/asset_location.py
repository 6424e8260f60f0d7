"""Asset Location Change — decides whether an asset update touches its location.

The asset form posts the selected location (new_location_id); comparing it with
the location stored on the asset lets the writer skip the lookup when nothing
changed.
"""

from dataclasses import dataclass
from enum import Enum


class LocationAction(str, Enum):
    KEEP = "keep"
    CONNECT = "connect"
    DISCONNECT = "disconnect"


@dataclass(frozen=True)
class LocationChange:
    action: LocationAction
    location_id: str | None = None


def plan_location_change(
    new_location_id: str | None, current_location_id: str | None,
) -> LocationChange:
    if new_location_id and new_location_id != current_location_id:
        return LocationChange(LocationAction.CONNECT, new_location_id)
    if not new_location_id and current_location_id:
        return LocationChange(LocationAction.DISCONNECT)
    return LocationChange(LocationAction.KEEP)
