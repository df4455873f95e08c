from __future__ import annotations

from typing import TYPE_CHECKING

from billboard_marketplace.realtime.protocol import BillboardStatusUpdate
from billboard_marketplace.realtime.socketio import deliver_to_user

if TYPE_CHECKING:
    from billboard_marketplace.billboards.models import Billboard


def publish_billboard_status(billboard: Billboard) -> int:
    event = BillboardStatusUpdate(
        billboard_id=billboard.id,
        status=billboard.status,
        updated_at=billboard.updated_at.isoformat(),
    )
    return deliver_to_user(billboard.owner_id, event)
