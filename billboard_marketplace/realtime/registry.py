"""In-memory registry of live Socket.IO connections.

The registry is the only shared mutable state of the realtime channel. It
tracks which connection belongs to which user and which rooms (conversations)
each connection has joined, and answers presence queries. It never talks to
the network: every mutating operation returns the list of deliveries the
caller should emit, so the registry can be tested without a transport.

All operations take the same lock. Django code reaches the registry from
worker threads (via ``async_to_sync``) while the Socket.IO handlers run on
the event loop, so nothing is awaited while the lock is held.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING

from .protocol import UserOffline
from .protocol import UserOnline

if TYPE_CHECKING:
    from .protocol import ServerMessage

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    sid: str
    user_id: int | None = None
    rooms: set[str] = field(default_factory=set)
    alive: bool = True


@dataclass(frozen=True)
class Delivery:
    sid: str
    message: ServerMessage


class ConnectionRegistry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._connections: dict[str, Connection] = {}
        self._by_user: dict[int, set[str]] = defaultdict(set)
        self._by_room: dict[str, set[str]] = defaultdict(set)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def __contains__(self, sid: object) -> bool:
        with self._lock:
            return sid in self._connections

    # Lifecycle ---------------------------------------------------------------

    def connect(self, sid: str) -> Connection:
        """Register an anonymous connection."""

        with self._lock:
            existing = self._connections.get(sid)
            if existing is not None:
                return existing
            conn = Connection(sid=sid)
            self._connections[sid] = conn
            return conn

    def authenticate(self, sid: str, user_id: int) -> list[Delivery]:
        """Bind ``user_id`` to the connection.

        Announces the user as online to every other connection when this is
        their first live connection.
        """

        with self._lock:
            conn = self._connections.get(sid)
            if conn is None:
                logger.warning("authenticate for unknown connection %s", sid)
                return []
            if conn.user_id == user_id:
                return []

            deliveries: list[Delivery] = []
            if conn.user_id is not None:
                deliveries.extend(self._unbind(conn))

            conn.user_id = user_id
            sids = self._by_user[user_id]
            first = not sids
            sids.add(sid)
            if first:
                deliveries.extend(self._broadcast(UserOnline(user_id), exclude=sid))
            return deliveries

    def disconnect(self, sid: str) -> list[Delivery]:
        """Drop the connection, announcing the user offline if it was their last."""

        with self._lock:
            conn = self._connections.pop(sid, None)
            if conn is None:
                return []
            conn.alive = False
            for room in conn.rooms:
                members = self._by_room.get(room)
                if members is not None:
                    members.discard(sid)
                    if not members:
                        del self._by_room[room]
            conn.rooms.clear()
            return self._unbind(conn)

    def join_room(self, sid: str, room: str) -> bool:
        """Add ``room`` to the connection's memberships.

        Returns True when the membership is new; joining twice is a no-op.
        """

        with self._lock:
            conn = self._connections.get(sid)
            if conn is None:
                logger.warning("joinRoom for unknown connection %s", sid)
                return False
            if room in conn.rooms:
                return False
            conn.rooms.add(room)
            self._by_room[room].add(sid)
            return True

    def leave_room(self, sid: str, room: str) -> bool:
        with self._lock:
            conn = self._connections.get(sid)
            if conn is None or room not in conn.rooms:
                return False
            conn.rooms.discard(room)
            members = self._by_room.get(room)
            if members is not None:
                members.discard(sid)
                if not members:
                    del self._by_room[room]
            return True

    # Delivery ----------------------------------------------------------------

    def deliver_to_user(self, user_id: int, message: ServerMessage) -> list[Delivery]:
        """Deliveries for every live connection of ``user_id``.

        Offline users get nothing: there is no store-and-forward.
        """

        with self._lock:
            sids = self._by_user.get(user_id, ())
            return [Delivery(sid, message) for sid in sorted(sids)]

    def deliver_to_room(
        self,
        room: str,
        message: ServerMessage,
        *,
        exclude_sid: str | None = None,
    ) -> list[Delivery]:
        with self._lock:
            sids = self._by_room.get(room, ())
            return [
                Delivery(sid, message) for sid in sorted(sids) if sid != exclude_sid
            ]

    # Queries -----------------------------------------------------------------

    def is_online(self, user_id: int) -> bool:
        with self._lock:
            return bool(self._by_user.get(user_id))

    def online_user_ids(self) -> frozenset[int]:
        with self._lock:
            return frozenset(uid for uid, sids in self._by_user.items() if sids)

    def connections_for_user(self, user_id: int) -> frozenset[str]:
        with self._lock:
            return frozenset(self._by_user.get(user_id, ()))

    def rooms_for(self, sid: str) -> frozenset[str]:
        with self._lock:
            conn = self._connections.get(sid)
            return frozenset(conn.rooms) if conn is not None else frozenset()

    def user_for(self, sid: str) -> int | None:
        with self._lock:
            conn = self._connections.get(sid)
            return conn.user_id if conn is not None else None

    # Internals (lock held) ---------------------------------------------------

    def _unbind(self, conn: Connection) -> list[Delivery]:
        user_id = conn.user_id
        if user_id is None:
            return []
        conn.user_id = None
        sids = self._by_user.get(user_id)
        if sids is None:
            return []
        sids.discard(conn.sid)
        if sids:
            return []
        del self._by_user[user_id]
        return self._broadcast(UserOffline(user_id), exclude=conn.sid)

    def _broadcast(self, message: ServerMessage, *, exclude: str) -> list[Delivery]:
        return [
            Delivery(sid, message)
            for sid in sorted(self._connections)
            if sid != exclude
        ]
