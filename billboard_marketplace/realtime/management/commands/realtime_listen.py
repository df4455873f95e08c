from __future__ import annotations

import asyncio
import json

import socketio.exceptions
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from billboard_marketplace.realtime.client import ConnectionStatusIndicator
from billboard_marketplace.realtime.client import RealtimeClient
from billboard_marketplace.realtime.protocol import SERVER_EVENTS


class Command(BaseCommand):
    help = "Connect to the realtime channel and print connectivity changes and events"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--url",
            default="http://localhost:8000",
            help="Base URL of the ASGI server",
        )
        parser.add_argument("--user-id", dest="user_id", type=int, default=None)
        parser.add_argument(
            "--token",
            default=None,
            help="JWT access token sent as auth.token on connect",
        )
        parser.add_argument(
            "--conversation",
            dest="conversations",
            action="append",
            default=[],
            help="Conversation id to join (repeatable)",
        )
        parser.add_argument(
            "--duration",
            type=float,
            default=0,
            help="Seconds to listen before disconnecting (0 = until interrupted)",
        )

    def handle(self, *args, **options) -> None:
        client = RealtimeClient(
            options["url"],
            user_id=options["user_id"],
            token=options["token"],
            socketio_path=settings.REALTIME_SOCKETIO_PATH,
        )
        indicator = ConnectionStatusIndicator(client.machine)
        client.machine.add_listener(lambda _connected: self._status(indicator))
        for event in SERVER_EVENTS:
            client.on(event, self._printer(event))

        try:
            asyncio.run(
                self._listen(client, options["conversations"], options["duration"]),
            )
        except socketio.exceptions.ConnectionError as exc:
            msg = f"Could not connect to {options['url']}: {exc}"
            raise CommandError(msg) from exc
        except KeyboardInterrupt:
            self.stdout.write("Interrupted")

    async def _listen(
        self,
        client: RealtimeClient,
        conversations: list[str],
        duration: float,
    ) -> None:
        # Rooms joined while disconnected are replayed by the connect handshake
        for conversation_id in conversations:
            await client.join_conversation(conversation_id)
        await client.connect()
        try:
            if duration > 0:
                await asyncio.sleep(duration)
            else:
                await client.wait()
        finally:
            await client.disconnect()

    def _status(self, indicator: ConnectionStatusIndicator) -> None:
        style = self.style.SUCCESS if indicator.is_connected else self.style.WARNING
        self.stdout.write(style(indicator.label))

    def _printer(self, event: str):
        def write(payload: dict) -> None:
            self.stdout.write(f"{event} {json.dumps(payload, sort_keys=True)}")

        return write
