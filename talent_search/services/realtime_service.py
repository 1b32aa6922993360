from typing import Any, Callable, Dict, Optional
from enum import Enum
import asyncio
import logging

from pydantic import BaseModel, Field
from supabase import AsyncClient
from tenacity import retry, stop_after_attempt, wait_exponential

from talent_search.config.constants import REALTIME_SUBSCRIBE_ATTEMPTS

logger = logging.getLogger(__name__)


class ProfileChangeKind(str, Enum):
    INSERT = 'insert'
    UPDATE = 'update'
    DELETE = 'delete'


class ProfileChangeEvent(BaseModel):
    kind: ProfileChangeKind
    record: Dict[str, Any] = Field(default_factory=dict)


def parse_change_payload(payload: Dict[str, Any]) -> Optional[ProfileChangeEvent]:
    """
    Normalize a postgres_changes payload into a ProfileChangeEvent.

    Accepts both the wrapped ``{"data": {"type", "record", "old_record"}}`` shape
    and the flat ``{"eventType", "new", "old"}`` shape.
    """
    data = payload.get("data", payload) if isinstance(payload, dict) else {}
    event_type = str(data.get("type") or data.get("eventType") or "").upper()

    try:
        kind = ProfileChangeKind(event_type.lower())
    except ValueError:
        logger.warning(f"Ignoring realtime payload with unknown event type: {event_type!r}")
        return None

    if kind == ProfileChangeKind.DELETE:
        record = data.get("old_record") or data.get("old") or {}
    else:
        record = data.get("record") or data.get("new") or {}
    return ProfileChangeEvent(kind=kind, record=dict(record))


class ProfileChangeStream:
    """Async iterator over change events; ``close()`` unsubscribes."""

    _CLOSED = object()

    def __init__(self, predicate: Optional[Callable[[ProfileChangeEvent], bool]] = None):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._predicate = predicate
        self._channel = None
        self._supabase: Optional[AsyncClient] = None
        self.closed = False

    def push(self, event: ProfileChangeEvent) -> None:
        if self.closed:
            return
        if self._predicate is not None and not self._predicate(event):
            return
        self._queue.put_nowait(event)

    def handle_payload(self, payload: Dict[str, Any]) -> None:
        event = parse_change_payload(payload)
        if event is not None:
            self.push(event)

    def attach(self, supabase: AsyncClient, channel) -> None:
        self._supabase = supabase
        self._channel = channel

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._supabase is not None and self._channel is not None:
            await self._supabase.remove_channel(self._channel)
        self._queue.put_nowait(self._CLOSED)

    def __aiter__(self):
        return self

    async def __anext__(self) -> ProfileChangeEvent:
        item = await self._queue.get()
        if item is self._CLOSED:
            raise StopAsyncIteration
        return item


class RealtimeService:
    def __init__(self, supabase_client: AsyncClient):
        self.supabase = supabase_client

    @retry(stop=stop_after_attempt(REALTIME_SUBSCRIBE_ATTEMPTS),
           wait=wait_exponential(multiplier=1, min=1, max=5),
           reraise=True)
    async def _open_channel(self, table: str, schema: str, callback: Callable[[Dict[str, Any]], None]):
        channel = self.supabase.channel(f"{schema}:{table}")
        channel.on_postgres_changes("*", schema=schema, table=table, callback=callback)
        await channel.subscribe()
        return channel

    async def subscribe(self,
                        table: str,
                        predicate: Optional[Callable[[ProfileChangeEvent], bool]] = None,
                        schema: str = "public") -> ProfileChangeStream:
        """Subscribe to insert/update/delete events on a table."""
        stream = ProfileChangeStream(predicate)
        channel = await self._open_channel(table, schema, stream.handle_payload)
        stream.attach(self.supabase, channel)
        logger.info(f"Subscribed to realtime changes on {schema}.{table}")
        return stream
