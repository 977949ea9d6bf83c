"""Answering lookup requests against a loaded ``TypeRegistry``.

A request carries a key pattern such as ``@ros2_types/std_msgs/msg/**`` and an
optional ``format`` parameter. The handler sends one reply per matching type,
or a single error reply when the format or pattern is invalid. Transports
adapt their own request objects to the ``Query`` protocol.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

import structlog

from ros2types.errors import (
    InvalidKeyError,
    ReplyDeliveryError,
    Ros2TypesError,
    UnknownFormatError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, Mapping

    from ros2types.models.record import TypeRecord
    from ros2types.registry import TypeRegistry

log = structlog.get_logger()

DEFAULT_KEY_PREFIX = "@ros2_types"
FORMAT_PARAMETER = "format"

ENCODING_JSON = "application/json"
ENCODING_TEXT = "text/plain"


class ReplyFormat(StrEnum):
    DESCRIPTION = "description"  # the type's own description, JSON
    FULL = "full"  # own + referenced descriptions, JSON
    DEFINITION = "definition"  # original .msg/.srv/.action text
    FLATTENED = "flattened"  # definition with dependencies, as stored by rosbag2
    HASH = "hash"
    PATH = "path"  # path of the original definition file

    @classmethod
    def accepted(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, token: str | None) -> ReplyFormat:
        """Case-insensitive lookup; ``None`` selects ``DESCRIPTION``.

        Raises:
            UnknownFormatError: listing every accepted token.
        """
        if token is None:
            return cls.DESCRIPTION
        try:
            return cls(token.lower())
        except ValueError:
            raise UnknownFormatError(token, cls.accepted()) from None


class Query(Protocol):
    """A lookup request as delivered by a transport."""

    @property
    def key(self) -> str: ...

    @property
    def parameters(self) -> Mapping[str, str]: ...

    async def reply(self, key: str, payload: str, encoding: str) -> None:
        """Send one data reply. Raises ``ReplyDeliveryError`` on failure."""
        ...

    async def reply_err(self, error: Ros2TypesError) -> None:
        """Send an error reply. Raises ``ReplyDeliveryError`` on failure."""
        ...

    async def finish(self) -> None:
        """Signal that no more replies follow."""
        ...


@dataclass(frozen=True, slots=True)
class Reply:
    key: str
    payload: str
    encoding: str


@dataclass
class LocalQuery:
    """In-process ``Query`` collecting its replies in lists."""

    key: str
    parameters: Mapping[str, str] = field(default_factory=dict)
    replies: list[Reply] = field(default_factory=list)
    errors: list[Ros2TypesError] = field(default_factory=list)
    finished: bool = False

    async def reply(self, key: str, payload: str, encoding: str) -> None:
        self.replies.append(Reply(key=key, payload=payload, encoding=encoding))

    async def reply_err(self, error: Ros2TypesError) -> None:
        self.errors.append(error)

    async def finish(self) -> None:
        self.finished = True


class QueryHandler:
    """Resolves queries against a registry that is no longer being modified."""

    def __init__(self, registry: TypeRegistry, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self._registry = registry
        self._key_prefix = key_prefix.rstrip("/")

    def pattern_of(self, key: str) -> str:
        """Strip the key prefix, if present, from a request key."""
        prefix = f"{self._key_prefix}/"
        if key.startswith(prefix):
            return key[len(prefix) :]
        return key

    def reply_key(self, record: TypeRecord) -> str:
        return f"{self._key_prefix}/{record.full_name}"

    def render(self, record: TypeRecord, reply_format: ReplyFormat) -> tuple[str, str]:
        """Return ``(payload, encoding)`` for ``record`` in ``reply_format``."""
        description_msg = record.description.type_description_msg
        match reply_format:
            case ReplyFormat.DESCRIPTION:
                return description_msg.type_description.model_dump_json(), ENCODING_JSON
            case ReplyFormat.FULL:
                return description_msg.model_dump_json(), ENCODING_JSON
            case ReplyFormat.DEFINITION:
                return record.definition_text, ENCODING_TEXT
            case ReplyFormat.FLATTENED:
                return self._registry.flatten(record), ENCODING_TEXT
            case ReplyFormat.HASH:
                return record.content_hash, ENCODING_TEXT
            case ReplyFormat.PATH:
                return str(record.definition_path), ENCODING_TEXT

    async def handle(self, query: Query) -> int:
        """Answer one query. Returns the number of data replies delivered."""
        log.debug("query_received", key=query.key)
        try:
            delivered = await self._answer(query)
        finally:
            try:
                await query.finish()
            except ReplyDeliveryError:
                log.warning("reply_failed", key=query.key, exc_info=True)
        return delivered

    async def _answer(self, query: Query) -> int:
        try:
            reply_format = ReplyFormat.parse(query.parameters.get(FORMAT_PARAMETER))
            records = self._registry.query(self.pattern_of(query.key))
        except (UnknownFormatError, InvalidKeyError) as e:
            log.info("query_rejected", key=query.key, code=e.code.value, reason=e.message)
            try:
                await query.reply_err(e)
            except ReplyDeliveryError:
                log.warning("reply_failed", key=query.key, exc_info=True)
            return 0

        delivered = 0
        for record in records:
            payload, encoding = self.render(record, reply_format)
            try:
                await query.reply(self.reply_key(record), payload, encoding)
            except ReplyDeliveryError:
                log.warning("reply_failed", key=query.key, type_name=record.full_name, exc_info=True)
                continue
            delivered += 1
        return delivered

    async def serve(self, queries: AsyncIterable[Query]) -> None:
        """Handle each incoming query in its own task until ``queries`` is exhausted."""
        async with asyncio.TaskGroup() as group:
            async for query in queries:
                group.create_task(self.handle(query))
