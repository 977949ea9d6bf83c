"""Command-line entry point and newline-delimited JSON transport over stdio.

Usage::

    ros2types 'std_msgs/msg/**' --format hash    # answer and exit
    ros2types                                    # serve requests from stdin

In serving mode each stdin line is a request
``{"id": 1, "key": "@ros2_types/std_msgs/msg/String", "parameters": {"format": "hash"}}``.
Every reply is written to stdout as one JSON line carrying the request id,
followed by ``{"id": 1, "done": true}`` once the request is complete.
Logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import TYPE_CHECKING, Any, TextIO

import pydantic
import structlog
from pydantic import BaseModel, ConfigDict

from ros2types.config import Settings
from ros2types.errors import (
    ConfigError,
    InvalidRequestError,
    ReplyDeliveryError,
    Ros2TypesError,
)
from ros2types.logging_setup import configure_logging
from ros2types.query import FORMAT_PARAMETER, LocalQuery
from ros2types.state import build_state

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from ros2types.query import QueryHandler

log = structlog.get_logger()


class StdioRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int | str | None = None
    key: str
    parameters: dict[str, str] = {}


class _LineWriter:
    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, message: dict[str, Any]) -> None:
        try:
            self._stream.write(json.dumps(message) + "\n")
            self._stream.flush()
        except (OSError, ValueError) as e:
            raise ReplyDeliveryError(str(e)) from e


class StdioQuery:
    """A request read from stdin, replying through the shared line writer."""

    def __init__(self, request: StdioRequest, writer: _LineWriter) -> None:
        self._request = request
        self._writer = writer

    @property
    def key(self) -> str:
        return self._request.key

    @property
    def parameters(self) -> dict[str, str]:
        return self._request.parameters

    async def reply(self, key: str, payload: str, encoding: str) -> None:
        self._writer.write(
            {"id": self._request.id, "key": key, "encoding": encoding, "payload": payload}
        )

    async def reply_err(self, error: Ros2TypesError) -> None:
        self._writer.write({"id": self._request.id, **error.to_dict()})

    async def finish(self) -> None:
        self._writer.write({"id": self._request.id, "done": True})


async def _read_requests(stream: TextIO, writer: _LineWriter) -> AsyncIterator[StdioQuery]:
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        line = line.strip()
        if not line:
            continue
        try:
            request = StdioRequest.model_validate_json(line)
        except pydantic.ValidationError as e:
            log.warning("request_invalid", error=str(e))
            error = InvalidRequestError(f"Invalid request: {e}")
            try:
                writer.write({"id": None, **error.to_dict()})
            except ReplyDeliveryError:
                log.warning("reply_failed", exc_info=True)
            continue
        yield StdioQuery(request, writer)


async def serve_stdio(handler: QueryHandler, stdin: TextIO, stdout: TextIO) -> None:
    writer = _LineWriter(stdout)
    log.info("server_ready")
    await handler.serve(_read_requests(stdin, writer))


async def run_once(
    handler: QueryHandler, patterns: Sequence[str], reply_format: str | None, stdout: TextIO
) -> int:
    """Answer each pattern and print the replies. Returns a process exit code."""
    parameters = {} if reply_format is None else {FORMAT_PARAMETER: reply_format}
    exit_code = 0
    for pattern in patterns:
        query = LocalQuery(key=pattern, parameters=parameters)
        await handler.handle(query)
        for reply in query.replies:
            stdout.write(
                json.dumps(
                    {"key": reply.key, "encoding": reply.encoding, "payload": reply.payload}
                )
                + "\n"
            )
        for error in query.errors:
            stdout.write(json.dumps({"key": pattern, **error.to_dict()}) + "\n")
            exit_code = 1
    stdout.flush()
    return exit_code


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ros2types",
        description="Look up ROS 2 interface types. Serves stdin requests when no pattern is given.",
    )
    parser.add_argument("patterns", nargs="*", help="type name patterns, e.g. 'std_msgs/msg/**'")
    parser.add_argument("--format", dest="reply_format", default=None, help="reply format")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = Settings()
    configure_logging(settings.logging)

    try:
        state = build_state(settings)
    except ConfigError as e:
        log.error("startup_failed", code=e.code.value, reason=e.message)
        return 1

    if args.patterns:
        return asyncio.run(run_once(state.handler, args.patterns, args.reply_format, sys.stdout))

    asyncio.run(serve_stdio(state.handler, sys.stdin, sys.stdout))
    return 0


if __name__ == "__main__":
    sys.exit(main())
