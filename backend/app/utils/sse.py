"""
Server-sent events for live view models.

A view model pushes snapshots to its listeners from whatever thread wrote
the change; the stream hands them to the event loop and writes one
`data:` frame per snapshot, with comment frames as keepalive.
"""
import asyncio
import json
from typing import Any, AsyncIterator, Callable

from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder

from backend.app.core.config import settings
from backend.app.core.logging_config import get_logger

logger = get_logger("utils.sse")


def format_event(data: Any, event: str | None = None) -> str:
    payload = json.dumps(jsonable_encoder(data), separators=(",", ":"))
    lines = [f"event: {event}"] if event else []
    lines.append(f"data: {payload}")
    return "\n".join(lines) + "\n\n"


async def stream_view(
    view,
    render: Callable[[list[dict]], Any],
    keepalive: float | None = None,
) -> AsyncIterator[str]:
    """
    Start the view, yield its current snapshot, then one frame per update
    until the client disconnects. The view subscribes only once the stream is
    iterated and is closed on exit.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    interval = keepalive if keepalive is not None else settings.stream_keepalive_seconds

    def _push(snapshot: list[dict]) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, snapshot)

    try:
        await run_in_threadpool(view.start)
        view.add_listener(_push)
        yield format_event(render(list(view.items)), event="snapshot")
        while True:
            try:
                snapshot = await asyncio.wait_for(queue.get(), timeout=interval)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            yield format_event(render(snapshot), event="snapshot")
    finally:
        view.close()
        logger.info("Stream closed view=%s", type(view).__name__)
