"""
Progress stream protocol.

A run produces ``progress`` events with a non-decreasing percentage and ends
with exactly one ``complete`` event carrying the jobs. On the wire each event
is one server-sent-events frame: ``data: <json>\\n\\n``.
"""

from __future__ import annotations

import json
from contextlib import aclosing
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Iterable, List, Literal

from pydantic import BaseModel, Field

from .state import JobRecord

MEDIA_TYPE = "text/event-stream"


class ProgressEvent(BaseModel):
    type: Literal["progress"] = "progress"
    message: str
    progress: int = Field(ge=0, le=100)


class CompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"
    jobs: List[Dict[str, Any]]


def progress_event(message: str, percent: int) -> Dict[str, Any]:
    return ProgressEvent(message=message, progress=percent).model_dump()


def complete_event(jobs: Iterable[JobRecord]) -> Dict[str, Any]:
    return CompleteEvent(jobs=[job.to_payload() for job in jobs]).model_dump()


def encode_frame(event: Dict[str, Any]) -> str:
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


async def stream_frames(events: AsyncGenerator[Dict[str, Any], None]) -> AsyncIterator[str]:
    """Render events as SSE frames, stopping after the ``complete`` frame."""
    async with aclosing(events):
        async for event in events:
            yield encode_frame(event)
            if event.get("type") == "complete":
                break
