"""Discrete page events and a line-oriented source for them."""

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import TextIO

ANCHOR_MISSING_COMMANDS = {"redraw", "anchor-missing"}


@dataclass(frozen=True)
class NavigationChanged:
    """The visible location is now ``location``."""

    location: str


@dataclass(frozen=True)
class AnchorMissing:
    """The host redrew the page and the render target is gone."""


PageEvent = NavigationChanged | AnchorMissing


def parse_event(line: str) -> PageEvent | None:
    """Parse one input line.

    A URL or path navigates, ``redraw``/``anchor-missing`` report a lost
    render target; blank lines and ``#`` comments yield None.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    if text.lower() in ANCHOR_MISSING_COMMANDS:
        return AnchorMissing()
    return NavigationChanged(location=text)


async def line_events(stream: TextIO) -> AsyncIterator[PageEvent]:
    """Yield events read from a text stream until EOF."""
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        event = parse_event(line)
        if event is not None:
            yield event
