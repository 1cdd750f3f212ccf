"""Rendering of triage suggestions."""

from .sink import (
    ConsoleRenderSink,
    RenderSink,
    RenderTarget,
    TargetState,
    markdown_to_html,
)

__all__ = [
    "ConsoleRenderSink",
    "RenderSink",
    "RenderTarget",
    "TargetState",
    "markdown_to_html",
]
