"""AI completion for triage suggestions."""

from .completion import NO_SUGGESTION_TEXT, CompletionClient, extract_completion_text
from .config import CompletionSettings
from .prompts import SYSTEM_PROMPT, build_messages, format_aggregate

__all__ = [
    "NO_SUGGESTION_TEXT",
    "SYSTEM_PROMPT",
    "CompletionClient",
    "CompletionSettings",
    "build_messages",
    "extract_completion_text",
    "format_aggregate",
]
