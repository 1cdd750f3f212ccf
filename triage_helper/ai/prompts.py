"""
Prompt templates for the triage completion request.
Edit the prompts below to modify AI behavior.
"""

from ..github_client.models import Aggregate

SYSTEM_PROMPT = """\
You're a helpful assistant that triages GitHub issues for maintainers.

Read the repository readme, the issue and its comments, then reply in Markdown with:
1. A short summary paragraph of the problem as currently understood.
2. Up to five clarifying questions that would help a maintainer reproduce,
   scope or prioritise the issue. Skip questions already answered in the thread.

Be concise. Do not propose fixes unless the thread already points to one."""

USER_PROMPT_TEMPLATE = """\
Here is a GitHub issue with its repository context:

{material}

What questions would help triage this issue?"""

SECTION_DELIMITER = "=" * 3
COMMENT_SEPARATOR = "\n\n---\n\n"


def _section(title: str, content: str) -> str:
    return f"{SECTION_DELIMITER} {title} {SECTION_DELIMITER}\n{content}"


def format_aggregate(aggregate: Aggregate) -> str:
    """Render the aggregate as delimited plain-text sections."""
    readme = aggregate.readme_text.strip() or "(no readme)"
    issue = (
        f"Title: {aggregate.issue_title}\n"
        f"@{aggregate.issue_author} (OP):\n{aggregate.issue_body}"
    )
    if aggregate.comments:
        comments = COMMENT_SEPARATOR.join(
            f"@{comment.author}:\n{comment.body}" for comment in aggregate.comments
        )
    else:
        comments = "(no comments)"

    return "\n\n".join(
        [
            _section("REPOSITORY", aggregate.context.slug),
            _section("README", readme),
            _section(f"ISSUE #{aggregate.context.issue_number}", issue),
            _section("COMMENTS", comments),
        ]
    )


def build_messages(aggregate: Aggregate) -> list[dict[str, str]]:
    """Build the system and user messages for one completion request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": USER_PROMPT_TEMPLATE.format(
                material=format_aggregate(aggregate)
            ),
        },
    ]
