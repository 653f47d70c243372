"""Terminal rendering of ranked merge requests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rich.console import Console
from rich.style import Style
from rich.text import Text

from .models.common import User
from .priority import RankedMergeRequest

DEFAULT_REFERENCE_WIDTH = 25
DEFAULT_TITLE_WIDTH = 40
USER_COLUMN_WIDTH = 15
# single-space gaps between the four columns
SEPARATORS = 3
ELLIPSIS = "..."

MAIN_LINE_ACTION = "bright_red"
OTHER_ACTION = "yellow"
RESOLVED = "bright_green"
MUTED = "grey50"
NEUTRAL = "white"


@dataclass(frozen=True)
class ColumnWidths:
    reference: int
    title: int
    author: int = USER_COLUMN_WIDTH
    assignees: int = USER_COLUMN_WIDTH


def cell(width: int, body: str) -> str:
    """Fit *body* into exactly *width* characters, truncating with an ellipsis."""
    if len(body) > width:
        return body[: max(width - len(ELLIPSIS), 0)] + ELLIPSIS
    return body.ljust(width)


def compute_widths(
    rows: Sequence[RankedMergeRequest], terminal_width: int | None
) -> ColumnWidths:
    """Size the reference column to its content and give the title the rest.

    Without a known terminal width, or when the fixed columns leave no room,
    the title column is as wide as the longest title.
    """
    reference = max(
        (len(r.merge_request.reference) for r in rows), default=DEFAULT_REFERENCE_WIDTH
    )
    fixed = reference + USER_COLUMN_WIDTH * 2 + SEPARATORS
    remaining = terminal_width - fixed if terminal_width is not None else 0
    if remaining > 0:
        title = remaining
    else:
        title = max((len(r.merge_request.title) for r in rows), default=DEFAULT_TITLE_WIDTH)
    return ColumnWidths(reference=reference, title=title)


def title_style(ranked: RankedMergeRequest, viewer: User) -> str:
    mr, approvals = ranked.merge_request, ranked.approvals
    if mr.is_assignee(viewer) and not mr.draft:
        return MAIN_LINE_ACTION if mr.targets_main_branch else OTHER_ACTION
    if approvals.approvals_left < 1 or approvals.approved_by_user(viewer):
        return RESOLVED
    if mr.draft:
        return MUTED
    return NEUTRAL


def format_row(ranked: RankedMergeRequest, viewer: User, widths: ColumnWidths) -> Text:
    mr = ranked.merge_request
    assignees = "".join(f"{assignee.username} " for assignee in mr.assignees)
    return Text.assemble(
        (cell(widths.reference, mr.reference), Style(color="blue", link=mr.web_url)),
        " ",
        (cell(widths.title, mr.title), title_style(ranked, viewer)),
        " ",
        (cell(widths.author, mr.author.username), "green" if mr.is_author(viewer) else NEUTRAL),
        " ",
        (cell(widths.assignees, assignees), "red"),
    )


def format_table(
    rows: Sequence[RankedMergeRequest], viewer: User, terminal_width: int | None
) -> list[Text]:
    widths = compute_widths(rows, terminal_width)
    return [format_row(ranked, viewer, widths) for ranked in rows]


def render(console: Console, rows: Sequence[RankedMergeRequest], viewer: User) -> None:
    """Clear the screen and draw the whole table.

    Rich emits the reference hyperlink as an OSC 8 escape on terminals and
    plain text elsewhere.
    """
    terminal_width = console.width if console.is_terminal else None
    lines = format_table(rows, viewer, terminal_width)
    console.clear()
    for line in lines:
        console.print(line, no_wrap=True, overflow="ignore", crop=False)
