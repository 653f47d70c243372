"""Actionability scoring for merge requests.

Each rule is a ``(predicate, delta)`` pair. All rules are evaluated for every
merge request and their deltas summed from zero; a higher score means the
viewer should look at the merge request sooner.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .models.approvals import ApprovalInfo
from .models.common import User
from .models.merge_requests import MergeRequest

MARGE_BOT_USERNAME = "nomadic-margebot"

Predicate = Callable[[MergeRequest, ApprovalInfo, User], bool]


@dataclass(frozen=True)
class Rule:
    description: str
    predicate: Predicate
    delta: int


def _assigned_only_to_bot(mr: MergeRequest) -> bool:
    # vacuously true for an MR without assignees
    return all(assignee.username == MARGE_BOT_USERNAME for assignee in mr.assignees)


RULES: tuple[Rule, ...] = (
    Rule(
        "viewer is an assignee of a non-draft MR",
        lambda mr, approvals, viewer: mr.is_assignee(viewer) and not mr.draft,
        5,
    ),
    Rule(
        "targets a main-line branch",
        lambda mr, approvals, viewer: mr.targets_main_branch,
        2,
    ),
    Rule(
        "viewer is the author",
        lambda mr, approvals, viewer: mr.is_author(viewer),
        1,
    ),
    Rule(
        "viewer is a requested reviewer",
        lambda mr, approvals, viewer: mr.is_reviewer(viewer),
        1,
    ),
    Rule(
        "has merge conflicts",
        lambda mr, approvals, viewer: mr.has_conflicts,
        -1,
    ),
    Rule(
        "viewer already approved",
        lambda mr, approvals, viewer: approvals.approved_by_user(viewer),
        -1,
    ),
    Rule(
        "no approvals left to give",
        lambda mr, approvals, viewer: approvals.approvals_left < 1,
        -2,
    ),
    Rule(
        "assigned only to the merge bot",
        lambda mr, approvals, viewer: _assigned_only_to_bot(mr),
        -5,
    ),
)


def score(mr: MergeRequest, approvals: ApprovalInfo, viewer: User) -> int:
    return sum(rule.delta for rule in RULES if rule.predicate(mr, approvals, viewer))


@dataclass(frozen=True)
class RankedMergeRequest:
    merge_request: MergeRequest
    approvals: ApprovalInfo
    score: int


def rank(
    pairs: Iterable[tuple[MergeRequest, ApprovalInfo]], viewer: User
) -> list[RankedMergeRequest]:
    """Score and order merge requests, highest score first.

    Equal scores are ordered by reference string so output is reproducible.
    """
    ranked = [
        RankedMergeRequest(mr, approvals, score(mr, approvals, viewer)) for mr, approvals in pairs
    ]
    return sorted(ranked, key=lambda r: (-r.score, r.merge_request.reference))
