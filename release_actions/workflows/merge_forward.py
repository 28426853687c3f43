"""Merge bot-authored commits forward across a chain of release branches.

For each adjacent pair of branches, the non-merge commits present in the
earlier branch but missing from the later one are inspected. When they were
all written by the designated author, the earlier branch is merged into the
later one. The first pair that fails this check stops the cascade; if some
branch was already merged at that point the run aborts, because pushing a
partial cascade would leave the branches inconsistent. Merged branches are
pushed together with a single atomic push.
"""

from typing import Iterable, List, Optional, Sequence

from release_actions.integrations.git import GitOperations, GitRepository
from release_actions.models import (
    CascadeDecision,
    CascadeResult,
    CascadeState,
    MergeForwardConfig,
    PairEvaluation,
)
from release_actions.utils.logger import get_logger

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


class MergeForwardError(Exception):
    """Raised when the cascade cannot run or cannot be pushed safely."""

    pass


def origin_branch_from_ref(ref: Optional[str]) -> Optional[str]:
    """Branch name of a ``refs/heads/...`` ref, None for any other ref."""
    if not ref or not ref.startswith(BRANCH_REF_PREFIX):
        return None
    return ref[len(BRANCH_REF_PREFIX):] or None


def decide(authors: Iterable[str], from_author: str, state: CascadeState) -> CascadeDecision:
    """Decide what to do with one branch pair.

    Args:
        authors: Authors of the commits missing from the later branch
        from_author: Designated author
        state: Cascade state before this pair

    Returns:
        CONTINUE to merge, HALT_CLEAN to stop quietly, HALT_INCONSISTENT to abort
    """
    unique = set(authors)
    if not state.halted and unique == {from_author}:
        return CascadeDecision.CONTINUE
    if state.pending_pushes:
        return CascadeDecision.HALT_INCONSISTENT
    return CascadeDecision.HALT_CLEAN


def prepare_branches(git: GitOperations, branches: Sequence[str], origin_branch: Optional[str]) -> None:
    """Make every listed branch available locally.

    The checked out branch comes from a shallow clone and is deepened to full
    history. Other branches are fetched and switched to once so that a local
    branch tracking the remote exists, then the original checkout is restored.
    """
    for branch in branches:
        if branch == origin_branch:
            git.fetch(branch, unshallow=True)
            continue
        git.fetch(branch)
        git.switch_to(branch)
        git.switch_back()


def evaluate_pair(
    git: GitOperations,
    previous: str,
    current: str,
    config: MergeForwardConfig,
    state: CascadeState,
) -> PairEvaluation:
    """Inspect one pair and return the decision without acting on it."""
    authors = git.log_authors(previous, current, log_format=config.log_format)
    logger.info(
        f"Found {len(authors)} commits in {previous} that are not present in {current}"
    )
    unique = sorted(set(authors))
    logger.info(f"Found {len(unique)} unique commit actors")

    return PairEvaluation(
        previous=previous,
        current=current,
        commit_count=len(authors),
        authors=unique,
        decision=decide(unique, config.from_author, state),
    )


def merge_forward(config: MergeForwardConfig, git: Optional[GitOperations] = None) -> CascadeResult:
    """Run the merge-forward cascade.

    Args:
        config: Merge-forward settings
        git: Git capabilities (defaults to the working copy in the current directory)

    Returns:
        Summary of evaluated pairs and pushed branches

    Raises:
        MergeForwardError: If fewer than 2 branches are given or the cascade breaks
            after a branch was already merged
        GitError: If any git command fails
    """
    branches: List[str] = list(config.branches)
    if len(branches) < 2:
        raise MergeForwardError("Please specify at least 2 branches")

    if git is None:
        git = GitRepository(remote=config.remote)

    origin_branch = origin_branch_from_ref(config.ref)
    if origin_branch is None and config.ref is None:
        origin_branch = git.current_branch()
    logger.debug(f"Checked out branch: {origin_branch}")

    prepare_branches(git, branches, origin_branch)

    state = CascadeState()
    result = CascadeResult(dry_run=config.dry_run)

    for previous, current in zip(branches, branches[1:]):
        evaluation = evaluate_pair(git, previous, current, config, state)
        result.pairs.append(evaluation)

        if evaluation.decision is CascadeDecision.CONTINUE:
            logger.info(
                f"Merging {previous} into {current} using {config.merge_strategy} strategy"
            )
            git.switch_to(current)
            git.merge(previous, config.merge_strategy)
            state.queue(current)
            continue

        if evaluation.decision is CascadeDecision.HALT_INCONSISTENT:
            logger.info(
                f"Expected author '{config.from_author}' not found or there are multiple authors"
            )
            raise MergeForwardError(
                "Aborted because cannot guarantee the successful merge between all branches"
            )

        if state.halted:
            logger.info(f"Not merging {previous} into {current}, merge-forward already stopped")
        else:
            logger.info(
                f"Expected author '{config.from_author}' not found or there are multiple authors"
            )
            state.halt()

    result.pending_pushes = list(state.pending_pushes)

    if not state.pending_pushes:
        logger.info("Nothing to push")
        return result

    if config.dry_run:
        logger.info("Dry-run is true, not invoking push this time")
        logger.info(f"Would push {', '.join(state.pending_pushes)} to {config.remote}")
        return result

    git.push(state.pending_pushes, atomic=True)
    result.pushed = True
    logger.info(f"Pushed {', '.join(state.pending_pushes)} to {config.remote}")
    return result
