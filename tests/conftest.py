"""Shared test configuration and fixtures."""

import os
from typing import Dict, List, Optional, Sequence

import pytest


class FakeGitRepository:
    """In-memory commit graph implementing the git capabilities of the cascade."""

    def __init__(self, default_branch: str = "main", author: str = "developer"):
        self.commits: Dict[str, dict] = {}
        self.branches: Dict[str, Optional[str]] = {}
        self.calls: List[tuple] = []
        self.pushed: List[List[str]] = []
        self.fail_on: Optional[str] = None
        self._counter = 0
        self.checked_out = default_branch
        self._previous_checkout: Optional[str] = None
        self.branches[default_branch] = None
        self.commit(default_branch, author)

    def _new_commit(self, author: str, email: str, parents: Sequence[str]) -> str:
        self._counter += 1
        sha = f"c{self._counter}"
        self.commits[sha] = {"author": author, "email": email, "parents": list(parents)}
        return sha

    def commit(self, branch: str, author: str, email: Optional[str] = None) -> str:
        """Add a commit on top of a branch."""
        tip = self.branches[branch]
        parents = [tip] if tip else []
        sha = self._new_commit(author, email or f"{author}@example.com", parents)
        self.branches[branch] = sha
        return sha

    def branch(self, name: str, start: str) -> None:
        """Create a branch pointing at another branch's tip."""
        self.branches[name] = self.branches[start]

    def ancestors(self, sha: Optional[str]) -> set:
        seen = set()
        stack = [sha] if sha else []
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self.commits[current]["parents"])
        return seen

    def _record(self, *call) -> None:
        self.calls.append(call)
        if self.fail_on == call[0]:
            from release_actions.integrations.git import GitError
            raise GitError(f"git {call[0]} failed")

    def fetch(self, branch: str, unshallow: bool = False) -> None:
        self._record("fetch", branch, unshallow)

    def switch_to(self, branch: str) -> None:
        self._record("switch", branch)
        self._previous_checkout, self.checked_out = self.checked_out, branch

    def switch_back(self) -> None:
        self._record("switch", "-")
        self._previous_checkout, self.checked_out = self.checked_out, self._previous_checkout

    def current_branch(self) -> Optional[str]:
        self._record("current_branch")
        return self.checked_out

    def log_authors(self, previous: str, current: str, log_format: str = "%an") -> List[str]:
        self._record("log", previous, current, log_format)
        missing = self.ancestors(self.branches[previous]) - self.ancestors(self.branches[current])
        key = "email" if log_format == "%ae" else "author"
        return [
            self.commits[sha][key]
            for sha in sorted(missing)
            if len(self.commits[sha]["parents"]) <= 1
        ]

    def merge(self, branch: str, strategy: str) -> None:
        self._record("merge", branch, strategy)
        target = self.checked_out
        self.branches[target] = self._new_commit(
            "merger", "merger@example.com", [self.branches[target], self.branches[branch]]
        )

    def push(self, branches: Sequence[str], atomic: bool = True) -> None:
        self._record("push", list(branches), atomic)
        self.pushed.append(list(branches))


@pytest.fixture
def fake_git():
    """Fake repository with a single 'main' branch."""
    return FakeGitRepository()


@pytest.fixture(autouse=True)
def clean_actions_env(monkeypatch):
    """Remove GitHub Actions inputs and context from the environment."""
    for key in list(os.environ):
        if key.startswith("INPUT_") or key in ("GITHUB_REF", "GITHUB_ACTIONS"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner
    return CliRunner()
