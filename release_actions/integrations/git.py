"""Git operations used by the merge-forward workflow."""

from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from release_actions.models import DEFAULT_REMOTE
from release_actions.utils.logger import get_logger
from release_actions.utils.shell import ShellError, ShellResult, run_command

logger = get_logger(__name__)


class GitError(Exception):
    """Git command error."""
    pass


class GitOperations(Protocol):
    """Capabilities the cascade needs from a working copy."""

    def fetch(self, branch: str, unshallow: bool = False) -> None: ...

    def switch_to(self, branch: str) -> None: ...

    def switch_back(self) -> None: ...

    def current_branch(self) -> Optional[str]: ...

    def log_authors(self, previous: str, current: str, log_format: str = "%an") -> List[str]: ...

    def merge(self, branch: str, strategy: str) -> None: ...

    def push(self, branches: Sequence[str], atomic: bool = True) -> None: ...


class GitRepository:
    """Git working copy driven through the git CLI."""

    def __init__(self, remote: str = DEFAULT_REMOTE, cwd: Optional[Union[str, Path]] = None):
        """Initialize repository wrapper.

        Args:
            remote: Remote used for fetch and push
            cwd: Working copy directory (defaults to the current directory)
        """
        self.remote = remote
        self.cwd = cwd

    def _git(self, *args: str) -> ShellResult:
        """Run a git subcommand, raising GitError on failure."""
        try:
            return run_command(["git", *args], cwd=self.cwd, check=True)
        except ShellError as e:
            detail = e.stderr.strip() or e.stdout.strip()
            message = f"{e}: {detail}" if detail else str(e)
            raise GitError(message) from e

    def fetch(self, branch: str, unshallow: bool = False) -> None:
        """Fetch a branch from the remote, optionally deepening to full history."""
        args = ["fetch", self.remote, branch]
        if unshallow:
            args.append("--unshallow")
        self._git(*args)

    def switch_to(self, branch: str) -> None:
        """Switch the working copy to a branch."""
        self._git("switch", branch)

    def switch_back(self) -> None:
        """Switch back to the previously checked out branch."""
        self._git("switch", "-")

    def current_branch(self) -> Optional[str]:
        """Name of the checked out branch, None when HEAD is detached."""
        branch = self._git("branch", "--show-current").stdout.strip()
        return branch or None

    def log_authors(self, previous: str, current: str, log_format: str = "%an") -> List[str]:
        """List authors of non-merge commits reachable from previous but not current.

        Args:
            log_format: git log placeholder naming the author (%an or %ae)

        Returns:
            One entry per commit, newest first
        """
        result = self._git(
            "log", previous, f"^{current}", f"--format={log_format}", "--no-merges"
        )
        return [line for line in result.stdout.splitlines() if line]

    def merge(self, branch: str, strategy: str) -> None:
        """Merge a branch into the checked out branch."""
        self._git("merge", branch, "-s", strategy)

    def push(self, branches: Sequence[str], atomic: bool = True) -> None:
        """Push branches to the remote in one command."""
        args = ["push"]
        if atomic:
            args.append("--atomic")
        args.append(self.remote)
        args.extend(branches)
        self._git(*args)
