"""
Repository context shared by every component.

The context is created once at startup and passed explicitly to the services
that need the repository root; nothing in this package keeps a global handle.
"""

import logging
from pathlib import Path
from typing import List, Union

import git

from .filesystem.exceptions import RepositoryNotFoundError
from .path_utils import resolve_path_in_root

logger = logging.getLogger(__name__)

StrOrPath = Union[str, Path]


class RepositoryContext:
    """Resolved repository root plus the git handle used to enumerate files."""

    def __init__(self, repo: git.Repo):
        if repo.working_tree_dir is None:
            raise RepositoryNotFoundError(f"Repository at {repo.git_dir} has no working tree")
        self._repo = repo
        self._root = Path(repo.working_tree_dir).resolve()

    @classmethod
    def open(cls, directory: StrOrPath) -> "RepositoryContext":
        """
        Open the git working tree containing ``directory``.

        Raises:
            RepositoryNotFoundError: If ``directory`` is not inside a git working tree.
        """
        try:
            repo = git.Repo(str(directory), search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise RepositoryNotFoundError(
                f"No git repository found at or above {directory}"
            ) from e
        context = cls(repo)
        logger.info("Repository root: %s", context.root)
        return context

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: StrOrPath) -> Path:
        """Resolve a repository-relative path to an absolute path inside the root."""
        return resolve_path_in_root(self._root, path)

    def list_files(self) -> List[str]:
        """
        List committed, staged and untracked files, excluding ignored ones.

        Paths are relative to the repository root, in the order git reports
        them, and only paths that still exist on disk are returned.
        """
        output = self._repo.git.ls_files(
            "--cached", "--others", "--exclude-standard", "-z", stdout_as_string=False
        )
        files: List[str] = []
        seen = set()
        for raw_path in output.split(b"\0"):
            if not raw_path:
                continue
            try:
                file_path = raw_path.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("Found file path with invalid utf8 name: %r", raw_path)
                continue
            if file_path in seen:
                continue
            seen.add(file_path)
            if (self._root / file_path).exists():
                files.append(file_path)
        return files
