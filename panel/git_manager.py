"""
Git Manager - Keep a history of the prompt data directory

Every mutating command commits the data directory, so any earlier state of
the collection (for example, before a destructive reorder or an import) can
be recovered with plain git.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

try:
    from git import Repo, InvalidGitRepositoryError, NoSuchPathError
    from git.exc import GitError
except ImportError:
    raise ImportError(
        "GitPython is required. Install with: pip install GitPython"
    )


logger = logging.getLogger(__name__)


class GitManager:
    """Manages git operations for the promptpanel repository."""

    def __init__(self, repo_path: str):
        """
        Initialize git manager.

        Args:
            repo_path: Path to the git repository
        """
        self.repo_path = Path(repo_path)
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Get the git repository object, opening it if needed."""
        if self._repo is None:
            if not self.is_initialized():
                raise ValueError(f"Repository not initialized: {self.repo_path}")
            self._repo = Repo(self.repo_path)
        return self._repo

    def is_initialized(self) -> bool:
        """
        Check if the repository is initialized.

        Returns:
            True if valid git repository exists
        """
        try:
            Repo(self.repo_path)
            return True
        except (InvalidGitRepositoryError, NoSuchPathError, GitError):
            return False

    def init(self) -> None:
        """
        Initialize a new git repository.

        Creates the directory and data/ folder, writes .gitignore and README,
        and makes an initial commit.
        """
        self.repo_path.mkdir(parents=True, exist_ok=True)
        self._repo = Repo.init(self.repo_path)

        (self.repo_path / "data").mkdir(exist_ok=True)
        (self.repo_path / ".gitignore").write_text(
            "# promptpanel files\n"
            "*.tmp\n"
            ".DS_Store\n"
        )
        (self.repo_path / "README.md").write_text(
            "# promptpanel repository\n\n"
            "This repository stores prompts managed by promptpanel.\n"
            "The collection lives in data/prompt_panel_data.json.\n"
        )

        self._repo.index.add([".gitignore", "README.md"])
        self._repo.index.commit("Initial commit")
        logger.info(f"Initialized repository at {self.repo_path}")

    def has_changes(self) -> bool:
        """
        Check if repository has uncommitted changes.

        Returns:
            True if there are uncommitted changes
        """
        return self.repo.is_dirty(untracked_files=True)

    def commit(self, message: str) -> Optional[str]:
        """
        Commit all current changes.

        Args:
            message: Commit message

        Returns:
            Commit SHA, or None when there was nothing to commit
        """
        self.repo.git.add(A=True)

        if not self.repo.is_dirty(untracked_files=True):
            logger.debug("Nothing to commit")
            return None

        commit = self.repo.index.commit(message)
        logger.debug(f"Committed {commit.hexsha[:8]}: {message}")
        return commit.hexsha

    def get_status(self) -> Dict[str, List[str]]:
        """
        Get repository status.

        Returns:
            Dictionary with 'modified', 'untracked', and 'branch' keys
        """
        return {
            "modified": [item.a_path for item in self.repo.index.diff(None)],
            "untracked": self.repo.untracked_files,
            "branch": self.repo.active_branch.name if not self.repo.head.is_detached else "HEAD"
        }

    def get_diff(self, staged: bool = False) -> str:
        """
        Get diff of changes.

        Args:
            staged: If True, show staged changes; if False, show unstaged

        Returns:
            Diff text
        """
        if staged:
            return self.repo.git.diff("--cached")
        return self.repo.git.diff()

    def get_log(self, limit: int = 20) -> List[Dict[str, str]]:
        """
        Get recent commits, newest first.

        Returns:
            List of dicts with 'sha', 'date' and 'message' keys
        """
        return [
            {
                "sha": commit.hexsha,
                "date": commit.committed_datetime.isoformat(),
                "message": commit.message.strip(),
            }
            for commit in self.repo.iter_commits(max_count=limit)
        ]
