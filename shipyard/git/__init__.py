"""Git operations module.

Usage:
    from shipyard.git import Repository

    repo = Repository(ctx)
    tags = repo.list_tags("v*")
"""

from shipyard.git.repository import (
    GitError,
    Repository,
    StatusEntry,
    find_repository_root,
)

__all__ = [
    "GitError",
    "Repository",
    "StatusEntry",
    "find_repository_root",
]
