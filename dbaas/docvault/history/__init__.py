"""
History module for DocVault - the version-controlled audit trail.

The store directory is a git working tree. After every mutation the whole
tree is staged and committed, so `git log` is the audit trail.

Invariants:
    - One commit per mutating document operation
    - Commits are parented on HEAD (root commit on an empty repository)
    - Author and committer identity are fixed per VersionLog

How to change safely:
    - Commit messages are read by humans and tooling; keep their format
    - A crash between the blob write and the commit leaves the store ahead
      of the log; the next commit picks the change up
"""

from .version_log import CommitInfo, VersionLog

__all__ = [
    "CommitInfo",
    "VersionLog",
]
