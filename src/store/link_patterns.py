"""Raw download link construction.

Links follow ``<base>/<ref>/<project id>/<file name>`` where ref is the
moving latest ref or a commit reference that pins a historical version.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import SheetSyncConfig
from core.errors import SheetSyncConfigError


@dataclass(frozen=True)
class RawLinkBuilder:
    """Build latest and commit-pinned raw links for dataset files."""

    raw_base_url: str
    latest_ref: str
    commit_ref: str | None = None

    @classmethod
    def from_config(cls, config: SheetSyncConfig) -> "RawLinkBuilder":
        return cls(
            raw_base_url=config.raw_base_url,
            latest_ref=config.latest_ref,
            commit_ref=config.commit_ref,
        )

    def latest(self, project_id: str, file_name: str) -> str:
        """Return the link that always tracks the newest file."""
        return _join(self.raw_base_url, self.latest_ref, project_id, file_name)

    def pinned(self, project_id: str, file_name: str) -> str:
        """Return a link pinned to the run's commit reference.

        Raises:
            SheetSyncConfigError: If no commit reference is configured.
        """
        if not self.commit_ref:
            raise SheetSyncConfigError(
                f"Cannot pin the previous version of {project_id}/{file_name}: "
                "no commit reference configured. Set CURRENT_COMMIT or pass --commit."
            )
        return _join(self.raw_base_url, self.commit_ref, project_id, file_name)


def _join(base_url: str, ref: str, project_id: str, file_name: str) -> str:
    return f"{base_url.rstrip('/')}/{ref}/{project_id}/{file_name}"
