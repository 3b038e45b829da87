"""In-memory bundle of the record collections a dashboard view is built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .normalize import ensure_records, extract_number


def select_budgeted(projects: Any) -> List[Mapping[str, Any]]:
    """Projects with allocated hours, the only ones health analytics consider."""

    return [
        project
        for project in ensure_records(projects, "projects")
        if extract_number(project, "allocatedHours") > 0
    ]


@dataclass
class DashboardSnapshot:
    """Container bundling together the proposal, timesheet and project datasets.

    The snapshot is read-only by convention: each attribute is a list of the
    mappings returned by the backend API, already validated for shape. Report
    builders receive the snapshot instead of reaching for any shared state.
    """

    timezone: str = "UTC"
    proposals: List[Mapping[str, Any]] = field(default_factory=list)
    timesheets: List[Mapping[str, Any]] = field(default_factory=list)
    projects: List[Mapping[str, Any]] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        *,
        proposals: Any = (),
        timesheets: Any = (),
        projects: Any = (),
        timezone: str = "UTC",
    ) -> "DashboardSnapshot":
        """Validate the raw collections and assemble a snapshot."""

        return cls(
            timezone=timezone,
            proposals=ensure_records(proposals, "proposals"),
            timesheets=ensure_records(timesheets, "timesheets"),
            projects=ensure_records(projects, "projects"),
        )

    @property
    def budgeted_projects(self) -> List[Mapping[str, Any]]:
        return select_budgeted(self.projects)

    @property
    def scan_counts(self) -> Dict[str, int]:
        return {
            "proposals": len(self.proposals),
            "timesheets": len(self.timesheets),
            "projects": len(self.projects),
        }


__all__ = ["DashboardSnapshot", "select_budgeted"]
