"""Supabase-backed project repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from billtick.adapters.supabase_common import execute, first_row, parse_timestamp
from billtick.domain.models import ProjectRecord
from billtick.services.timers import ProjectRepository


@dataclass
class SupabaseProjectRepository(ProjectRepository):
    """Supabase implementation for project persistence."""

    client: Client

    def list_projects(self) -> list[ProjectRecord]:
        """Return all projects, oldest first."""
        rows = execute(
            self.client.table("projects")
            .select("id, name, notes, rate, created_at")
            .order("created_at", desc=False),
            "list projects",
        )
        return [_parse_row(row) for row in rows]

    def create_project(
        self, name: str, notes: str, rate: float | None
    ) -> ProjectRecord:
        """Create a project row and return it."""
        rows = execute(
            self.client.table("projects").insert(
                {"name": name, "notes": notes, "rate": rate}
            ),
            "create project",
        )
        return _parse_row(first_row(rows, "create project"))

    def delete_project(self, project_id: UUID) -> None:
        """Delete a project row; its timers go with it via ON DELETE CASCADE."""
        execute(
            self.client.table("projects").delete().eq("id", str(project_id)),
            "delete project",
        )

    def update_project_rate(self, project_id: UUID, rate: float | None) -> None:
        """Set or clear the project's rate override."""
        rows = execute(
            self.client.table("projects")
            .update({"rate": rate})
            .eq("id", str(project_id)),
            "update project rate",
        )
        first_row(rows, "update project rate")


def _parse_row(row: dict[str, object]) -> ProjectRecord:
    rate = row.get("rate")
    return ProjectRecord(
        id=UUID(str(row["id"])),
        name=str(row["name"]),
        notes=str(row.get("notes") or ""),
        rate=float(rate) if rate is not None else None,
        created_at=parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
    )
