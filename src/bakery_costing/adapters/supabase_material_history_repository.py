"""Supabase repository for material change history."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from bakery_costing.domain.materials import MaterialHistoryEntry
from bakery_costing.services.materials import MaterialHistoryRepository


@dataclass
class SupabaseMaterialHistoryRepository(MaterialHistoryRepository):
    """Supabase-backed material history repository."""

    client: Client

    def create_entry(  # noqa: PLR0913
        self,
        material_id: int,
        action: str,
        previous_data: dict[str, object] | None,
        new_data: dict[str, object] | None,
        changed_fields: list[str],
        change_description: str,
    ) -> None:
        """Create a material_history row."""
        self.client.table("material_history").insert(
            {
                "material_id": material_id,
                "action": action,
                "previous_data": previous_data,
                "new_data": new_data,
                "changed_fields": changed_fields,
                "change_description": change_description,
            }
        ).execute()

    def list_entries(self, material_id: int) -> list[MaterialHistoryEntry]:
        """Return history entries for a material, newest first."""
        response = (
            self.client.table("material_history")
            .select("*")
            .eq("material_id", material_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> MaterialHistoryEntry:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return MaterialHistoryEntry(
        id=int(row["id"]),
        material_id=int(row["material_id"]),
        action=str(row.get("action", "")),
        previous_data=row.get("previous_data"),
        new_data=row.get("new_data"),
        changed_fields=list(row.get("changed_fields") or []),
        change_description=row.get("change_description"),
        created_at=created_at,
    )
