"""Values returned by the Cloudant client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class DatabaseInfo:
    """Summary of a database as reported by ``GET /{db}``."""

    name: str
    doc_count: int
    doc_del_count: int
    disk_size: int
    file_size: int
    external_size: int
    active_size: int
    compact_running: bool

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> DatabaseInfo:
        sizes = data.get("sizes") or {}
        return cls(
            name=data.get("db_name", name),
            doc_count=int(data.get("doc_count", 0)),
            doc_del_count=int(data.get("doc_del_count", 0)),
            disk_size=int(data.get("disk_size", sizes.get("file", 0))),
            file_size=int(sizes.get("file", 0)),
            external_size=int(sizes.get("external", 0)),
            active_size=int(sizes.get("active", 0)),
            compact_running=bool(data.get("compact_running", False)),
        )


@dataclass(frozen=True, slots=True)
class ViewName:
    """A view defined in a design document."""

    design: str
    view: str

    @property
    def qualified_name(self) -> str:
        return f"{self.design}:{self.view}"


@dataclass(frozen=True, slots=True)
class ViewRow:
    """One row of view output."""

    id: str | None
    key: Any
    value: Any

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ViewRow:
        return cls(id=data.get("id"), key=data.get("key"), value=data.get("value"))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "key": self.key, "value": self.value}
