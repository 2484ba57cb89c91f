"""Migrador para la tabla warranty (rango de fechas + descripción)."""

from .base import BaseMigrator


class WarrantiesMigrator(BaseMigrator):

    def __init__(self, entity_type="warranties"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        return {
            "start_date": row.get("start_date"),
            "end_date": row.get("end_date"),
            "description": row.get("description"),
            **self._timestamps(row),
        }

    def to_node(self, row, id_map, related):
        return self.to_document(row, id_map, related)
