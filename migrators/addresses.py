"""
Migrador para la tabla address.

user_id es FK obligatoria: una dirección sin usuario migrado aborta la etapa.
"""

from .base import BaseMigrator


class AddressesMigrator(BaseMigrator):

    def __init__(self, entity_type="addresses"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        return {
            "user_id": self._require(id_map, "users", row, "user_id"),
            "street": row.get("street"),
            "street_number": row.get("street_number"),
            "zip": row.get("zip"),
            "city": row.get("city"),
            **self._timestamps(row),
        }

    def to_node(self, row, id_map, related):
        return self.to_document(row, id_map, related)
