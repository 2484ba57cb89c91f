"""
Migrador para la tabla category.

Entidad simple. La relación N:M con productos vive en product_category
y la resuelve ProductsMigrator.
"""

from .base import BaseMigrator


class CategoriesMigrator(BaseMigrator):
    """Categoría → documento 'categories' / nodo :Category."""

    def __init__(self, entity_type="categories"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        return {
            "name": row.get("name"),
            "description": row.get("description"),
            **self._timestamps(row),
        }

    def to_node(self, row, id_map, related):
        return self.to_document(row, id_map, related)
