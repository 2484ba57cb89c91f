"""
Migrador para la tabla brand.

Entidad simple: no depende de ninguna otra. Products la referencia
por brand_id (obligatoria) y embebe su nombre.
"""

from .base import BaseMigrator


class BrandsMigrator(BaseMigrator):
    """Marca → documento 'brands' / nodo :Brand."""

    def __init__(self, entity_type="brands"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        return {
            "name": row.get("name"),
            "description": row.get("description"),
            **self._timestamps(row),
        }

    def to_node(self, row, id_map, related):
        # Mismos campos: una marca no tiene referencias ni hijos
        return self.to_document(row, id_map, related)
