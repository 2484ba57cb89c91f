"""
Migrador para la tabla puente warehouse_product (stock).

PK compuesta (warehouse_id, product_id). Ambas FKs son obligatorias.
Mismo formato en documento y nodo: {warehouse_id, product_id, stock_quantity}.
"""

from .base import BaseMigrator


class StockMigrator(BaseMigrator):

    def __init__(self, entity_type="stock"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        return {
            "warehouse_id": self._require(id_map, "warehouses", row, "warehouse_id"),
            "product_id": self._require(id_map, "products", row, "product_id"),
            "stock_quantity": row.get("stock_quantity"),
        }

    def to_node(self, row, id_map, related):
        return self.to_document(row, id_map, related)
