"""
Migrador para la tabla puente order_product (solo destino grafo).

En el destino documento las líneas van embebidas en 'orders'; en el grafo
cada línea es un nodo :OrderLine con las referencias a pedido y producto.
"""

from .base import BaseMigrator


class OrderProductsMigrator(BaseMigrator):

    def __init__(self, entity_type="order_products"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        return self.to_node(row, id_map, related)

    def to_node(self, row, id_map, related):
        return {
            "order_id": self._require(id_map, "orders", row, "order_id"),
            "product_id": self._require(id_map, "products", row, "product_id"),
            "quantity": row.get("quantity"),
            "unit_price": row.get("unit_price"),
            "total_price": row.get("total_price"),
        }
