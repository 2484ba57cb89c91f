"""Migrador para la tabla payment (1:1 con pedido, order_id obligatoria)."""

from .base import BaseMigrator


class PaymentsMigrator(BaseMigrator):

    def __init__(self, entity_type="payments"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        document = self.to_node(row, id_map, related)
        document["payment_method"] = self._lower(row.get("payment_method"))
        document["status"] = self._lower(row.get("status"))
        return document

    def to_node(self, row, id_map, related):
        return {
            "order_id": self._require(id_map, "orders", row, "order_id"),
            "payment_method": row.get("payment_method"),
            "status": row.get("status"),
            "amount": row.get("amount"),
            "payment_date": row.get("payment_date"),
            **self._timestamps(row),
        }
