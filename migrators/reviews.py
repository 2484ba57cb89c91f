"""
Migrador para la tabla review.

user_id y product_id son obligatorias (FKs NOT NULL).
order_id es una columna UUID sin FK: se traduce al ID destino del pedido
si fue migrado; si no, queda None (sin referencia).

Destino documento: después de escribir las reseñas, enrich() embebe en
cada documento de producto la lista de sus reseñas (snapshot con el
nombre del autor). Los productos sin reseñas conservan 'reviews': [].
"""

import config

from .base import BaseMigrator


class ReviewsMigrator(BaseMigrator):

    def __init__(self, entity_type="reviews"):
        super().__init__(entity_type)

    def load_related(self, reader):
        return {"users": self._index_by(reader.list_all("users"), "user_id")}

    def to_document(self, row, id_map, related):
        document = self.to_node(row, id_map, related)
        document["user_name"] = self._user_name(row, related)
        return document

    def to_node(self, row, id_map, related):
        return {
            "product_id": self._require(id_map, "products", row, "product_id"),
            "user_id": self._require(id_map, "users", row, "user_id"),
            "order_id": self._optional(id_map, "orders", row, "order_id"),
            "review_value": row.get("review_value"),
            "title": row.get("title"),
            "comment": row.get("comment"),
            "is_verified_purchase": row.get("is_verified_purchase"),
            **self._timestamps(row),
        }

    def enrich(self, writer, rows, id_map, related, flavor):
        """
        Embebe las reseñas en los documentos de productos.

        Returns:
            int|None: Cantidad de productos actualizados (None en grafo)
        """
        if flavor != config.DOCUMENT:
            return None

        reviews_by_product = {}
        for row in rows:
            product_id = self._require(id_map, "products", row, "product_id")
            reviews_by_product.setdefault(product_id, []).append(
                {
                    "review_id": id_map.get(self.entity_type, self.get_primary_key_from_row(row)),
                    "user_id": id_map.get("users", row.get("user_id")),
                    "user_name": self._user_name(row, related),
                    "review_value": row.get("review_value"),
                    "title": row.get("title"),
                    "comment": row.get("comment"),
                    "is_verified_purchase": row.get("is_verified_purchase"),
                    "created_at": row.get("created_at"),
                }
            )

        if reviews_by_product:
            writer.embed_many("products", "reviews", reviews_by_product)
        return len(reviews_by_product)

    @staticmethod
    def _user_name(row, related):
        user = related.get("users", {}).get(str(row.get("user_id")))
        if not user:
            return None
        return f"{user.get('first_name')} {user.get('last_name')}"
