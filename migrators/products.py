"""
Migrador para la tabla product.

RESPONSABILIDAD:
Consume las etapas brands, categories y warranties (IdMap) y además
lee esas tablas del origen para embeber snapshots.

POLÍTICA DE REFERENCIAS:
- brand_id: obligatoria (product.brand_id NOT NULL)
- warranty_id: opcional → sin garantía, warranty_id y warranty quedan None
- categorías (product_category): cada vínculo existente es obligatorio;
  una categoría sin migrar NO se descarta en silencio

Estructura del documento:
    {
        'sku', 'name', 'description', 'price', 'weight',
        'brand_id': <id destino>, 'brand_name': str,
        'warranty_id': <id destino>|None,
        'warranty': {'start_date', 'end_date', 'description'}|None,
        'category_ids': [<id destino>, ...],
        'categories': [{'id': <id destino>, 'name': str}, ...],
        'reviews': [],   # se completa tras la etapa reviews
        created_at, updated_at, deleted_at
    }
"""

from .base import BaseMigrator


class ProductsMigrator(BaseMigrator):
    """Producto → documento 'products' / nodo :Product."""

    def __init__(self, entity_type="products"):
        super().__init__(entity_type)

    def load_related(self, reader):
        """
        Índices de origen para embeber marca, garantía y categorías.

        Returns:
            dict: {
                'brands': {brand_id: fila},
                'warranties': {warranty_id: fila},
                'categories': {category_id: fila},
                'category_links': {product_id: [fila product_category]}
            }
        """
        return {
            "brands": self._index_by(reader.list_all("brands"), "brand_id"),
            "warranties": self._index_by(reader.list_all("warranties"), "warranty_id"),
            "categories": self._index_by(reader.list_all("categories"), "category_id"),
            "category_links": self._group_by(
                reader.list_all("product_categories"), "product_id"
            ),
        }

    def to_document(self, row, id_map, related):
        brand_id = self._require(id_map, "brands", row, "brand_id")
        brand = related.get("brands", {}).get(str(row.get("brand_id")), {})

        warranty_id = self._optional(id_map, "warranties", row, "warranty_id")
        warranty = None
        if warranty_id is not None:
            warranty = self._embed_warranty(
                related.get("warranties", {}).get(str(row["warranty_id"]), {})
            )

        categories = self._resolve_categories(row, id_map, related)

        document = self._product_fields(row)
        document.update(
            {
                "brand_id": brand_id,
                "brand_name": brand.get("name"),
                "warranty_id": warranty_id,
                "warranty": warranty,
                "category_ids": [category["id"] for category in categories],
                "categories": categories,
                "reviews": [],
            }
        )
        return document

    def to_node(self, row, id_map, related):
        categories = self._resolve_categories(row, id_map, related)

        node = self._product_fields(row)
        node.update(
            {
                "brand_id": self._require(id_map, "brands", row, "brand_id"),
                "warranty_id": self._optional(id_map, "warranties", row, "warranty_id"),
                "category_ids": [category["id"] for category in categories],
            }
        )
        return node

    def _product_fields(self, row):
        return {
            "sku": row.get("sku"),
            "name": row.get("name"),
            "description": row.get("description"),
            "price": row.get("price"),
            "weight": row.get("weight"),
            **self._timestamps(row),
        }

    def _resolve_categories(self, row, id_map, related):
        """
        Traduce los vínculos product_category del producto.

        Returns:
            list: [{'id': <id destino>, 'name': str}, ...] en orden de origen
        """
        links = related.get("category_links", {}).get(str(row["product_id"]), [])
        categories = []
        for link in links:
            category_id = self._require(id_map, "categories", link, "category_id")
            category = related.get("categories", {}).get(str(link["category_id"]), {})
            categories.append({"id": category_id, "name": category.get("name")})
        return categories

    @staticmethod
    def _embed_warranty(warranty):
        return {
            "start_date": warranty.get("start_date"),
            "end_date": warranty.get("end_date"),
            "description": warranty.get("description"),
        }
