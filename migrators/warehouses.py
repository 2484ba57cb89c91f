"""
Migrador para la tabla warehouse.

Documento: embebe la dirección del depósito y el stock de cada producto
(nombre, sku y precio del producto como snapshot). Los productos se
referencian con su ID destino.
Nodo: escalares + address_id; el stock se migra como nodos :Stock.
"""

from .base import BaseMigrator


class WarehousesMigrator(BaseMigrator):

    def __init__(self, entity_type="warehouses"):
        super().__init__(entity_type)

    def load_related(self, reader):
        return {
            "addresses": self._index_by(reader.list_all("addresses"), "address_id"),
            "products": self._index_by(reader.list_all("products"), "product_id"),
            "stock_by_warehouse": self._group_by(reader.list_all("stock"), "warehouse_id"),
        }

    def to_document(self, row, id_map, related):
        address_id = self._require(id_map, "addresses", row, "address_id")
        address = related.get("addresses", {}).get(str(row["address_id"]), {})
        stock = related.get("stock_by_warehouse", {}).get(str(row["warehouse_id"]), [])

        document = self._warehouse_fields(row)
        document.update(
            {
                "address_id": address_id,
                "address": {
                    "street": address.get("street"),
                    "street_number": address.get("street_number"),
                    "zip": address.get("zip"),
                    "city": address.get("city"),
                },
                "products": [self._embed_stock(item, id_map, related) for item in stock],
            }
        )
        return document

    def to_node(self, row, id_map, related):
        node = self._warehouse_fields(row)
        node["address_id"] = self._require(id_map, "addresses", row, "address_id")
        return node

    def _warehouse_fields(self, row):
        return {
            "name": row.get("name"),
            "phone": row.get("phone"),
            **self._timestamps(row),
        }

    def _embed_stock(self, item, id_map, related):
        product = related.get("products", {}).get(str(item["product_id"]), {})
        return {
            "product_id": id_map.require(
                "products",
                item["product_id"],
                referenced_by=self.entity_type,
                row_id=str(item["warehouse_id"]),
                field="products.product_id",
            ),
            "product_name": product.get("name"),
            "product_sku": product.get("sku"),
            "product_price": product.get("price"),
            "stock_quantity": item.get("stock_quantity"),
        }
