"""
Migrador para la tabla "order".

Es el migrador con más desnormalización. Consume users, addresses,
coupons y products (IdMap) y lee del origen las líneas (order_product),
el pago (payment) y los snapshots de cliente, dirección, cupón y producto.

POLÍTICA DE REFERENCIAS:
- user_id: obligatoria
- address_id: opcional (dirección de envío)
- coupon_id: opcional → sin cupón, coupon_id y coupon quedan None
- order_product.product_id: obligatoria por línea

MONTOS:
Todos los importes (subtotal, tax, shipping, discount, total y los de
cada línea) se copian TAL CUAL del origen. total_price de una línea NO se
recalcula: recalcular es una regla de negocio, no de migración.

Estructura del documento:
    {
        'user_id', 'customer': {first_name, last_name, email, phone_number},
        'address_id', 'shipping_address': {...}|None,
        'order_date', 'status', 'subtotal', 'tax_amount', 'shipping_cost',
        'discount_amount', 'total_amount',
        'products': [{product_id, product_name, product_sku,
                      quantity, unit_price, total_price}],
        'coupon_id', 'coupon': {code, discount_type, discount_value}|None,
        'payment': {payment_method, status, amount, payment_date}|None,
        created_at, updated_at, deleted_at
    }
"""

from .base import BaseMigrator


class OrdersMigrator(BaseMigrator):
    """Pedido → documento 'orders' / nodo :Order."""

    def __init__(self, entity_type="orders"):
        super().__init__(entity_type)

    def load_related(self, reader):
        """
        Índices de origen para los snapshots embebidos.

        Returns:
            dict: users, addresses, coupons, products por ID;
                  lines_by_order y payments_by_order agrupados por order_id
        """
        return {
            "users": self._index_by(reader.list_all("users"), "user_id"),
            "addresses": self._index_by(reader.list_all("addresses"), "address_id"),
            "coupons": self._index_by(reader.list_all("coupons"), "coupon_id"),
            "products": self._index_by(reader.list_all("products"), "product_id"),
            "lines_by_order": self._group_by(reader.list_all("order_products"), "order_id"),
            "payments_by_order": self._group_by(reader.list_all("payments"), "order_id"),
        }

    def to_document(self, row, id_map, related):
        order_key = str(row["order_id"])

        user_id = self._require(id_map, "users", row, "user_id")
        user = related.get("users", {}).get(str(row["user_id"]), {})

        address_id = self._optional(id_map, "addresses", row, "address_id")
        shipping_address = None
        if address_id is not None:
            shipping_address = self._embed_address(
                related.get("addresses", {}).get(str(row["address_id"]), {})
            )

        coupon_id = self._optional(id_map, "coupons", row, "coupon_id")
        coupon = None
        if coupon_id is not None:
            coupon = self._embed_coupon(
                related.get("coupons", {}).get(str(row["coupon_id"]), {})
            )

        lines = related.get("lines_by_order", {}).get(order_key, [])
        payments = related.get("payments_by_order", {}).get(order_key, [])

        document = self._order_fields(row)
        document.update(
            {
                "status": self._lower(row.get("status")),
                "user_id": user_id,
                "customer": {
                    "first_name": user.get("first_name"),
                    "last_name": user.get("last_name"),
                    "email": user.get("email"),
                    "phone_number": user.get("phone_number"),
                },
                "address_id": address_id,
                "shipping_address": shipping_address,
                "products": [self._embed_line(line, id_map, related) for line in lines],
                "coupon_id": coupon_id,
                "coupon": coupon,
                # Pago 1:1 → primer (único) pago del pedido
                "payment": self._embed_payment(payments[0]) if payments else None,
            }
        )
        return document

    def to_node(self, row, id_map, related):
        node = self._order_fields(row)
        node.update(
            {
                "user_id": self._require(id_map, "users", row, "user_id"),
                "address_id": self._optional(id_map, "addresses", row, "address_id"),
                "coupon_id": self._optional(id_map, "coupons", row, "coupon_id"),
            }
        )
        return node

    # =========================================================================
    # MÉTODOS PRIVADOS: CAMPOS Y SNAPSHOTS
    # =========================================================================

    def _order_fields(self, row):
        return {
            "order_date": row.get("order_date"),
            "status": row.get("status"),
            "subtotal": row.get("subtotal"),
            "tax_amount": row.get("tax_amount"),
            "shipping_cost": row.get("shipping_cost"),
            "discount_amount": row.get("discount_amount"),
            "total_amount": row.get("total_amount"),
            **self._timestamps(row),
        }

    def _embed_line(self, line, id_map, related):
        """Línea de pedido; unit_price y total_price copiados sin recalcular."""
        product = related.get("products", {}).get(str(line["product_id"]), {})
        return {
            "product_id": id_map.require(
                "products",
                line["product_id"],
                referenced_by=self.entity_type,
                row_id=str(line["order_id"]),
                field="products.product_id",
            ),
            "product_name": product.get("name"),
            "product_sku": product.get("sku"),
            "quantity": line.get("quantity"),
            "unit_price": line.get("unit_price"),
            "total_price": line.get("total_price"),
        }

    @staticmethod
    def _embed_address(address):
        return {
            "street": address.get("street"),
            "street_number": address.get("street_number"),
            "zip": address.get("zip"),
            "city": address.get("city"),
        }

    def _embed_coupon(self, coupon):
        return {
            "code": coupon.get("code"),
            "discount_type": self._lower(coupon.get("discount_type")),
            "discount_value": coupon.get("discount_value"),
        }

    def _embed_payment(self, payment):
        return {
            "payment_method": self._lower(payment.get("payment_method")),
            "status": self._lower(payment.get("status")),
            "amount": payment.get("amount"),
            "payment_date": payment.get("payment_date"),
        }
