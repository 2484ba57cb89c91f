"""
Migrador para la tabla coupon.

Los contadores de uso (usage_limit, times_used) se copian tal cual:
validar reglas de cupones no es responsabilidad de la migración.
"""

from .base import BaseMigrator


class CouponsMigrator(BaseMigrator):
    """Cupón → documento 'coupons' / nodo :Coupon."""

    def __init__(self, entity_type="coupons"):
        super().__init__(entity_type)

    def to_document(self, row, id_map, related):
        document = self._coupon_fields(row)
        document["discount_type"] = self._lower(row.get("discount_type"))
        return document

    def to_node(self, row, id_map, related):
        return self._coupon_fields(row)

    def _coupon_fields(self, row):
        return {
            "code": row.get("code"),
            "discount_type": row.get("discount_type"),
            "discount_value": row.get("discount_value"),
            "minimum_order_value": row.get("minimum_order_value"),
            "expiry_date": row.get("expiry_date"),
            "usage_limit": row.get("usage_limit"),
            "times_used": row.get("times_used"),
            "is_active": row.get("is_active"),
            **self._timestamps(row),
        }
