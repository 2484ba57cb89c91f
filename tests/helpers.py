"""
Funciones y dobles de prueba compartidos por todos los tests.

- FakeReader: Source Reader en memoria (tablas como listas de dicts)
- FakeWriter: Target Writer en memoria con IDs generados por el "store"
- build_sample_tables(): dataset pequeño y consistente de la tienda
"""

import itertools
import os
import sys
from datetime import date, datetime
from decimal import Decimal

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from errors import ClearError, RepositoryError
from orchestrator import load_migrator
from writers import BaseTargetWriter


class FakeReader:
    """Reader en memoria con la misma interfaz que PostgresReader."""

    def __init__(self, tables, fail_on=None):
        self.tables = tables
        self.fail_on = fail_on
        self.calls = []

    def list_all(self, source):
        config.get_source_table(source)
        self.calls.append(source)
        if source == self.fail_on:
            raise RepositoryError(f"Error leyendo '{source}': conexión perdida")
        return [dict(row) for row in self.tables.get(source, [])]

    def find_by_id(self, source, source_id):
        primary_key = config.get_source_table(source)["primary_key"]
        for row in self.tables.get(source, []):
            if str(row[primary_key]) == str(source_id):
                return dict(row)
        return None

    def count(self, source):
        return len(self.tables.get(source, []))


class FakeWriter(BaseTargetWriter):
    """
    Writer en memoria.

    Los IDs generados nunca se repiten entre corridas (como ObjectId),
    así una segunda corrida produce IDs nuevos sobre un destino vacío.
    """

    def __init__(self, flavor=config.DOCUMENT, fail_on_clear=False, fail_on_write=None):
        super().__init__(batch_size=1000)
        self.flavor = flavor
        self.fail_on_clear = fail_on_clear
        self.fail_on_write = fail_on_write
        self.store = {}
        self.cleared = []
        self.written = []
        self.last_id_map = None
        self._sequence = itertools.count(1)

    def clear_all(self, entity_types):
        if self.fail_on_clear:
            raise ClearError("No se pudo limpiar el destino: sin permisos")
        for entity_type in reversed(list(entity_types)):
            self.cleared.append(entity_type)
            self.store[entity_type] = {}

    def write_batch(self, entity_type, representations, source_ids, id_map):
        if entity_type == self.fail_on_write:
            raise RepositoryError(f"Error insertando en '{entity_type}': duplicate key")
        self.last_id_map = id_map
        target_ids = [f"{entity_type}-{next(self._sequence)}" for _ in representations]
        bucket = self.store.setdefault(entity_type, {})
        for target_id, representation in zip(target_ids, representations):
            bucket[target_id] = representation
        self.written.append(entity_type)
        self._register_ids(entity_type, source_ids, target_ids, id_map)
        return target_ids

    def embed_many(self, entity_type, field, values_by_target_id):
        for target_id, values in values_by_target_id.items():
            self.store[entity_type][target_id][field] = values
        return len(values_by_target_id)

    def count(self, entity_type):
        return len(self.store.get(entity_type, {}))

    def finalize(self):
        if self.flavor == config.GRAPH:
            return {"finalized": 1}
        return {}


def stamp(day):
    """Auditoría de una fila de origen (deleted_at None)."""
    moment = datetime(2024, 1, day, 10, 30)
    return {"created_at": moment, "updated_at": moment, "deleted_at": None}


def build_sample_tables():
    """
    Dataset mínimo y consistente:
    3 marcas, 2 categorías, 1 garantía, 1 cupón, 2 usuarios con 1 dirección
    cada uno, 2 productos, 1 depósito con 2 líneas de stock, 1 pedido con
    2 líneas (2 x 50.00 y 1 x 30.00) + cupón + pago, 1 reseña.
    """
    return {
        "brands": [
            {"brand_id": "brand-1", "name": "Nordic", "description": "Audio", **stamp(1)},
            {"brand_id": "brand-2", "name": "Fjord", "description": "Cables", **stamp(1)},
            {"brand_id": "brand-3", "name": "Aurora", "description": "Lamps", **stamp(2)},
        ],
        "categories": [
            {"category_id": "cat-1", "name": "Headphones", "description": "On-ear", **stamp(1)},
            {"category_id": "cat-2", "name": "Wireless", "description": "Bluetooth", **stamp(1)},
        ],
        "warranties": [
            {
                "warranty_id": "war-1",
                "start_date": date(2024, 1, 1),
                "end_date": date(2026, 1, 1),
                "description": "2 years",
                **stamp(1),
            },
        ],
        "coupons": [
            {
                "coupon_id": "coupon-1",
                "code": "WELCOME10",
                "discount_type": "PERCENTAGE",
                "discount_value": Decimal("10.00"),
                "minimum_order_value": Decimal("50.00"),
                "expiry_date": date(2025, 12, 31),
                "usage_limit": 100,
                "times_used": 3,
                "is_active": True,
                **stamp(1),
            },
        ],
        "users": [
            {
                "user_id": "user-1",
                "first_name": "Astrid",
                "last_name": "Lund",
                "email": "astrid@example.com",
                "phone_number": "+4512345678",
                "date_of_birth": date(1990, 5, 17),
                "password": "$2a$10$hash",
                "is_admin": False,
                **stamp(3),
            },
            {
                "user_id": "user-2",
                "first_name": "Erik",
                "last_name": "Holm",
                "email": "erik@example.com",
                "phone_number": "+4587654321",
                "date_of_birth": date(1985, 2, 3),
                "password": "$2a$10$hash2",
                "is_admin": True,
                "created_at": datetime(2024, 1, 3),
                "updated_at": datetime(2024, 2, 1),
                "deleted_at": datetime(2024, 3, 1),
            },
        ],
        "addresses": [
            {
                "address_id": "addr-1",
                "user_id": "user-1",
                "street": "Strøget",
                "street_number": "12",
                "zip": "1160",
                "city": "København",
                **stamp(3),
            },
            {
                "address_id": "addr-2",
                "user_id": "user-2",
                "street": "Vesterbrogade",
                "street_number": "4",
                "zip": "1620",
                "city": "København",
                **stamp(3),
            },
        ],
        "products": [
            {
                "product_id": "prod-1",
                "sku": "NE-HP-001",
                "name": "Nordic Headphones",
                "description": "Wireless over-ear",
                "price": Decimal("50.00"),
                "weight": Decimal("0.35"),
                "brand_id": "brand-1",
                "warranty_id": "war-1",
                **stamp(4),
            },
            {
                "product_id": "prod-2",
                "sku": "NE-CB-002",
                "name": "Fjord USB-C Cable",
                "description": "2m braided",
                "price": Decimal("30.00"),
                "weight": Decimal("0.05"),
                "brand_id": "brand-2",
                "warranty_id": None,
                **stamp(4),
            },
        ],
        "product_categories": [
            {"product_id": "prod-1", "category_id": "cat-1"},
            {"product_id": "prod-1", "category_id": "cat-2"},
        ],
        "warehouses": [
            {
                "warehouse_id": "wh-1",
                "name": "Copenhagen Hub",
                "phone": "+4511111111",
                "address_id": "addr-1",
                **stamp(5),
            },
        ],
        "stock": [
            {"warehouse_id": "wh-1", "product_id": "prod-1", "stock_quantity": 25},
            {"warehouse_id": "wh-1", "product_id": "prod-2", "stock_quantity": 140},
        ],
        "orders": [
            {
                "order_id": "order-1",
                "user_id": "user-1",
                "address_id": "addr-1",
                "coupon_id": "coupon-1",
                "order_date": datetime(2024, 6, 1, 12, 0),
                "status": "CONFIRMED",
                "subtotal": Decimal("130.00"),
                "tax_amount": Decimal("32.50"),
                "shipping_cost": Decimal("5.00"),
                "discount_amount": Decimal("13.00"),
                "total_amount": Decimal("154.50"),
                **stamp(6),
            },
        ],
        "order_products": [
            {
                "order_id": "order-1",
                "product_id": "prod-1",
                "quantity": 2,
                "unit_price": Decimal("50.00"),
                "total_price": Decimal("100.00"),
            },
            {
                "order_id": "order-1",
                "product_id": "prod-2",
                "quantity": 1,
                "unit_price": Decimal("30.00"),
                "total_price": Decimal("30.00"),
            },
        ],
        "payments": [
            {
                "payment_id": "pay-1",
                "order_id": "order-1",
                "payment_method": "CREDIT_CARD",
                "status": "COMPLETED",
                "amount": Decimal("154.50"),
                "payment_date": datetime(2024, 6, 1, 12, 5),
                **stamp(6),
            },
        ],
        "reviews": [
            {
                "review_id": "rev-1",
                "user_id": "user-1",
                "product_id": "prod-1",
                "order_id": "order-1",
                "review_value": 5,
                "title": "Great sound",
                "comment": "Battery lasts all week",
                "is_verified_purchase": True,
                **stamp(10),
            },
        ],
    }


def get_all_migrators():
    """Retorna [(entity_type, migrador)] para todas las etapas configuradas."""
    return [(entity_type, load_migrator(entity_type)) for entity_type in config.MIGRATION_ORDER]
