"""
Configuración centralizada para el sistema de migración PostgreSQL → MongoDB / Neo4j.

ARQUITECTURA:
Una base relacional normalizada (PostgreSQL) se reconstruye en dos
representaciones alternativas:
- documento: MongoDB, con sub-objetos embebidos (snapshots desnormalizados)
- grafo: Neo4j, nodos planos con campos escalares + IDs destino como referencias

FLUJO DE MIGRACIÓN:
1. Limpiar el destino completo (orden inverso a MIGRATION_ORDER)
2. Ejecutar migradores en orden de MIGRATION_ORDER
3. Cada etapa traduce sus FKs a IDs destino vía IdMap (poblado por etapas previas)

USO DE LAS FUNCIONES HELPER:
    # Obtener configuración de un tipo de entidad
    cfg = get_entity_config('products')
    collection = cfg['collection']  # 'products'

    # Dependencias que deben estar migradas antes
    deps = validate_migration_order('orders')
    # ['users', 'addresses', 'coupons', 'products']

    # Etapas aplicables a un destino
    stages = get_stages('graph')
"""

import os
from dotenv import load_dotenv

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)

# --- Configuración de PostgreSQL (Origen) ---
POSTGRES_CONFIG = {
    "dbname": os.getenv("POSTGRES_DB") or "",
    "user": os.getenv("POSTGRES_USER") or "",
    "password": os.getenv("POSTGRES_PASSWORD") or "",
    "host": os.getenv("POSTGRES_HOST") or "localhost",
    "port": os.getenv("POSTGRES_PORT") or "5432",
}

# --- Configuración de MongoDB (Destino documento) ---
MONGO_URI = os.getenv("MONGO_URI") or (
    f"mongodb://{os.getenv('MONGO_HOST') or 'localhost'}:{os.getenv('MONGO_PORT') or '27017'}/"
)
MONGO_DATABASE_NAME = os.getenv("MONGO_DB") or "nordic_electronics"

# --- Configuración de Neo4j (Destino grafo) ---
NEO4J_URI = os.getenv("NEO4J_URI") or "bolt://localhost:7687"
NEO4J_USER = os.getenv("NEO4J_USER") or "neo4j"
NEO4J_PASSWORD = os.getenv("NEO4J_PASSWORD") or ""
NEO4J_DATABASE = os.getenv("NEO4J_DATABASE") or "neo4j"

# --- Configuración de Migración ---
BATCH_SIZE = int(os.getenv("BATCH_SIZE") or 2000)  # Registros por insert_many / UNWIND
LOG_LEVEL = os.getenv("LOG_LEVEL") or "INFO"

# Destinos soportados
DOCUMENT = "document"
GRAPH = "graph"
FLAVORS = [DOCUMENT, GRAPH]

# --- Tablas de origen ---
# Incluye tablas de entidades y tablas puente (N:M) que los migradores
# necesitan leer para embeber o resolver referencias.
SOURCE_TABLES = {
    "brands": {"table": "brand", "primary_key": "brand_id"},
    "categories": {"table": "category", "primary_key": "category_id"},
    "warranties": {"table": "warranty", "primary_key": "warranty_id"},
    "coupons": {"table": "coupon", "primary_key": "coupon_id"},
    "users": {"table": '"user"', "primary_key": "user_id"},
    "addresses": {"table": "address", "primary_key": "address_id"},
    "products": {"table": "product", "primary_key": "product_id"},
    "product_categories": {"table": "product_category", "primary_key": None},
    "warehouses": {"table": "warehouse", "primary_key": "warehouse_id"},
    "stock": {"table": "warehouse_product", "primary_key": None},
    "orders": {"table": '"order"', "primary_key": "order_id"},
    "order_products": {"table": "order_product", "primary_key": None},
    "payments": {"table": "payment", "primary_key": "payment_id"},
    "reviews": {"table": "review", "primary_key": "review_id"},
}

# --- Configuración por tipo de entidad ---
# Cada tipo de entidad define:
# - source: Clave en SOURCE_TABLES de donde se leen las filas
# - primary_key: Columna(s) que forman el ID de origen
# - collection: Colección MongoDB destino
# - label: Label Neo4j destino
# - depends_on: Tipos cuyo IdMap consulta el migrador (deben migrarse antes)
# - flavors: Destinos en los que existe la etapa
# - description: Descripción de negocio

ENTITY_TYPES = {
    # === ENTIDADES SIMPLES (sin dependencias) ===
    "brands": {
        "source": "brands",
        "primary_key": ["brand_id"],
        "collection": "brands",
        "label": "Brand",
        "depends_on": [],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Marcas referenciadas por productos",
    },
    "categories": {
        "source": "categories",
        "primary_key": ["category_id"],
        "collection": "categories",
        "label": "Category",
        "depends_on": [],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Categorías (N:M con productos)",
    },
    "warranties": {
        "source": "warranties",
        "primary_key": ["warranty_id"],
        "collection": "warranties",
        "label": "Warranty",
        "depends_on": [],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Garantías con rango de fechas",
    },
    "coupons": {
        "source": "coupons",
        "primary_key": ["coupon_id"],
        "collection": "coupons",
        "label": "Coupon",
        "depends_on": [],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Cupones de descuento con ventana de validez",
    },
    # === USUARIOS Y DIRECCIONES ===
    "users": {
        "source": "users",
        "primary_key": ["user_id"],
        "collection": "users",
        "label": "User",
        "depends_on": [],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Usuarios (documento embebe sus direcciones)",
    },
    "addresses": {
        "source": "addresses",
        "primary_key": ["address_id"],
        "collection": "addresses",
        "label": "Address",
        "depends_on": ["users"],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Direcciones (N:1 usuario)",
    },
    # === CATÁLOGO ===
    "products": {
        "source": "products",
        "primary_key": ["product_id"],
        "collection": "products",
        "label": "Product",
        "depends_on": ["brands", "categories", "warranties"],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Productos con marca, garantía y categorías embebidas",
    },
    "warehouses": {
        "source": "warehouses",
        "primary_key": ["warehouse_id"],
        "collection": "warehouses",
        "label": "Warehouse",
        "depends_on": ["addresses", "products"],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Depósitos con dirección y stock embebidos",
    },
    "stock": {
        "source": "stock",
        "primary_key": ["warehouse_id", "product_id"],
        "collection": "warehouse_products",
        "label": "Stock",
        "depends_on": ["warehouses", "products"],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Cantidad en stock por depósito y producto",
    },
    # === PEDIDOS ===
    "orders": {
        "source": "orders",
        "primary_key": ["order_id"],
        "collection": "orders",
        "label": "Order",
        "depends_on": ["users", "addresses", "coupons", "products"],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Pedidos con líneas, cliente, cupón y pago embebidos",
    },
    "order_products": {
        "source": "order_products",
        "primary_key": ["order_id", "product_id"],
        "collection": "order_products",
        "label": "OrderLine",
        "depends_on": ["orders", "products"],
        "flavors": [GRAPH],
        "description": "Líneas de pedido (en documento van embebidas en orders)",
    },
    "payments": {
        "source": "payments",
        "primary_key": ["payment_id"],
        "collection": "payments",
        "label": "Payment",
        "depends_on": ["orders"],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Pagos (1:1 pedido)",
    },
    "reviews": {
        "source": "reviews",
        "primary_key": ["review_id"],
        "collection": "reviews",
        "label": "Review",
        "depends_on": ["users", "products", "orders"],
        "flavors": [DOCUMENT, GRAPH],
        "description": "Reseñas (rating 1-5) de productos; order_id opcional (sin FK)",
    },
}

# --- Orden de Migración ---
# Derivado de las dependencias declaradas en ENTITY_TYPES.
# Brand/Category/Warranty/Coupon → User/Address → Product → Warehouse/Stock
# → Order/Payment → Review
MIGRATION_ORDER = [
    "brands",
    "categories",
    "warranties",
    "coupons",
    "users",
    "addresses",  # Depende de users
    "products",  # Depende de brands, categories, warranties
    "warehouses",  # Depende de addresses, products
    "stock",  # Depende de warehouses, products
    "orders",  # Depende de users, addresses, coupons, products
    "order_products",  # Depende de orders, products
    "payments",  # Depende de orders
    "reviews",  # Depende de users, products (orders opcional)
]

# --- Relaciones del grafo ---
# Se crean DESPUÉS de todos los nodos, a partir de los campos de referencia.
# (label origen, campo con ID destino, tipo de relación, label destino)
GRAPH_RELATIONSHIPS = [
    ("Address", "user_id", "BELONGS_TO", "User"),
    ("Product", "brand_id", "MADE_BY", "Brand"),
    ("Product", "warranty_id", "HAS_WARRANTY", "Warranty"),
    ("Product", "category_ids", "IN_CATEGORY", "Category"),
    ("Warehouse", "address_id", "LOCATED_AT", "Address"),
    ("Stock", "warehouse_id", "STORED_IN", "Warehouse"),
    ("Stock", "product_id", "STOCK_OF", "Product"),
    ("Order", "user_id", "PLACED_BY", "User"),
    ("Order", "address_id", "SHIPS_TO", "Address"),
    ("Order", "coupon_id", "USES_COUPON", "Coupon"),
    ("OrderLine", "order_id", "LINE_OF", "Order"),
    ("OrderLine", "product_id", "FOR_PRODUCT", "Product"),
    ("Payment", "order_id", "PAYS", "Order"),
    ("Review", "user_id", "WRITTEN_BY", "User"),
    ("Review", "product_id", "REVIEWS", "Product"),
    ("Review", "order_id", "FROM_ORDER", "Order"),
]


# --- Funciones Helper ---


def get_entity_config(entity_type: str) -> dict:
    """
    Obtiene la configuración de un tipo de entidad por nombre.

    Args:
        entity_type: Nombre del tipo de entidad (ej: 'products')

    Returns:
        dict: Configuración con keys source, primary_key, collection,
              label, depends_on, flavors, description

    Raises:
        KeyError: Si el tipo de entidad no está configurado

    Ejemplo:
        >>> get_entity_config('products')['label']
        'Product'
    """
    if entity_type not in ENTITY_TYPES:
        available = ", ".join(ENTITY_TYPES.keys())
        raise KeyError(
            f"Tipo de entidad '{entity_type}' no está configurado.\n"
            f"Tipos disponibles: {available}"
        )
    return ENTITY_TYPES[entity_type]


def get_source_table(source: str) -> dict:
    """Obtiene tabla y PK de origen para una clave de SOURCE_TABLES."""
    if source not in SOURCE_TABLES:
        available = ", ".join(SOURCE_TABLES.keys())
        raise KeyError(
            f"Tabla de origen '{source}' no está configurada.\n"
            f"Tablas disponibles: {available}"
        )
    return SOURCE_TABLES[source]


def validate_migration_order(entity_type: str) -> list:
    """
    Retorna los tipos de entidad que deben migrarse antes.

    Ejemplo:
        >>> validate_migration_order('payments')
        ['orders']
        >>> validate_migration_order('brands')
        []
    """
    cfg = get_entity_config(entity_type)
    return cfg.get("depends_on", [])


def get_stages(flavor: str) -> list:
    """
    Retorna las etapas (tipos de entidad) aplicables a un destino, en orden.

    Args:
        flavor: 'document' o 'graph'

    Raises:
        ValueError: Si el destino no existe
    """
    if flavor not in FLAVORS:
        raise ValueError(
            f"Destino '{flavor}' desconocido. Destinos válidos: {', '.join(FLAVORS)}"
        )
    return [
        name
        for name in MIGRATION_ORDER
        if flavor in get_entity_config(name)["flavors"]
    ]


def get_target_name(entity_type: str, flavor: str) -> str:
    """
    Obtiene el nombre destino de un tipo de entidad.

    Ejemplo:
        >>> get_target_name('stock', 'document')
        'warehouse_products'
        >>> get_target_name('stock', 'graph')
        'Stock'
    """
    cfg = get_entity_config(entity_type)
    if flavor == DOCUMENT:
        return cfg["collection"]
    if flavor == GRAPH:
        return cfg["label"]
    raise ValueError(f"Destino '{flavor}' desconocido")
