"""
Migradores para transformar tablas PostgreSQL a documentos (MongoDB)
y nodos (Neo4j).

Cada migrador implementa la interfaz BaseMigrator y se carga dinámicamente
en runtime según el tipo de entidad de la etapa.

Estructura:
    base.py: Clase abstracta BaseMigrator
    brands.py, categories.py, warranties.py, coupons.py: Entidades simples
    users.py, addresses.py: Usuarios (con direcciones embebidas) y direcciones
    products.py: Productos con marca, garantía y categorías
    warehouses.py, stock.py: Depósitos y stock (warehouse_product)
    orders.py, order_products.py, payments.py: Pedidos, líneas y pagos
    reviews.py: Reseñas (+ embebido en productos)

Los migradores son instanciados por load_migrator() en orchestrator.py
usando importlib.import_module() para carga dinámica.

Interfaz requerida (ver BaseMigrator):
    - to_document(row, id_map, related)
    - to_node(row, id_map, related)
    - load_related(reader)            (opcional)
    - enrich(writer, rows, id_map, related, flavor)  (opcional)
    - get_primary_key_from_row(row)
"""
