r"""
Script principal de migración PostgreSQL → MongoDB (documento) / Neo4j (grafo).

Arquitectura:
- pgmigra.py: Infraestructura (conexiones, selección de destino, resumen)
- orchestrator.py: Secuencia de etapas, IdMap, estados y resultado
- migrators/*.py: Transformación por tipo de entidad (implementan BaseMigrator)
- writers.py / readers.py: Adaptadores de cada store
- config.py: Configuración centralizada

Flujo de ejecución:
1. Seleccionar destino (argumento o menú interactivo)
2. Abrir UNA conexión por store para toda la corrida
3. Por destino: limpiar → migrar etapas en orden → finalizar
4. Imprimir resumen (conteos por tipo, tiempo, estado)

La operación no se parametriza por subconjunto de entidades: siempre
reconstruye el destino completo (clear-then-rebuild).

Uso:
    python pgmigra.py              # menú interactivo
    python pgmigra.py documento    # solo MongoDB
    python pgmigra.py grafo        # solo Neo4j
    python pgmigra.py todos        # ambos destinos
"""

import json
import logging
import sys

import psycopg2
from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError
from psycopg2 import OperationalError
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure

import config
from orchestrator import MigrationOrchestrator
from readers import PostgresReader
from writers import MongoTargetWriter, Neo4jTargetWriter

# Opciones del menú → destinos
TARGET_CHOICES = {
    "documento": [config.DOCUMENT],
    "grafo": [config.GRAPH],
    "todos": [config.DOCUMENT, config.GRAPH],
}


def configure_logging():
    """Logging de consola con el nivel de config.LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def connect_to_postgres():
    """
    Establece conexión a PostgreSQL (origen) usando config.py.

    La conexión queda en modo solo lectura: la migración nunca escribe
    en el origen.

    Returns:
        connection: Conexión de psycopg2

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a PostgreSQL (origen)...")
        conn = psycopg2.connect(**config.POSTGRES_CONFIG)
        conn.set_session(readonly=True)
        print("✅ Conexión a PostgreSQL exitosa")
        return conn
    except OperationalError as e:
        print("❌ Error de conexión a PostgreSQL", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def connect_to_mongo():
    """
    Establece conexión a MongoDB (destino documento).

    Returns:
        tuple: (client, database) de pymongo

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a MongoDB...")
        client = MongoClient(config.MONGO_URI, serverSelectionTimeoutMS=5000)
        client.admin.command("ping")
        db = client[config.MONGO_DATABASE_NAME]
        print("✅ Conexión a MongoDB exitosa")
        return client, db
    except ConnectionFailure as e:
        print("❌ Error de conexión a MongoDB", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def connect_to_neo4j():
    """
    Establece conexión a Neo4j (destino grafo).

    Returns:
        tuple: (driver, session) del driver neo4j

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a Neo4j...")
        driver = GraphDatabase.driver(
            config.NEO4J_URI, auth=(config.NEO4J_USER, config.NEO4J_PASSWORD)
        )
        driver.verify_connectivity()
        session = driver.session(database=config.NEO4J_DATABASE)
        print("✅ Conexión a Neo4j exitosa")
        return driver, session
    except (Neo4jError, DriverError) as e:
        print("❌ Error de conexión a Neo4j", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def select_targets(argv):
    """
    Determina los destinos a migrar.

    Si se pasó un argumento ('documento', 'grafo', 'todos') se usa;
    si no, muestra un menú interactivo.

    Returns:
        list: Destinos (config.DOCUMENT / config.GRAPH)

    Raises:
        SystemExit: Si el argumento es inválido o el usuario cancela
    """
    if len(argv) > 1:
        choice = argv[1].strip().lower()
        if choice not in TARGET_CHOICES:
            print(f"❌ Destino inválido: '{argv[1]}'", file=sys.stderr)
            print(f"   Opciones: {', '.join(TARGET_CHOICES)}", file=sys.stderr)
            sys.exit(1)
        return TARGET_CHOICES[choice]

    options = list(TARGET_CHOICES.keys())

    print("\n" + "=" * 70)
    print("🎯 DESTINOS DISPONIBLES")
    print("=" * 70)
    for i, name in enumerate(options, 1):
        flavors = TARGET_CHOICES[name]
        stages = sum(len(config.get_stages(flavor)) for flavor in flavors)
        print(f"\n{i}. {name}")
        print(f"   └─ {' + '.join(flavors)} | {stages} etapas")
    print("\n" + "=" * 70)

    # Loop hasta obtener selección válida
    while True:
        try:
            choice = input("Seleccione el destino a migrar (0 para salir): ").strip()

            if choice == "0":
                print("\n👋 Migración cancelada por usuario")
                sys.exit(0)

            idx = int(choice) - 1
            if 0 <= idx < len(options):
                return TARGET_CHOICES[options[idx]]
            print("❌ Número fuera de rango. Intente nuevamente.")
        except ValueError:
            print("❌ Entrada inválida. Ingrese un número.")
        except (KeyboardInterrupt, EOFError):
            print("\n\n👋 Migración cancelada por usuario")
            sys.exit(0)


def print_result(result):
    """Imprime el resumen de una corrida."""
    icon = "✅" if result.succeeded else "❌"
    print("\n" + "=" * 70)
    print(f"{icon} RESULTADO [{result.flavor}]: {result.status}")
    print("=" * 70)

    for entity_type, count in result.counts.items():
        print(f"   • {entity_type:<16} {count:>10,}")
    for link, count in result.links.items():
        print(f"   🔗 {link:<40} {count:>8,}")

    print(f"\n   ⏱️  Duración: {result.duration_ms:,} ms")
    if not result.succeeded:
        print(f"   🧨 Etapa: {result.failed_stage}")
        print(f"   🧨 {result.error_type}: {result.error}")
        print("   💡 Solución: volver a ejecutar la migración completa")


def run_migration(flavors):
    """
    Ejecuta la migración para los destinos indicados.

    Abre una conexión por store, corre un orquestador por destino y
    cierra todo al final (éxito o fallo).

    Returns:
        list[MigrationResult]: Un resultado por destino
    """
    pg_conn = connect_to_postgres()
    reader = PostgresReader(pg_conn)
    mongo_client = neo4j_driver = neo4j_session = None
    results = []

    try:
        for flavor in flavors:
            if flavor == config.DOCUMENT:
                mongo_client, mongo_db = connect_to_mongo()
                writer = MongoTargetWriter(mongo_db)
            else:
                neo4j_driver, neo4j_session = connect_to_neo4j()
                writer = Neo4jTargetWriter(neo4j_session)

            print(f"\n🚚 Migrando → {flavor}...")
            result = MigrationOrchestrator(reader, writer).run()
            print_result(result)
            results.append(result)

            # Un destino fallido no cancela el otro: cada destino es una corrida
    finally:
        print("\n🔒 Cerrando conexiones...")
        pg_conn.close()
        if mongo_client is not None:
            mongo_client.close()
        if neo4j_session is not None:
            neo4j_session.close()
        if neo4j_driver is not None:
            neo4j_driver.close()
        print("✅ Conexiones cerradas correctamente")

    return results


def main():
    """
    Función principal (trigger administrativo "correr ahora").

    Exit Codes:
        0: Todos los destinos migrados con éxito
        1: Error de conexión o algún destino FAILED
    """
    configure_logging()

    print("=" * 70)
    print("🚀 SISTEMA DE MIGRACIÓN POSTGRESQL → MONGODB / NEO4J")
    print("=" * 70)
    print(f"📍 PostgreSQL: {config.POSTGRES_CONFIG['dbname']}")
    print(f"📍 MongoDB: {config.MONGO_DATABASE_NAME}")
    print(f"📍 Neo4j: {config.NEO4J_URI} ({config.NEO4J_DATABASE})")

    flavors = select_targets(sys.argv)
    results = run_migration(flavors)

    print("\n📄 Resultado estructurado:")
    print(json.dumps([result.to_dict() for result in results], indent=2, ensure_ascii=False))

    if all(result.succeeded for result in results):
        print("\n" + "=" * 70)
        print("✅ PROCESO COMPLETADO EXITOSAMENTE")
        print("=" * 70)
        sys.exit(0)

    print("\n" + "=" * 70)
    print("❌ PROCESO FINALIZADO CON ERRORES")
    print("=" * 70)
    sys.exit(1)


if __name__ == "__main__":
    main()
