# reset_targets.py
"""
Script para vaciar completamente los destinos (MongoDB y Neo4j).

No es necesario antes de migrar (pgmigra.py ya limpia cada destino),
pero sirve para dejar los stores vacíos tras una corrida fallida.

ADVERTENCIA: Esto destruye TODOS los datos migrados.
"""

import sys

import config
from pgmigra import connect_to_mongo, connect_to_neo4j
from writers import MongoTargetWriter, Neo4jTargetWriter


def reset_targets():
    """Vacía todas las colecciones y labels de migración."""

    print("=" * 70)
    print("🗑️  LIMPIEZA COMPLETA DE DESTINOS")
    print("=" * 70)

    mongo_client, mongo_db = connect_to_mongo()
    try:
        stages = config.get_stages(config.DOCUMENT)
        print(f"\n🗑️  Limpiando {len(stages)} colecciones MongoDB...")
        MongoTargetWriter(mongo_db).clear_all(stages)
        print("   ✅ MongoDB vacío")
    finally:
        mongo_client.close()

    neo4j_driver, neo4j_session = connect_to_neo4j()
    try:
        stages = config.get_stages(config.GRAPH)
        print(f"\n🗑️  Limpiando {len(stages)} labels Neo4j...")
        Neo4jTargetWriter(neo4j_session).clear_all(stages)
        print("   ✅ Neo4j vacío")
    finally:
        neo4j_session.close()
        neo4j_driver.close()

    print("\n" + "=" * 70)
    print("✅ LIMPIEZA COMPLETA FINALIZADA")
    print("=" * 70)
    print("\nAhora ejecutar:")
    print("  python pgmigra.py todos (migrar datos)")


if __name__ == "__main__":
    # Seguridad: pedir confirmación
    print("\n⚠️  ADVERTENCIA: Esto eliminará TODOS los datos migrados.")
    response = input("¿Continuar? (escribir 'SI' en mayúsculas): ")

    if response == "SI":
        reset_targets()
    else:
        print("\n❌ Operación cancelada")
        sys.exit(0)
