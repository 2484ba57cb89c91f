"""
verify.py - Compara conteos origen vs destino por etapa.

Tras una corrida limpia, para cada tipo de entidad:
    count(filas destino) == count(filas origen)

Uso:
    python verify.py [documento|grafo|todos]
"""

import sys

import config
from pgmigra import (
    TARGET_CHOICES,
    connect_to_mongo,
    connect_to_neo4j,
    connect_to_postgres,
)
from readers import PostgresReader
from writers import MongoTargetWriter, Neo4jTargetWriter


def compare_counts(reader, writer):
    """
    Compara conteos de todas las etapas del destino del writer.

    Returns:
        list: [(entity_type, source_count, target_count), ...] con diferencias
    """
    mismatches = []
    for entity_type in config.get_stages(writer.flavor):
        source = config.get_entity_config(entity_type)["source"]
        source_count = reader.count(source)
        target_count = writer.count(entity_type)

        icon = "✅" if source_count == target_count else "❌"
        print(f"   {icon} {entity_type:<16} origen={source_count:>8,} destino={target_count:>8,}")
        if source_count != target_count:
            mismatches.append((entity_type, source_count, target_count))
    return mismatches


def main():
    choice = sys.argv[1].lower() if len(sys.argv) > 1 else "todos"
    if choice not in TARGET_CHOICES:
        print(f"Uso: python verify.py [{'|'.join(TARGET_CHOICES)}]")
        sys.exit(1)

    pg_conn = connect_to_postgres()
    reader = PostgresReader(pg_conn)
    mismatches = []

    try:
        for flavor in TARGET_CHOICES[choice]:
            print(f"\n🔍 Verificando destino '{flavor}'...")
            if flavor == config.DOCUMENT:
                client, db = connect_to_mongo()
                try:
                    mismatches += compare_counts(reader, MongoTargetWriter(db))
                finally:
                    client.close()
            else:
                driver, session = connect_to_neo4j()
                try:
                    mismatches += compare_counts(reader, Neo4jTargetWriter(session))
                finally:
                    session.close()
                    driver.close()
    finally:
        pg_conn.close()

    print("\n" + "=" * 70)
    if mismatches:
        print(f"❌ {len(mismatches)} ETAPA(S) CON DIFERENCIAS")
        sys.exit(1)
    print("✅ CONTEOS CONSISTENTES")
    sys.exit(0)


if __name__ == "__main__":
    main()
