"""
export_sample.py - Exporta una muestra de lo migrado a JSON (Extended JSON)

Sirve para revisar a mano el resultado de una corrida:
- documento: documentos MongoDB con sus snapshots embebidos
- grafo: nodos Neo4j con sus propiedades y referencias (elementId)

Uso:
    python export_sample.py <entity_type> [limit] [documento|grafo]

Ejemplo:
    python export_sample.py orders 50
    python export_sample.py products 20 grafo
"""

import sys
from pathlib import Path

from bson.json_util import dumps

import config
from pgmigra import connect_to_mongo, connect_to_neo4j

SAMPLES_DIR = Path("samples")


def fetch_documents(database, entity_type, limit):
    """Primeros `limit` documentos de la colección del tipo de entidad."""
    name = config.get_target_name(entity_type, config.DOCUMENT)
    return list(database[name].find().limit(limit))


def fetch_nodes(session, entity_type, limit):
    """
    Primeros `limit` nodos del label del tipo de entidad.

    Cada nodo se devuelve como dict con '_id' = elementId; los temporales
    del driver se pasan a datetime/date para que json_util los serialice.
    """
    label = config.get_target_name(entity_type, config.GRAPH)
    result = session.run(
        f"MATCH (n:`{label}`) RETURN elementId(n) AS id, properties(n) AS props LIMIT $limit",
        limit=limit,
    )
    nodes = []
    for record in result:
        node = {"_id": record["id"]}
        for key, value in record["props"].items():
            node[key] = value.to_native() if hasattr(value, "to_native") else value
        nodes.append(node)
    return nodes


def write_sample(records, name, samples_dir=SAMPLES_DIR):
    """
    Guarda los registros en <samples_dir>/<name>_sample.json.

    Returns:
        Path|None: Archivo escrito, o None si no había registros
    """
    if not records:
        print(f"⚠️  '{name}' está vacío o no existe")
        return None

    samples_dir = Path(samples_dir)
    samples_dir.mkdir(exist_ok=True)

    # json_util mantiene ObjectId, Decimal128 y fechas
    json_output = dumps(records, indent=2, ensure_ascii=False)
    filename = samples_dir / f"{name}_sample.json"
    filename.write_text(json_output, encoding="utf-8")

    print(f"✅ Exportados {len(records)} registros de '{name}'")
    print(f"📄 Archivo: {filename} ({len(json_output) / 1024:.2f} KB)")
    return filename


def export_sample(entity_type, limit=200, flavor=config.DOCUMENT):
    """Conecta al destino, toma la muestra y la escribe en samples/."""
    name = config.get_target_name(entity_type, flavor)
    print(f"📥 Obteniendo {limit} registros de '{name}' ({flavor})...")

    if flavor == config.DOCUMENT:
        client, database = connect_to_mongo()
        try:
            records = fetch_documents(database, entity_type, limit)
        finally:
            client.close()
    else:
        driver, session = connect_to_neo4j()
        try:
            records = fetch_nodes(session, entity_type, limit)
        finally:
            session.close()
            driver.close()

    return write_sample(records, name)


def main(argv):
    if len(argv) < 2:
        print("Uso: python export_sample.py <entity_type> [limit] [documento|grafo]")
        print("Ejemplo: python export_sample.py orders 50")
        sys.exit(1)

    entity_type = argv[1]
    limit = int(argv[2]) if len(argv) > 2 else 200
    flavor = config.GRAPH if len(argv) > 3 and argv[3].lower() == "grafo" else config.DOCUMENT

    try:
        config.get_entity_config(entity_type)
    except KeyError as e:
        print(f"❌ {e.args[0]}", file=sys.stderr)
        sys.exit(1)

    export_sample(entity_type, limit, flavor)


if __name__ == "__main__":
    main(sys.argv)
