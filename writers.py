"""
Target Writer / Clearer: persistencia en los destinos MongoDB y Neo4j.

Contrato común (BaseTargetWriter):
- clear_all(entity_types): vacía todos los destinos en orden INVERSO de
  dependencias (hijos antes que padres). Idempotente.
- write_batch(entity_type, representations, source_ids, id_map): persiste
  el batch de una etapa, retorna los IDs generados por el store y agrega
  cada par (source_id → target_id) al IdMap.
- embed_many(entity_type, field, values_by_target_id): reemplaza un campo
  embebido en documentos ya escritos (solo destino documento).
- finalize(): trabajo post-etapas (relaciones en el grafo).

Los IDs destino los genera SIEMPRE el store (ObjectId / elementId) y se
guardan en el IdMap como string.

No hay transacción entre stores: si una escritura falla se lanza
RepositoryError y la corrida se aborta; lo ya escrito queda escrito.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from bson import ObjectId
from bson.decimal128 import Decimal128
from neo4j.exceptions import DriverError, Neo4jError
from pymongo import UpdateOne
from pymongo.errors import PyMongoError

import config
from errors import ClearError, RepositoryError

logger = logging.getLogger(__name__)


class BaseTargetWriter(ABC):
    """
    Clase abstracta para writers de destino.

    Attributes:
        flavor (str): 'document' o 'graph'
        batch_size (int): Registros por operación de escritura
    """

    flavor = None

    def __init__(self, batch_size=None):
        self.batch_size = batch_size or config.BATCH_SIZE

    @abstractmethod
    def clear_all(self, entity_types):
        """Vacía los destinos de todos los tipos (orden inverso)."""

    @abstractmethod
    def write_batch(self, entity_type, representations, source_ids, id_map):
        """Persiste una etapa completa y puebla el IdMap."""

    @abstractmethod
    def count(self, entity_type):
        """Cantidad de registros en el destino de un tipo de entidad."""

    @abstractmethod
    def embed_many(self, entity_type, field, values_by_target_id):
        """Reemplaza un campo embebido en registros ya escritos (solo documento)."""

    def finalize(self):
        """Trabajo posterior a todas las etapas. Retorna conteos extra."""
        return {}

    def target_name(self, entity_type):
        return config.get_target_name(entity_type, self.flavor)

    def _chunks(self, items):
        for start in range(0, len(items), self.batch_size):
            yield items[start : start + self.batch_size]

    @staticmethod
    def _register_ids(entity_type, source_ids, target_ids, id_map):
        if len(source_ids) != len(target_ids):
            raise RepositoryError(
                f"{entity_type}: el destino retornó {len(target_ids)} IDs "
                f"para {len(source_ids)} registros"
            )
        for source_id, target_id in zip(source_ids, target_ids):
            id_map.put(entity_type, source_id, target_id)


# =============================================================================
# DESTINO DOCUMENTO: MONGODB
# =============================================================================


def to_bson_value(value):
    """
    Convierte valores de psycopg2 a tipos que pymongo puede codificar.

    - Decimal → Decimal128 (sin pérdida de precisión en montos)
    - date → datetime a medianoche (BSON no tiene tipo fecha sin hora)
    - UUID → str
    - dict / list → recursivo
    """
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {key: to_bson_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_bson_value(item) for item in value]
    return value


class MongoTargetWriter(BaseTargetWriter):
    """
    Writer para MongoDB (representación documento).

    Attributes:
        database: Base de datos de pymongo
    """

    flavor = config.DOCUMENT

    def __init__(self, database, batch_size=None):
        super().__init__(batch_size)
        self.database = database

    def clear_all(self, entity_types):
        for entity_type in reversed(list(entity_types)):
            name = self.target_name(entity_type)
            try:
                deleted = self.database[name].delete_many({}).deleted_count
            except PyMongoError as e:
                raise ClearError(f"No se pudo limpiar la colección '{name}': {e}") from e
            logger.info("Colección %s limpiada (%d documentos)", name, deleted)

    def write_batch(self, entity_type, representations, source_ids, id_map):
        name = self.target_name(entity_type)
        collection = self.database[name]
        target_ids = []

        for chunk in self._chunks(representations):
            documents = [to_bson_value(document) for document in chunk]
            try:
                result = collection.insert_many(documents, ordered=True)
            except PyMongoError as e:
                raise RepositoryError(
                    f"Error insertando en '{name}' ({len(target_ids)} ya insertados): {e}"
                ) from e
            target_ids.extend(str(inserted_id) for inserted_id in result.inserted_ids)

        self._register_ids(entity_type, source_ids, target_ids, id_map)
        return target_ids

    def embed_many(self, entity_type, field, values_by_target_id):
        """
        Reemplaza un campo embebido en varios documentos.

        Args:
            entity_type: Tipo cuyos documentos se actualizan (ej: 'products')
            field: Campo a reemplazar (ej: 'reviews')
            values_by_target_id: {id destino: valor}

        Returns:
            int: Documentos modificados
        """
        name = self.target_name(entity_type)
        operations = [
            UpdateOne({"_id": ObjectId(target_id)}, {"$set": {field: to_bson_value(values)}})
            for target_id, values in values_by_target_id.items()
        ]
        if not operations:
            return 0

        modified = 0
        for chunk in self._chunks(operations):
            try:
                modified += self.database[name].bulk_write(chunk, ordered=False).modified_count
            except PyMongoError as e:
                raise RepositoryError(f"Error embebiendo '{field}' en '{name}': {e}") from e
        logger.info("Campo %s.%s actualizado en %d documentos", name, field, modified)
        return modified

    def count(self, entity_type):
        name = self.target_name(entity_type)
        try:
            return self.database[name].count_documents({})
        except PyMongoError as e:
            raise RepositoryError(f"Error contando '{name}': {e}") from e


# =============================================================================
# DESTINO GRAFO: NEO4J
# =============================================================================


def to_neo4j_property(value):
    """
    Convierte valores de psycopg2 a propiedades Neo4j.

    - Decimal → str (mismo criterio que Spring Data Neo4j para BigDecimal)
    - UUID → str
    - date/datetime → sin cambios (el driver los soporta)
    - listas de escalares → lista convertida

    Raises:
        ValueError: Si el valor es un dict (los nodos son planos)
    """
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [to_neo4j_property(item) for item in value]
    if isinstance(value, dict):
        raise ValueError("Los nodos solo admiten propiedades escalares o listas")
    return value


class Neo4jTargetWriter(BaseTargetWriter):
    """
    Writer para Neo4j (representación grafo).

    Usa una única sesión durante toda la corrida. Cada chunk de un batch
    se escribe en UNA transacción de escritura.

    Attributes:
        session: Sesión del driver neo4j
    """

    flavor = config.GRAPH

    def __init__(self, session, batch_size=None):
        super().__init__(batch_size)
        self.session = session

    def clear_all(self, entity_types):
        for entity_type in reversed(list(entity_types)):
            label = self.target_name(entity_type)
            try:
                summary = self.session.run(f"MATCH (n:`{label}`) DETACH DELETE n").consume()
            except (Neo4jError, DriverError) as e:
                raise ClearError(f"No se pudo limpiar el label '{label}': {e}") from e
            logger.info(
                "Label %s limpiado (%d nodos)", label, summary.counters.nodes_deleted
            )

    def write_batch(self, entity_type, representations, source_ids, id_map):
        label = self.target_name(entity_type)
        target_ids = []

        for chunk in self._chunks(representations):
            rows = [
                {"idx": idx, "props": self._node_properties(node)}
                for idx, node in enumerate(chunk)
            ]
            try:
                target_ids.extend(self.session.execute_write(self._create_nodes, label, rows))
            except (Neo4jError, DriverError) as e:
                raise RepositoryError(
                    f"Error creando nodos :{label} ({len(target_ids)} ya creados): {e}"
                ) from e

        self._register_ids(entity_type, source_ids, target_ids, id_map)
        return target_ids

    def count(self, entity_type):
        label = self.target_name(entity_type)
        try:
            record = self.session.run(f"MATCH (n:`{label}`) RETURN count(n) AS total").single()
        except (Neo4jError, DriverError) as e:
            raise RepositoryError(f"Error contando :{label}: {e}") from e
        return record["total"]

    def embed_many(self, entity_type, field, values_by_target_id):
        """Los nodos son planos: el grafo expresa la relación con aristas."""
        raise NotImplementedError(
            f"Neo4jTargetWriter no embebe '{field}' en :{self.target_name(entity_type)}"
        )

    def finalize(self):
        """
        Crea las relaciones de config.GRAPH_RELATIONSHIPS a partir de los
        campos de referencia de los nodos (MERGE, no duplica).

        Returns:
            dict: {'Label.campo-TIPO->Label': relaciones creadas}
        """
        links = {}
        for from_label, field, rel_type, to_label in config.GRAPH_RELATIONSHIPS:
            query = self._relationship_query(from_label, field, rel_type, to_label)
            try:
                record = self.session.run(query).single()
            except (Neo4jError, DriverError) as e:
                raise RepositoryError(
                    f"Error creando relaciones {from_label}-[:{rel_type}]->{to_label}: {e}"
                ) from e
            key = f"{from_label}.{field}-{rel_type}->{to_label}"
            links[key] = record["total"] if record else 0
            logger.info("Relaciones %s: %d", key, links[key])
        return links

    @staticmethod
    def _create_nodes(tx, label, rows):
        """Crea nodos y retorna sus elementId en el mismo orden que rows."""
        result = tx.run(
            f"UNWIND $rows AS row "
            f"CREATE (n:`{label}`) SET n = row.props "
            f"RETURN row.idx AS idx, elementId(n) AS id",
            rows=rows,
        )
        created = sorted((record["idx"], record["id"]) for record in result)
        return [element_id for _, element_id in created]

    @staticmethod
    def _node_properties(node):
        return {
            key: to_neo4j_property(value)
            for key, value in node.items()
            if value is not None
        }

    @staticmethod
    def _relationship_query(from_label, field, rel_type, to_label):
        # Campos *_ids son listas de IDs destino (ej: category_ids)
        if field.endswith("_ids"):
            match_refs = (
                f"MATCH (a:`{from_label}`) "
                f"UNWIND coalesce(a.{field}, []) AS ref "
                f"MATCH (b:`{to_label}`) WHERE elementId(b) = ref "
            )
        else:
            match_refs = (
                f"MATCH (a:`{from_label}`) WHERE a.{field} IS NOT NULL "
                f"MATCH (b:`{to_label}`) WHERE elementId(b) = a.{field} "
            )
        return match_refs + f"MERGE (a)-[r:`{rel_type}`]->(b) RETURN count(r) AS total"
