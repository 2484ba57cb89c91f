"""
Módulo base para migradores PostgreSQL → MongoDB / Neo4j.

Define la interfaz común (contrato) que todos los migradores específicos
deben implementar. Esto permite que el orquestador funcione con cualquier
tipo de entidad sin conocer sus detalles internos.

Patrón de diseño: Strategy Pattern
- orchestrator.py = Contexto (secuencia etapas, escribe, puebla IdMap)
- BaseMigrator = Estrategia abstracta
- ProductsMigrator, OrdersMigrator, ... = Estrategias concretas

Flujo de uso (una vez por etapa):
1. El orquestador lee las filas del tipo de entidad (reader.list_all)
2. Llama a load_related() para leer filas auxiliares (para embeber)
3. Llama a transform() por fila → documento o nodo
4. El writer persiste el batch y agrega las entradas al IdMap
5. Llama a enrich() (hook post-etapa, por defecto no hace nada)

Los métodos to_document()/to_node() son funciones puras: solo dependen de
la fila, del IdMap y de los índices de load_related().
"""

from abc import ABC, abstractmethod

import config


class BaseMigrator(ABC):
    """
    Clase abstracta que define la interfaz para migradores de entidades.

    Attributes:
        entity_type (str): Tipo de entidad (clave de config.ENTITY_TYPES)
        source (str): Clave de la tabla de origen en config.SOURCE_TABLES
        primary_key (list): Columnas que forman el ID de origen
    """

    def __init__(self, entity_type: str):
        """
        Constructor base que carga la configuración del tipo de entidad.

        Args:
            entity_type: Nombre del tipo de entidad (ej: 'products')
        """
        cfg = config.get_entity_config(entity_type)
        self.entity_type = entity_type
        self.source = cfg["source"]
        self.primary_key = cfg["primary_key"]
        self.flavors = cfg["flavors"]

    def load_related(self, reader) -> dict:
        """
        Lee las filas auxiliares que el migrador necesita para embeber.

        Por defecto no necesita nada. Los migradores que embeben snapshots
        (users, products, warehouses, orders, reviews) lo sobreescriben y
        retornan índices, por ejemplo:
            {'brands': {brand_id: row}, 'categories_by_product': {...}}

        Args:
            reader: Source Reader (list_all / find_by_id)
        """
        return {}

    @abstractmethod
    def to_document(self, row: dict, id_map, related: dict) -> dict:
        """
        Transforma una fila en un documento desnormalizado (MongoDB).

        - Embebe snapshots de hijos fuertemente acoplados
        - Las FKs se guardan como IDs destino resueltos vía IdMap
        - FK obligatoria sin entrada → MissingDependencyError
        - FK opcional sin entrada → campo None
        """

    @abstractmethod
    def to_node(self, row: dict, id_map, related: dict) -> dict:
        """
        Transforma una fila en un nodo plano (Neo4j).

        Solo atributos escalares + IDs destino de las entidades referenciadas.
        Las relaciones explícitas se crean después (writer.finalize()).
        """

    def transform(self, row, id_map, related, flavor):
        """Despacha a to_document() o to_node() según el destino."""
        if flavor == config.DOCUMENT:
            return self.to_document(row, id_map, related)
        if flavor == config.GRAPH:
            return self.to_node(row, id_map, related)
        raise ValueError(f"Destino '{flavor}' desconocido")

    def get_primary_key_from_row(self, row: dict) -> str:
        """
        Extrae el ID de origen de una fila.

        PK compuesta (tablas puente) → valores unidos por ':'
        (ej: 'warehouse_uuid:product_uuid').
        """
        return ":".join(str(row[column]) for column in self.primary_key)

    def enrich(self, writer, rows, id_map, related, flavor):
        """
        Hook post-etapa, ejecutado cuando el batch ya está escrito.

        Por defecto no hace nada. ReviewsMigrator lo usa para embeber
        reseñas en los documentos de productos.
        """
        return None

    # =========================================================================
    # HELPERS COMPARTIDOS
    # =========================================================================

    def _require(self, id_map, referenced_type, row, field):
        """Traduce una FK obligatoria de la fila."""
        return id_map.require(
            referenced_type,
            row.get(field),
            referenced_by=self.entity_type,
            row_id=self.get_primary_key_from_row(row),
            field=field,
        )

    def _optional(self, id_map, referenced_type, row, field):
        """
        Traduce una FK opcional de la fila.

        FK vacía o sin entrada en el IdMap → None (sin referencia), nunca error.
        """
        return id_map.get(referenced_type, row.get(field))

    @staticmethod
    def _timestamps(row):
        """Auditoría y soft-delete, copiados tal cual."""
        return {
            "created_at": row.get("created_at"),
            "updated_at": row.get("updated_at"),
            "deleted_at": row.get("deleted_at"),
        }

    @staticmethod
    def _lower(value):
        """Enums en minúscula para documentos (PENDING → pending)."""
        return value.lower() if isinstance(value, str) else value

    @staticmethod
    def _index_by(rows, column):
        """Índice {str(valor): fila} por columna única."""
        return {str(row[column]): row for row in rows}

    @staticmethod
    def _group_by(rows, column):
        """Índice {str(valor): [filas]} por columna FK."""
        groups = {}
        for row in rows:
            groups.setdefault(str(row[column]), []).append(row)
        return groups
