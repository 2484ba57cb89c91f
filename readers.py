"""
Source Reader: acceso de lectura a la base relacional (PostgreSQL).

Cada fila se devuelve como dict plano {columna: valor} (RealDictCursor),
con las relaciones expresadas como columnas FK. No hay grafo de objetos
ni proxies: los migradores resuelven relaciones vía IdMap o índices.

Se leen TODAS las filas, incluidas las soft-deleted: deleted_at es un
atributo más y se copia tal cual al destino.
"""

import logging

import psycopg2
from psycopg2.extras import RealDictCursor

import config
from errors import RepositoryError

logger = logging.getLogger(__name__)


class PostgresReader:
    """
    Lector sobre una conexión psycopg2 abierta durante toda la corrida.

    Attributes:
        connection: Conexión de psycopg2
    """

    def __init__(self, connection):
        self.connection = connection

    def list_all(self, source):
        """
        Lee todas las filas de una tabla de origen.

        Args:
            source: Clave de config.SOURCE_TABLES (ej: 'products', 'stock')

        Returns:
            list[dict]: Filas en orden de PK (si la tabla tiene PK simple)

        Raises:
            RepositoryError: Si la consulta falla
        """
        table_cfg = config.get_source_table(source)
        query = f"SELECT * FROM {table_cfg['table']}"
        if table_cfg["primary_key"]:
            query += f" ORDER BY {table_cfg['primary_key']}"

        rows = self._fetch(query, None, source)
        logger.debug("Leídas %d filas de %s", len(rows), table_cfg["table"])
        return rows

    def find_by_id(self, source, source_id):
        """
        Busca una fila por PK. Retorna None si no existe.

        Raises:
            RepositoryError: Si la tabla no tiene PK simple o la consulta falla
        """
        table_cfg = config.get_source_table(source)
        if not table_cfg["primary_key"]:
            raise RepositoryError(f"La tabla '{table_cfg['table']}' no tiene PK simple")

        query = f"SELECT * FROM {table_cfg['table']} WHERE {table_cfg['primary_key']} = %s"
        rows = self._fetch(query, (str(source_id),), source)
        return rows[0] if rows else None

    def count(self, source):
        """Cantidad de filas de una tabla de origen."""
        table_cfg = config.get_source_table(source)
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(f"SELECT COUNT(*) FROM {table_cfg['table']}")
                return cursor.fetchone()[0]
        except psycopg2.Error as e:
            self.connection.rollback()
            raise RepositoryError(f"Error contando {table_cfg['table']}: {e}") from e

    def _fetch(self, query, params, source):
        try:
            with self.connection.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query, params)
                return [dict(row) for row in cursor.fetchall()]
        except psycopg2.Error as e:
            # Dejar la conexión usable para el resto de la corrida
            self.connection.rollback()
            raise RepositoryError(f"Error leyendo '{source}': {e}") from e
