"""
IdMap: correspondencia ID origen → ID destino por tipo de entidad.

Se crea al inicio de cada corrida y se descarta al final. Es append-only:
el Target Writer agrega una entrada por cada fila escrita y los migradores
de etapas posteriores la consultan para traducir FKs.

Uso:
    id_map = IdMap()
    id_map.put('users', 'b3c1...', '65f0a...')

    id_map.require('users', 'b3c1...')   # FK obligatoria → MissingDependencyError si falta
    id_map.get('coupons', None)          # FK opcional → None si falta
"""

from errors import MissingDependencyError


class IdMap:
    """Tabla de traducción de IDs con alcance de una corrida."""

    def __init__(self):
        self._maps = {}

    def put(self, entity_type, source_id, target_id):
        """
        Registra la correspondencia de una fila migrada.

        Raises:
            ValueError: Si el ID de origen ya estaba mapeado a otro destino
        """
        mapping = self._maps.setdefault(entity_type, {})
        key = str(source_id)
        existing = mapping.get(key)
        if existing is not None and existing != target_id:
            raise ValueError(
                f"{entity_type}[{key}] ya mapeado a {existing}, no se puede "
                f"reasignar a {target_id}"
            )
        mapping[key] = target_id

    def get(self, entity_type, source_id):
        """Traduce una referencia opcional. Retorna None si no hay entrada."""
        if source_id is None:
            return None
        return self._maps.get(entity_type, {}).get(str(source_id))

    def require(self, entity_type, source_id, referenced_by=None, row_id=None, field=None):
        """
        Traduce una referencia obligatoria.

        Args:
            entity_type: Tipo referenciado (ej: 'users')
            source_id: ID de origen referenciado
            referenced_by: Tipo que contiene la FK (para el mensaje de error)
            row_id: ID de la fila que contiene la FK
            field: Nombre del campo FK

        Raises:
            MissingDependencyError: Si no hay entrada (o la FK viene vacía)
        """
        target_id = self.get(entity_type, source_id)
        if target_id is None:
            raise MissingDependencyError(
                entity_type,
                source_id,
                entity_type=referenced_by,
                source_id=row_id,
                field=field,
            )
        return target_id

    def count(self, entity_type):
        return len(self._maps.get(entity_type, {}))

    def entries(self, entity_type):
        """Copia del mapeo de un tipo (source_id → target_id)."""
        return dict(self._maps.get(entity_type, {}))

    def entity_types(self):
        return list(self._maps.keys())

    def __contains__(self, entity_type):
        return entity_type in self._maps
