"""
Taxonomía de errores del pipeline de migración.

Todos son fatales para la corrida: se propagan hasta el orquestador, que los
convierte en un MigrationResult con status FAILED.

- ClearError: el destino no pudo vaciarse, no se escribió nada.
- RepositoryError: falló una lectura del origen o una escritura al destino.
- MissingDependencyError: una FK obligatoria no tiene entrada en el IdMap.
"""


class MigrationError(Exception):
    """Error base de la migración."""


class ClearError(MigrationError):
    """El destino no pudo limpiarse antes de reconstruir."""


class RepositoryError(MigrationError):
    """Fallo de lectura (origen) o escritura (destino)."""


class MissingDependencyError(MigrationError):
    """
    Una referencia obligatoria no pudo traducirse a un ID destino.

    Attributes:
        entity_type: Tipo que se estaba transformando (ej: 'orders')
        source_id: ID de origen de la fila afectada (puede ser None)
        field: Campo de la fila con la referencia (ej: 'user_id')
        referenced_type: Tipo referenciado (ej: 'users')
        referenced_id: ID de origen referenciado
    """

    def __init__(
        self, referenced_type, referenced_id, entity_type=None, source_id=None, field=None
    ):
        self.referenced_type = referenced_type
        self.referenced_id = referenced_id
        self.entity_type = entity_type
        self.source_id = source_id
        self.field = field
        super().__init__(self._build_message())

    def _build_message(self):
        message = (
            f"Referencia obligatoria sin migrar: {self.referenced_type}"
            f"[{self.referenced_id}]"
        )
        if self.entity_type:
            message += f" (requerida por {self.entity_type}[{self.source_id}]"
            if self.field:
                message += f".{self.field}"
            message += ")"
        return message
