"""
Migrador para la tabla "user".

DECISIONES DE DISEÑO:
- Documento: embebe TODAS las direcciones del usuario (snapshot 1:N).
  Las direcciones se migran además como colección propia en la etapa
  'addresses', que es la que puebla el IdMap de direcciones.
- Nodo: solo escalares; Address → User se expresa desde el nodo Address.
- password se copia tal cual (ya viene hasheada del origen).
"""

from .base import BaseMigrator


class UsersMigrator(BaseMigrator):
    """Usuario → documento 'users' (con addresses embebidas) / nodo :User."""

    def __init__(self, entity_type="users"):
        super().__init__(entity_type)

    def load_related(self, reader):
        """Direcciones agrupadas por user_id."""
        return {"addresses_by_user": self._group_by(reader.list_all("addresses"), "user_id")}

    def to_document(self, row, id_map, related):
        user_id = str(row["user_id"])
        addresses = related.get("addresses_by_user", {}).get(user_id, [])

        document = self._user_fields(row)
        document["addresses"] = [self._embed_address(address) for address in addresses]
        return document

    def to_node(self, row, id_map, related):
        return self._user_fields(row)

    def _user_fields(self, row):
        return {
            "email": row.get("email"),
            "password": row.get("password"),
            "first_name": row.get("first_name"),
            "last_name": row.get("last_name"),
            "phone_number": row.get("phone_number"),
            "date_of_birth": row.get("date_of_birth"),
            "is_admin": row.get("is_admin"),
            **self._timestamps(row),
        }

    @staticmethod
    def _embed_address(address):
        """Snapshot de dirección (sin IDs: es copia, no referencia)."""
        return {
            "street": address.get("street"),
            "street_number": address.get("street_number"),
            "zip": address.get("zip"),
            "city": address.get("city"),
        }
