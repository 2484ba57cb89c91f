"""
Migration Orchestrator: ejecuta la corrida completa de punta a punta.

Máquina de estados:
    IDLE → CLEARING → MIGRATING(etapa_1) → ... → MIGRATING(etapa_n) → COMPLETED
    FAILED es terminal y alcanzable desde cualquier estado no terminal.

Flujo de una corrida:
1. Crear IdMap nuevo (vive solo durante la corrida)
2. clear_all() sobre todos los destinos de las etapas del flavor
3. Por etapa, en orden de config.MIGRATION_ORDER:
   leer filas → load_related() → transform() → write_batch() → enrich()
4. writer.finalize() (relaciones del grafo)
5. Retornar MigrationResult

Cualquier error es fatal para la corrida: se captura UNA vez aquí, se
registra con contexto (tipo, etapa, conteos) y se convierte en un
MigrationResult FAILED. No hay rollback: lo ya escrito queda escrito
y el remedio es volver a correr el pipeline completo.
"""

import importlib
import logging
import time
from enum import Enum

import config
from errors import MigrationError, MissingDependencyError
from id_map import IdMap
from migrators.base import BaseMigrator

logger = logging.getLogger(__name__)

SUCCESS = "SUCCESS"
FAILED = "FAILED"


class MigrationState(Enum):
    IDLE = "idle"
    CLEARING = "clearing"
    MIGRATING = "migrating"
    COMPLETED = "completed"
    FAILED = "failed"


class MigrationResult:
    """
    Resumen estructurado de una corrida.

    Attributes:
        status: 'SUCCESS' o 'FAILED'
        flavor: Destino migrado ('document' / 'graph')
        counts: {tipo de entidad: filas migradas} solo de etapas completas
        links: Conteos extra de finalize() (relaciones del grafo)
        duration_ms: Tiempo total en milisegundos
        error: Mensaje de error (None si SUCCESS)
        error_type: Clase del error (ej: 'MissingDependencyError')
        failed_stage: Etapa en la que falló (o 'clear')
    """

    def __init__(self, flavor):
        self.flavor = flavor
        self.status = None
        self.counts = {}
        self.links = {}
        self.duration_ms = 0
        self.error = None
        self.error_type = None
        self.failed_stage = None

    @property
    def succeeded(self):
        return self.status == SUCCESS

    def to_dict(self):
        result = {
            "status": self.status,
            "flavor": self.flavor,
            "counts": dict(self.counts),
            "duration_ms": self.duration_ms,
        }
        if self.links:
            result["links"] = dict(self.links)
        if self.status == FAILED:
            result["error"] = self.error
            result["error_type"] = self.error_type
            result["failed_stage"] = self.failed_stage
        return result


def load_migrator(entity_type):
    """
    Carga dinámicamente el migrador correspondiente a un tipo de entidad.

    Convención de nombres:
        products → migrators.products → ProductsMigrator
        order_products → migrators.order_products → OrderProductsMigrator

    Raises:
        ImportError: Si no existe el módulo
        TypeError: Si la clase no hereda de BaseMigrator
    """
    config.get_entity_config(entity_type)
    class_name = "".join(word.capitalize() for word in entity_type.split("_")) + "Migrator"

    module = importlib.import_module(f"migrators.{entity_type}")
    try:
        migrator_class = getattr(module, class_name)
    except AttributeError:
        raise ImportError(
            f"El módulo migrators.{entity_type} no tiene la clase '{class_name}'"
        ) from None

    if not issubclass(migrator_class, BaseMigrator):
        raise TypeError(f"{class_name} no hereda de BaseMigrator")
    return migrator_class(entity_type)


class MigrationOrchestrator:
    """
    Orquesta una corrida contra UN destino.

    Args:
        reader: Source Reader (list_all / find_by_id)
        writer: BaseTargetWriter del destino
        flavor: 'document' o 'graph' (por defecto el del writer)
        migrators: {tipo: migrador} para reemplazar la carga dinámica
    """

    def __init__(self, reader, writer, flavor=None, migrators=None):
        self.reader = reader
        self.writer = writer
        self.flavor = flavor or writer.flavor
        self.stages = config.get_stages(self.flavor)
        self.migrators = migrators or {}
        self.state = MigrationState.IDLE
        self.current_stage = None
        self.id_map = None

    def run(self):
        """
        Ejecuta la corrida completa.

        Returns:
            MigrationResult: Nunca lanza errores de migración; los reporta
        """
        result = MigrationResult(self.flavor)
        started = time.perf_counter()
        self.id_map = IdMap()
        self.current_stage = None

        logger.info("Iniciando migración → %s (%d etapas)", self.flavor, len(self.stages))

        try:
            self._transition(MigrationState.CLEARING)
            self.writer.clear_all(self.stages)

            for entity_type in self.stages:
                self.current_stage = entity_type
                self._transition(MigrationState.MIGRATING)
                result.counts[entity_type] = self._migrate_stage(entity_type)

            self.current_stage = None
            result.links = self.writer.finalize() or {}
            self._transition(MigrationState.COMPLETED)
            result.status = SUCCESS

        except Exception as e:
            self._fail(result, e)

        finally:
            result.duration_ms = int((time.perf_counter() - started) * 1000)
            # El IdMap se descarta al final de la corrida (éxito o fallo)
            self.id_map = None

        if result.succeeded:
            logger.info(
                "Migración → %s completada en %d ms: %s",
                self.flavor,
                result.duration_ms,
                result.counts,
            )
        return result

    def _migrate_stage(self, entity_type):
        """
        Migra una etapa completa.

        La transición a la siguiente etapa ocurre solo cuando write_batch()
        retornó, es decir, con el batch escrito y el IdMap actualizado.

        Returns:
            int: Filas migradas
        """
        migrator = self._get_migrator(entity_type)
        rows = self.reader.list_all(migrator.source)
        related = migrator.load_related(self.reader)

        representations = []
        source_ids = []
        for row in rows:
            representations.append(migrator.transform(row, self.id_map, related, self.flavor))
            source_ids.append(migrator.get_primary_key_from_row(row))

        target_ids = []
        if representations:
            target_ids = self.writer.write_batch(
                entity_type, representations, source_ids, self.id_map
            )

        migrator.enrich(self.writer, rows, self.id_map, related, self.flavor)

        logger.info("Etapa %s: %d registros migrados", entity_type, len(target_ids))
        return len(target_ids)

    def _get_migrator(self, entity_type):
        if entity_type not in self.migrators:
            self.migrators[entity_type] = load_migrator(entity_type)
        return self.migrators[entity_type]

    def _transition(self, state):
        stage = f"({self.current_stage})" if self.current_stage else ""
        logger.debug("Estado: %s → %s%s", self.state.value, state.value, stage)
        self.state = state

    def _fail(self, result, error):
        failed_from = self.state
        stage = self.current_stage or (
            "clear" if failed_from == MigrationState.CLEARING else "finalize"
        )
        self._transition(MigrationState.FAILED)

        message = str(error)
        if isinstance(error, MissingDependencyError):
            message += self._describe_missing(error)

        result.status = FAILED
        result.error = message
        result.error_type = type(error).__name__
        result.failed_stage = stage

        log_context = "Migración → %s FALLÓ en etapa '%s' (%s): %s | conteos hasta ahora: %s"
        args = (self.flavor, stage, result.error_type, message, result.counts)
        if isinstance(error, MigrationError):
            logger.error(log_context, *args)
        else:
            # Error no previsto: traza completa para diagnóstico
            logger.exception(log_context, *args)

    def _describe_missing(self, error):
        """Distingue referencia colgante de entidad existente pero no migrada."""
        try:
            row = self.reader.find_by_id(error.referenced_type, error.referenced_id)
        except (MigrationError, KeyError) as e:
            logger.debug("No se pudo verificar %s en el origen: %s", error.referenced_type, e)
            return ""
        if row is None:
            return " [no existe en el origen]"
        return " [existe en el origen pero no fue migrada en esta corrida]"
