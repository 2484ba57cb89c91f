"""
Test de validación para config.py.

Verifica que:
- Configuración carga correctamente
- Funciones helper funcionan según su contrato
- MIGRATION_ORDER respeta las dependencias declaradas
- Manejo de errores es apropiado
"""

import os
import sys

import pytest

# === RESOLUCIÓN DE PATH ===
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config

# === HELPERS DINÁMICOS ===


def get_all_entity_types():
    """Retorna lista de todos los tipos de entidad configurados."""
    return list(config.ENTITY_TYPES.keys())


# === TESTS ===


def test_get_entity_config():
    """Verifica que get_entity_config retorna estructura correcta para TODOS los tipos."""
    errors = []

    for entity_type in get_all_entity_types():
        cfg = config.get_entity_config(entity_type)

        required_keys = [
            "source",
            "primary_key",
            "collection",
            "label",
            "depends_on",
            "flavors",
            "description",
        ]
        for key in required_keys:
            if key not in cfg:
                errors.append(f"{entity_type}: Falta key '{key}'")

        if cfg.get("source") not in config.SOURCE_TABLES:
            errors.append(f"{entity_type}: source '{cfg.get('source')}' sin tabla de origen")

        if not isinstance(cfg.get("primary_key"), list) or not cfg.get("primary_key"):
            errors.append(f"{entity_type}: primary_key debe ser lista no vacía")

        if not isinstance(cfg.get("depends_on"), list):
            errors.append(f"{entity_type}: depends_on debe ser lista")

        if not set(cfg.get("flavors", [])) <= set(config.FLAVORS):
            errors.append(f"{entity_type}: flavors inválidos {cfg.get('flavors')}")

    assert not errors, f"Errores en configuración: {errors}"


def test_migration_order_integrity():
    """Verifica que MIGRATION_ORDER respeta todas las dependencias."""
    processed = set()
    errors = []

    for entity_type in config.MIGRATION_ORDER:
        for dep in config.validate_migration_order(entity_type):
            if dep not in processed:
                errors.append(
                    f"{entity_type} requiere {dep}, pero {dep} aparece después en MIGRATION_ORDER"
                )
        processed.add(entity_type)

    assert not errors, f"Errores en MIGRATION_ORDER: {errors}"


def test_all_entity_types_in_migration_order():
    """Todo tipo configurado está en MIGRATION_ORDER y viceversa (sin repetidos)."""
    assert set(config.MIGRATION_ORDER) == set(get_all_entity_types())
    assert len(config.MIGRATION_ORDER) == len(set(config.MIGRATION_ORDER))


def test_stage_dependencies_apply_to_same_flavor():
    """Las dependencias de una etapa existen en cada destino donde corre la etapa."""
    for flavor in config.FLAVORS:
        stages = config.get_stages(flavor)
        for entity_type in stages:
            for dep in config.validate_migration_order(entity_type):
                assert dep in stages, f"{entity_type} ({flavor}) depende de {dep} ausente"


def test_get_stages():
    document_stages = config.get_stages(config.DOCUMENT)
    graph_stages = config.get_stages(config.GRAPH)

    assert document_stages[0] == "brands"
    assert document_stages[-1] == "reviews"
    # Las líneas de pedido van embebidas en el documento del pedido
    assert "order_products" not in document_stages
    assert "order_products" in graph_stages
    assert graph_stages == [name for name in config.MIGRATION_ORDER]


def test_get_stages_unknown_flavor():
    with pytest.raises(ValueError) as excinfo:
        config.get_stages("relational")
    assert "relational" in str(excinfo.value)


def test_get_target_name():
    assert config.get_target_name("stock", config.DOCUMENT) == "warehouse_products"
    assert config.get_target_name("stock", config.GRAPH) == "Stock"
    assert config.get_target_name("order_products", config.GRAPH) == "OrderLine"

    with pytest.raises(ValueError):
        config.get_target_name("brands", "csv")


def test_error_handling():
    """Verifica que errores se manejan apropiadamente."""
    with pytest.raises(KeyError) as excinfo:
        config.get_entity_config("entidad_inexistente")
    assert "entidad_inexistente" in str(excinfo.value)
    assert "disponibles" in str(excinfo.value).lower()

    with pytest.raises(KeyError) as excinfo:
        config.get_source_table("tabla_inexistente")
    assert "disponibles" in str(excinfo.value).lower()


def test_graph_relationships_reference_known_labels():
    """Cada relación del grafo une labels de etapas del destino grafo."""
    labels = {
        config.get_target_name(entity_type, config.GRAPH)
        for entity_type in config.get_stages(config.GRAPH)
    }
    for from_label, field, rel_type, to_label in config.GRAPH_RELATIONSHIPS:
        assert from_label in labels, f"{from_label} no es un label migrado"
        assert to_label in labels, f"{to_label} no es un label migrado"
        assert field.endswith("_id") or field.endswith("_ids")
        assert rel_type.isupper()
