"""
Suite de tests para el sistema de migración PostgreSQL → MongoDB / Neo4j.

Los tests NO tocan bases reales: usan un reader y un writer en memoria
(tests/helpers.py) y mocks para los adaptadores de cada driver.
"""
