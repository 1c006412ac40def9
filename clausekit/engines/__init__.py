"""clausekit engines: one registered profile per supported database."""
from clausekit.engines.mysql import MYSQL, MYSQL_DIALECT
from clausekit.engines.oracle import ORACLE, ORACLE_DIALECT, OracleParameterManager
from clausekit.engines.postgres import POSTGRESQL, POSTGRESQL_DIALECT
from clausekit.engines.registry import EngineProfile, EngineRegistry, engine_key
from clausekit.engines.sqlserver import SQLSERVER, SQLSERVER_DIALECT

__all__ = [
    "EngineProfile",
    "EngineRegistry",
    "MYSQL",
    "MYSQL_DIALECT",
    "ORACLE",
    "ORACLE_DIALECT",
    "OracleParameterManager",
    "POSTGRESQL",
    "POSTGRESQL_DIALECT",
    "SQLSERVER",
    "SQLSERVER_DIALECT",
    "engine_key",
]
