"""Registries that pick a metadata service or type converter per engine."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from clausekit.engines.registry import engine_key
from clausekit.errors import EngineNotSupportedError
from clausekit.log import get_logger
from clausekit.metadata.executor import SqlExecutor

if TYPE_CHECKING:
    from clausekit.metadata.service import MetadataService
    from clausekit.metadata.type_converters import TypeConverter

logger = get_logger(__name__)


class MetadataServiceFactory:
    """Registry mapping engine identifiers to :class:`MetadataService` classes.

    Example::

        @MetadataServiceFactory.register("mysql")
        class MySqlMetadataService(MetadataService):
            ...

        service = MetadataServiceFactory.create("mysql", executor)
    """

    _services: ClassVar[dict[str, type[MetadataService]]] = {}

    @classmethod
    def register(
        cls, engine: str | Enum
    ) -> Callable[[type[MetadataService]], type[MetadataService]]:
        """Decorator that registers a service class under ``engine``."""

        def decorator(service_cls: type[MetadataService]) -> type[MetadataService]:
            cls._services[engine_key(engine)] = service_cls
            return service_cls

        return decorator

    @classmethod
    def create(cls, engine: str | Enum, executor: SqlExecutor) -> MetadataService:
        """Instantiate the service registered for ``engine``.

        Raises:
            EngineNotSupportedError: If no service is registered for ``engine``.
            InvalidArgumentError: If ``executor`` is ``None``.
        """
        key = engine_key(engine)
        service_cls = cls._services.get(key)
        if service_cls is None:
            logger.warning("engine_not_supported", engine=key, component="metadata service")
            raise EngineNotSupportedError(key, "metadata service", cls.registered_engines())
        return service_cls(executor)

    @classmethod
    def create_for_url(cls, url: str, engine: str | Enum | None = None) -> MetadataService:
        """Create a service backed by a new SQLAlchemy ``AsyncEngine`` for ``url``.

        ``engine`` defaults to the clausekit engine matching the URL's
        SQLAlchemy backend (``mssql``, ``mysql``/``mariadb``, ``postgresql``).
        """
        from sqlalchemy.engine import make_url
        from sqlalchemy.ext.asyncio import create_async_engine

        from clausekit.metadata.sqlalchemy_executor import SqlAlchemyExecutor

        backend = make_url(url).get_backend_name()
        key = engine_key(engine) if engine is not None else _BACKENDS.get(backend, backend)
        if key not in cls._services:
            logger.warning("engine_not_supported", engine=key, component="metadata service")
            raise EngineNotSupportedError(key, "metadata service", cls.registered_engines())
        return cls.create(key, SqlAlchemyExecutor(create_async_engine(url)))

    @classmethod
    def registered_engines(cls) -> list[str]:
        return sorted(cls._services)


class TypeConverterFactory:
    """Registry mapping engine identifiers to :class:`TypeConverter` classes."""

    _converters: ClassVar[dict[str, type[TypeConverter]]] = {}

    @classmethod
    def register(
        cls, engine: str | Enum
    ) -> Callable[[type[TypeConverter]], type[TypeConverter]]:
        """Decorator that registers a converter class under ``engine``."""

        def decorator(converter_cls: type[TypeConverter]) -> type[TypeConverter]:
            cls._converters[engine_key(engine)] = converter_cls
            return converter_cls

        return decorator

    @classmethod
    def create(cls, engine: str | Enum) -> TypeConverter:
        """Instantiate the converter registered for ``engine``.

        Raises:
            EngineNotSupportedError: If no converter is registered for ``engine``.
        """
        key = engine_key(engine)
        converter_cls = cls._converters.get(key)
        if converter_cls is None:
            logger.warning("engine_not_supported", engine=key, component="type converter")
            raise EngineNotSupportedError(key, "type converter", cls.registered_engines())
        return converter_cls()

    @classmethod
    def registered_engines(cls) -> list[str]:
        return sorted(cls._converters)


_BACKENDS = {
    "mssql": "sqlserver",
    "mysql": "mysql",
    "mariadb": "mysql",
    "postgresql": "postgresql",
}
