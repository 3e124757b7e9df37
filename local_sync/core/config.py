"""
Configuración central del sync.
Gestiona variables de entorno (y .env) y construye la configuracion
explícita que recibe la fabrica de conexiones.
"""
from typing import Dict, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from local_sync.shared.constants.sync_constants import (
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_MIN_SIZE,
    LOCAL_ENVIRONMENT,
    Environment,
)
from local_sync.shared.exceptions.sync import SyncConfigurationError


class DatabaseConfig(BaseModel):
    """
    Configuración de conexiones a base de datos.

    - connection_strings: tag de entorno ('local', 'int', 'stg', 'prd') -> URL
    - min_pool_size / max_pool_size: tamaño del pool (solo PostgreSQL)
    """

    min_pool_size: int = Field(default=DEFAULT_POOL_MIN_SIZE, ge=1)
    max_pool_size: int = Field(default=DEFAULT_POOL_MAX_SIZE, ge=1)
    connection_strings: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_pool_bounds(self) -> "DatabaseConfig":
        if self.max_pool_size < self.min_pool_size:
            raise ValueError(
                f"max_pool_size ({self.max_pool_size}) debe ser >= min_pool_size ({self.min_pool_size})"
            )
        return self

    def connection_string_for(self, environment: str) -> str:
        """
        Retorna el connection string del entorno indicado.

        Raises:
            SyncConfigurationError: si el entorno no tiene connection string
        """
        connection_string = self.connection_strings.get(environment)
        if not connection_string:
            raise SyncConfigurationError(
                f"No se encontro connection string para el entorno: {environment}",
                details={"environment": environment},
            )
        return connection_string


class Settings(BaseSettings):
    """
    Variables de entorno reconocidas por el sync.

    - APP_ENV debe ser 'local': el script solo esta pensado para desarrollo local.
    - Los entornos remotos usan siempre replicas de solo lectura.
    """

    APP_ENV: Optional[str] = Field(default=None)

    # Bases de datos
    LOCAL_DB_CONNECTION_STRING: str = Field(default="")
    INT_READ_ONLY_DB_CONNECTION_STRING: str = Field(default="")
    STG_READ_ONLY_DB_CONNECTION_STRING: str = Field(default="")
    PRD_READ_ONLY_DB_CONNECTION_STRING: str = Field(default="")
    DB_POOL_MIN_SIZE: int = Field(default=DEFAULT_POOL_MIN_SIZE)
    DB_POOL_MAX_SIZE: int = Field(default=DEFAULT_POOL_MAX_SIZE)

    # Sync
    SYNC_BATCH_SIZE: int = Field(default=25)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="")
    LOG_JSON: bool = Field(default=False)

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env

    @property
    def is_local(self) -> bool:
        """Indica si el proceso corre en el contexto de desarrollo local."""
        return self.APP_ENV == LOCAL_ENVIRONMENT

    def database_config(self) -> DatabaseConfig:
        """
        Construye la configuracion explicita de conexiones.

        Raises:
            SyncConfigurationError: si los tamaños de pool no son validos
        """
        connection_strings = {
            LOCAL_ENVIRONMENT: self.LOCAL_DB_CONNECTION_STRING,
            Environment.INT.value: self.INT_READ_ONLY_DB_CONNECTION_STRING,
            Environment.STG.value: self.STG_READ_ONLY_DB_CONNECTION_STRING,
            Environment.PRD.value: self.PRD_READ_ONLY_DB_CONNECTION_STRING,
        }
        try:
            return DatabaseConfig(
                min_pool_size=self.DB_POOL_MIN_SIZE,
                max_pool_size=self.DB_POOL_MAX_SIZE,
                connection_strings={env: url for env, url in connection_strings.items() if url},
            )
        except ValidationError as e:
            raise SyncConfigurationError(
                f"Configuracion de pool invalida: {e.errors()[0]['msg']}",
                details={"min": self.DB_POOL_MIN_SIZE, "max": self.DB_POOL_MAX_SIZE},
            ) from e


def ensure_local_context(settings: Settings) -> None:
    """
    Verifica que el script corra en desarrollo local.

    Raises:
        SyncConfigurationError: si APP_ENV no es 'local'
    """
    if not settings.is_local:
        raise SyncConfigurationError(
            "Este script solo esta pensado para desarrollo local",
            details={"APP_ENV": settings.APP_ENV},
        )


def load_settings(**overrides) -> Settings:
    """
    Lee las variables de entorno (y .env) y construye Settings.

    Raises:
        SyncConfigurationError: si alguna variable no tiene un valor valido
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise SyncConfigurationError(
            f"Configuracion invalida: {field}: {error['msg']}",
            details={"field": field},
        ) from e
