import pytest

from local_sync.core.config import DatabaseConfig, Settings, ensure_local_context, load_settings
from local_sync.shared.exceptions.sync import SyncConfigurationError


def _settings(**overrides) -> Settings:
    # _env_file=None: no leer un .env real del desarrollador
    return Settings(_env_file=None, **overrides)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "APP_ENV",
        "LOCAL_DB_CONNECTION_STRING",
        "INT_READ_ONLY_DB_CONNECTION_STRING",
        "STG_READ_ONLY_DB_CONNECTION_STRING",
        "PRD_READ_ONLY_DB_CONNECTION_STRING",
        "DB_POOL_MIN_SIZE",
        "DB_POOL_MAX_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDatabaseConfig:

    def test_pool_defaults(self) -> None:
        config = DatabaseConfig()

        assert config.min_pool_size == 2
        assert config.max_pool_size == 10

    def test_rejects_max_below_min(self) -> None:
        with pytest.raises(ValueError):
            DatabaseConfig(min_pool_size=5, max_pool_size=3)

    def test_rejects_min_below_one(self) -> None:
        with pytest.raises(ValueError):
            DatabaseConfig(min_pool_size=0)

    def test_missing_connection_string_raises_configuration_error(self) -> None:
        config = DatabaseConfig(connection_strings={"local": "sqlite+aiosqlite:///local.db"})

        with pytest.raises(SyncConfigurationError, match="prd") as exc_info:
            config.connection_string_for("prd")

        assert exc_info.value.error_code == "CONFIGURATION_ERROR"


class TestSettings:

    def test_database_config_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("LOCAL_DB_CONNECTION_STRING", "postgresql://localhost/app")
        monkeypatch.setenv("STG_READ_ONLY_DB_CONNECTION_STRING", "postgresql://stg-replica/app")
        monkeypatch.setenv("DB_POOL_MIN_SIZE", "3")
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "6")

        config = _settings().database_config()

        assert config.min_pool_size == 3
        assert config.max_pool_size == 6
        assert config.connection_strings == {
            "local": "postgresql://localhost/app",
            "stg": "postgresql://stg-replica/app",
        }

    def test_invalid_pool_sizes_become_configuration_error(self) -> None:
        settings = _settings(DB_POOL_MIN_SIZE=8, DB_POOL_MAX_SIZE=4)

        with pytest.raises(SyncConfigurationError, match="pool"):
            settings.database_config()

    def test_load_settings_wraps_invalid_values(self, monkeypatch) -> None:
        monkeypatch.setenv("DB_POOL_MIN_SIZE", "abc")

        with pytest.raises(SyncConfigurationError, match="DB_POOL_MIN_SIZE") as exc_info:
            load_settings(_env_file=None)

        assert exc_info.value.details == {"field": "DB_POOL_MIN_SIZE"}


class TestEnsureLocalContext:

    def test_accepts_local(self) -> None:
        ensure_local_context(_settings(APP_ENV="local"))

    @pytest.mark.parametrize("app_env", [None, "stg", "prd"])
    def test_rejects_other_contexts(self, app_env) -> None:
        with pytest.raises(SyncConfigurationError, match="desarrollo local"):
            ensure_local_context(_settings(APP_ENV=app_env))
