from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union
from pathlib import Path
import tempfile


def _split_csv(value: Union[str, List[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Plugin Endpoints"
    DEBUG: bool = False

    # REST namespace the plugin routes are mounted under
    API_PREFIX: str = "/wp-json/zao/v1"

    # Pagination
    DEFAULT_PER_PAGE: int = 10
    MAX_PER_PAGE: int = 100

    # Security
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    RBAC_MODEL_PATH: str = str(Path(__file__).parent / "rbac_model.conf")
    RBAC_POLICY_PATH: str = str(Path(__file__).parent / "rbac_policy.csv")

    # Installed plugins
    PLUGINS_DIR: str = "./plugins"
    PLUGIN_MANIFEST_NAME: str = "plugin.yaml"
    ACTIVE_PLUGINS: Union[List[str], str] = []
    NETWORK_ACTIVE_PLUGINS: Union[List[str], str] = []

    # Update cache (Redis)
    REDIS_URL: str = "redis://localhost:6379/0"
    UPDATE_CACHE_KEY: str = "site_transient:update_plugins"

    # Remote plugin repository
    PLUGIN_REPOSITORY_URL: str = "https://api.wordpress.org/plugins/info/1.2/"
    PLUGIN_REPOSITORY_TIMEOUT: float = 10.0

    # Package generation
    PACKAGE_TMP_DIR: str = tempfile.gettempdir()
    PACKAGE_DIRECTORY_EXCLUDES: Union[List[str], str] = [".git/", "node_modules/"]
    PACKAGE_FILE_EXCLUDES: Union[List[str], str] = [".gitattributes", ".gitignore"]

    # Logging
    LOG_DIR: str = str(Path(__file__).parent.parent / "logs")

    # CORS
    CORS_ORIGINS: Union[List[str], str] = []

    @field_validator(
        "ACTIVE_PLUGINS",
        "NETWORK_ACTIVE_PLUGINS",
        "PACKAGE_DIRECTORY_EXCLUDES",
        "PACKAGE_FILE_EXCLUDES",
        "CORS_ORIGINS",
        mode="before",
    )
    def parse_csv(cls, v):
        # Env vars arrive as "a,b,c"
        return _split_csv(v)

    @field_validator("API_PREFIX")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    class Config:
        env_file = str(Path(__file__).parent.parent / ".env")
        case_sensitive = True


settings = Settings()
