import re
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    api_url: str = "http://localhost:5000/api"
    request_timeout: float = 10.0
    share_base_url: str = "http://localhost:5173/preview"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def api_origin(self) -> str:
        """API base URL with its trailing /api segment removed."""
        return re.sub(r"/?api/?$", "", self.api_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
