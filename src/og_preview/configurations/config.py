import os
from typing import Tuple

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

env_name = os.getenv("PREVIEW_ENV", "dev")
load_dotenv(f"config/.env.{env_name}", override=False)
load_dotenv("config/.env", override=False)

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    listenaddr: str = "localhost:2345"
    listenpath: str = "/preview"
    env: str = "dev"
    log_level: str = "INFO"
    request_timeout: float = 10.0
    user_agent: str = f"og-preview/{APP_VERSION}"
    cache_failures: bool = True

    model_config = SettingsConfigDict(
        env_prefix="PREVIEW_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("listenaddr")
    @classmethod
    def _validate_listenaddr(cls, value: str) -> str:
        host, sep, port = value.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"listen address must be host:port, got {value!r}")
        return value

    @field_validator("listenpath")
    @classmethod
    def _validate_listenpath(cls, value: str) -> str:
        if not value.startswith("/"):
            return f"/{value}"
        return value

    @property
    def listen_host(self) -> str:
        return self._split_listenaddr()[0]

    @property
    def listen_port(self) -> int:
        return self._split_listenaddr()[1]

    def _split_listenaddr(self) -> Tuple[str, int]:
        host, _, port = self.listenaddr.rpartition(":")
        return host.strip("[]"), int(port)


settings = Settings()
