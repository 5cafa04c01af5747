import os
from dataclasses import dataclass

from .fact_explain import SUPPORTED_LOCALES


@dataclass(frozen=True)
class Config:
    database_url: str = ""
    log_format: str = "json"
    log_level: str = "INFO"
    locale: str = "en"

    @classmethod
    def from_env(cls) -> "Config":
        locale = os.environ.get("AGENT_FACTS_LOCALE", "en")
        if locale not in SUPPORTED_LOCALES:
            raise RuntimeError(
                f"AGENT_FACTS_LOCALE must be one of {', '.join(SUPPORTED_LOCALES)}, got {locale!r}"
            )

        return cls(
            database_url=os.environ.get("DATABASE_URL", "").strip(),
            log_format=os.environ.get("AGENT_FACTS_LOG_FORMAT", "json"),
            log_level=os.environ.get("AGENT_FACTS_LOG_LEVEL", "INFO"),
            locale=locale,
        )

    def require_database_url(self) -> str:
        if not self.database_url:
            raise RuntimeError("DATABASE_URL must be set")
        return self.database_url
