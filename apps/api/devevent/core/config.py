import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    return int(val)


@dataclass(frozen=True)
class Settings:
    env: str = os.getenv("ENV", "local")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Local default only; deployments must set MONGODB_URI.
    mongodb_uri: str = field(
        default_factory=lambda: os.getenv(
            "MONGODB_URI",
            "mongodb://localhost:27017/devevent",
        )
    )
    # Used when the URI does not name a database
    mongodb_db_name: str = os.getenv("MONGODB_DB_NAME", "devevent")

    # Client pool / timeouts
    mongodb_max_pool_size: int = _int(os.getenv("MONGODB_MAX_POOL_SIZE"), 10)
    mongodb_server_selection_timeout_ms: int = _int(
        os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS"), 5000
    )
    mongodb_socket_timeout_ms: int = _int(os.getenv("MONGODB_SOCKET_TIMEOUT_MS"), 45000)
    mongodb_max_idle_time_ms: int = _int(os.getenv("MONGODB_MAX_IDLE_TIME_MS"), 45000)

    def mongo_client_options(self) -> dict[str, int | bool]:
        return {
            "maxPoolSize": self.mongodb_max_pool_size,
            "serverSelectionTimeoutMS": self.mongodb_server_selection_timeout_ms,
            "socketTimeoutMS": self.mongodb_socket_timeout_ms,
            "maxIdleTimeMS": self.mongodb_max_idle_time_ms,
            "tz_aware": True,
        }


settings = Settings()
