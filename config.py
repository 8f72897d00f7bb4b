import os
try:
    from dotenv import load_dotenv  # type: ignore
    load_dotenv()
except Exception:
    # If python-dotenv isn't installed, continue; env vars can still come from OS
    pass


def _truthy(val: str | None, default: bool = False) -> bool:
    if val is None or not val.strip():
        return default
    return val.strip().lower() in {"1", "true", "yes", "on", "y"}


def sqlite_uri(path: str) -> str:
    """Build a SQLAlchemy URI for a SQLite file (or ``:memory:``)."""
    if path == ":memory:":
        return "sqlite://"
    return f"sqlite:///{path}"


class Config:
    # --------------------------
    # 🔹 Local SQLite store
    # --------------------------
    # One file on the device; ":memory:" is accepted for throwaway stores
    DATABASE_PATH = os.environ.get("DATABASE_PATH", "reforco_escolar.db")
    SQLALCHEMY_DATABASE_URI = os.environ.get("SQLALCHEMY_DATABASE_URI", "") or sqlite_uri(DATABASE_PATH)
    SQLALCHEMY_ECHO = _truthy(os.environ.get("SQLALCHEMY_ECHO"))

    # Demo rows inserted the first time the store is seen empty
    SEED_DEMO_DATA = _truthy(os.environ.get("SEED_DEMO_DATA"), default=True)

    # --------------------------
    # 🔹 Logging
    # --------------------------
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    LOG_FILE = os.environ.get("LOG_FILE", "") or None

    @classmethod
    def for_path(cls, path: str) -> "Config":
        """Return a config instance pointing at an explicit database path."""
        cfg = cls()
        cfg.DATABASE_PATH = path
        cfg.SQLALCHEMY_DATABASE_URI = sqlite_uri(path)
        return cfg
