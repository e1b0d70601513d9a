import os
import re
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./sku_generator.db"


def normalize_database_url(raw_url: str | None) -> str:
    cleaned = re.sub(r"\s+", "", (raw_url or "").strip())
    if not cleaned:
        return DEFAULT_DATABASE_URL
    if cleaned.startswith("postgres://"):
        cleaned = "postgresql://" + cleaned[len("postgres://") :]
    return cleaned


def engine_options(url: str, env=os.environ) -> dict:
    """Keyword arguments for ``create_engine``."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options: dict = {
        "pool_pre_ping": True,
        "pool_recycle": int(env.get("DB_POOL_RECYCLE", "1800")),
        "pool_size": int(env.get("DB_POOL_SIZE", "2")),
        "max_overflow": int(env.get("DB_MAX_OVERFLOW", "3")),
    }
    sslmode = env.get("DB_SSLMODE", "").strip()
    if url.startswith("postgresql") and sslmode and "sslmode=" not in url:
        options["connect_args"] = {"sslmode": sslmode}
    return options


DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL"))

engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
