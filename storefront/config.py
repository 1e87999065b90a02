"""Storefront settings read from the environment (optionally a .env file)."""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

CART_BACKEND_MEMORY = "memory"
CART_BACKEND_FILE = "file"
CART_BACKEND_REDIS = "redis"
CART_BACKENDS = (CART_BACKEND_MEMORY, CART_BACKEND_FILE, CART_BACKEND_REDIS)

DEFAULT_CART_STORAGE_KEY = "techgear-cart"
DEFAULT_CART_STORAGE_PATH = ".techgear-cart.json"
DEFAULT_CURRENCY = "INR"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one storefront process."""
    supabase_url: str = ""
    supabase_anon_key: str = ""
    redis_url: str = ""
    redis_token: str = ""
    cart_backend: str = CART_BACKEND_FILE
    cart_storage_path: str = DEFAULT_CART_STORAGE_PATH
    cart_storage_key: str = DEFAULT_CART_STORAGE_KEY
    cart_ttl_seconds: Optional[int] = None
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """Build settings from an environment mapping (defaults to os.environ)."""
        env = os.environ if environ is None else environ

        backend = env.get("CART_STORAGE_BACKEND", CART_BACKEND_FILE).strip().lower()
        if backend not in CART_BACKENDS:
            raise ValueError(
                f"CART_STORAGE_BACKEND must be one of {', '.join(CART_BACKENDS)}, got '{backend}'"
            )

        ttl_raw = env.get("CART_TTL_SECONDS", "").strip()
        ttl = int(ttl_raw) if ttl_raw else None
        if ttl is not None and ttl <= 0:
            raise ValueError("CART_TTL_SECONDS must be a positive integer")

        return cls(
            supabase_url=env.get("SUPABASE_URL", ""),
            supabase_anon_key=env.get("SUPABASE_ANON_KEY", ""),
            redis_url=env.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=env.get("UPSTASH_REDIS_REST_TOKEN", ""),
            cart_backend=backend,
            cart_storage_path=env.get("CART_STORAGE_PATH", DEFAULT_CART_STORAGE_PATH),
            cart_storage_key=env.get("CART_STORAGE_KEY", DEFAULT_CART_STORAGE_KEY),
            cart_ttl_seconds=ttl,
            currency=env.get("STORE_CURRENCY", DEFAULT_CURRENCY).upper(),
        )


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Load a .env file (if any) into the environment, then read settings.

    Variables already set in the environment win over the .env file.
    """
    load_dotenv(dotenv_path, override=False)
    return Settings.from_env()
