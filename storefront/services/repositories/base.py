"""Base repository with shared Supabase client."""
from typing import Optional

from supabase._async.client import AsyncClient


def parse_db_id(value: str) -> Optional[int]:
    """Integer primary key from a string id, or None if it is not numeric."""
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class BaseRepository:
    """Base class for all repositories.

    Database ids are integers; the storefront passes them around as strings.
    """

    def __init__(self, client: AsyncClient) -> None:
        self.client = client
