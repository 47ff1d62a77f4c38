"""Test utilities for URL shortener tests."""

import random
import string
from typing import Optional, Tuple

from app.repositories.url_repository import URLRepository


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


async def create_test_url(
    url_repository: URLRepository,
    url: Optional[str] = None,
    alias: Optional[str] = None,
) -> Tuple[int, str, str]:
    """Store a test mapping and return ``(id, url, alias)``."""
    url = url or random_url()
    alias = alias or random_string(6)
    record_id = await url_repository.save_url(url, alias)
    return record_id, url, alias
