from __future__ import annotations

import secrets
import string
from urllib.parse import urlparse

_BASE36 = string.digits + string.ascii_lowercase


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except ValueError:
        return False


def extract_domain(url: str) -> str:
    """Extract host from URL for display."""
    try:
        return urlparse(url).hostname or url
    except ValueError:
        return url


def random_base36(length: int = 9) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))
