"""Cloud API collaborators: HTTP client, payload models, and SSH key helpers."""

from .client import DEFAULT_BASE_URL, CloudClient
from .models import REGIONS, Instance, InstanceQuote, Title, parse_offers, parse_region
from .sshkeys import local_public_keys, parse_key

__all__ = [
    "CloudClient",
    "DEFAULT_BASE_URL",
    "Instance",
    "InstanceQuote",
    "REGIONS",
    "Title",
    "local_public_keys",
    "parse_key",
    "parse_offers",
    "parse_region",
]
