"""School backend HTTP package."""

from .api_client import SchoolApiClient
from .response_cache import ResponseCache

__all__ = ["SchoolApiClient", "ResponseCache"]
