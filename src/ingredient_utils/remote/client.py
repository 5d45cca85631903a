"""HTTP-backed ingredient and unit directories."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

from ingredient_utils.database.directory import (
    DirectoryUnavailable,
    IngredientDirectory,
    ingredient_from_record,
)
from ingredient_utils.database.units import MeasurementUnit, UnitSource, unit_from_record
from ingredient_utils.ingredients.models import CanonicalIngredient

from .retry import retry_on_connection_error

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class DirectoryClient:
    """Thin JSON client for a directory REST service.

    Attributes:
        base_url: Service root, e.g. "https://api.example.com/v1/"
        timeout: Per-request timeout in seconds
        session: The underlying requests session
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        user_agent: str = "ingredient-utils/0.1",
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self.session.headers["Accept"] = "application/json"
        if api_key:
            self.session.headers["apikey"] = api_key
            self.session.headers["Authorization"] = f"Bearer {api_key}"

    @retry_on_connection_error()
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        response = self.session.get(
            urljoin(self.base_url, path), params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return response

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a path and decode the JSON body.

        Raises:
            DirectoryUnavailable: On connection failures (after retries),
                error statuses or an undecodable body.
        """
        try:
            return self._get(path, params).json()
        except (requests.RequestException, ConnectionError) as e:
            raise DirectoryUnavailable(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            raise DirectoryUnavailable(f"Invalid JSON from {path}: {e}") from e


def _records(payload: Any) -> List[Dict[str, Any]]:
    # Accept a bare list or a {"data": [...]} envelope
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise DirectoryUnavailable(f"Unexpected payload type {type(payload).__name__}")
    return payload


class RestDirectory(IngredientDirectory):
    """Ingredient directory served over HTTP.

    The endpoint takes the normalized query as ``q`` and returns ingredient
    records (id, name, plural_name, family, aliases, base_ingredient_id).
    """

    def __init__(self, client: DirectoryClient, path: str = "ingredients"):
        self.client = client
        self.path = path

    def lookup_candidates(self, normalized_name: str) -> List[CanonicalIngredient]:
        if not normalized_name:
            return []
        records = _records(self.client.get_json(self.path, {"q": normalized_name}))
        try:
            return [ingredient_from_record(record) for record in records]
        except (KeyError, TypeError) as e:
            raise DirectoryUnavailable(f"Malformed ingredient record: {e}") from e


class RestUnitSource(UnitSource):
    """Measurement units served over HTTP, fetched in one request."""

    def __init__(self, client: DirectoryClient, path: str = "measurement_units"):
        self.client = client
        self.path = path

    def load_units(self) -> List[MeasurementUnit]:
        records = _records(self.client.get_json(self.path))
        try:
            units = [unit_from_record(record) for record in records]
        except (KeyError, TypeError, ValueError) as e:
            raise DirectoryUnavailable(f"Malformed unit record: {e}") from e
        logger.debug("Fetched %d units from %s", len(units), self.path)
        return units
