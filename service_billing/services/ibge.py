"""IBGE localities API client (states and municipalities)."""

import logging
from typing import Any

import requests

from service_billing.config import IbgeConfig
from service_billing.exceptions import RemoteServiceError
from service_billing.models.fiscal import Municipality, State

logger = logging.getLogger(__name__)


class IbgeClient:
    """Lookup of Brazilian states and municipalities, used by company registration."""

    def __init__(self, config: IbgeConfig | None = None, session: requests.Session | None = None) -> None:
        self.config = config or IbgeConfig()
        self.session = session or requests.Session()

    def _get(self, path: str) -> Any:
        try:
            response = self.session.get(
                f"{self.config.base_url}{path}",
                params={"orderBy": "nome"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error("IBGE request %s failed: %s", path, e)
            raise RemoteServiceError(f"IBGE request failed: {e}") from e
        except ValueError as e:
            raise RemoteServiceError("Invalid response format from IBGE") from e

    def list_states(self) -> list[State]:
        """All states ordered by name."""
        return [
            State(id=int(item["id"]), abbreviation=item["sigla"], name=item["nome"])
            for item in self._get("/estados")
        ]

    def list_municipalities(self, state_id: int | str) -> list[Municipality]:
        """Municipalities of a state (IBGE id or UF abbreviation), ordered by name."""
        return [
            Municipality(id=int(item["id"]), name=item["nome"])
            for item in self._get(f"/estados/{state_id}/municipios")
        ]
