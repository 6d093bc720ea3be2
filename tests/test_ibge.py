"""Tests for the IBGE localities client."""

from unittest.mock import MagicMock

import pytest
import requests

from service_billing.config import IbgeConfig
from service_billing.exceptions import RemoteServiceError
from service_billing.models.fiscal import Municipality, State
from service_billing.services.ibge import IbgeClient


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session: MagicMock) -> IbgeClient:
    return IbgeClient(IbgeConfig(base_url="https://ibge.test", timeout=3.0), session=session)


class TestIbgeClient:
    """Tests for IbgeClient."""

    def test_list_states(self, client: IbgeClient, session: MagicMock) -> None:
        session.get.return_value.json.return_value = [
            {"id": 12, "sigla": "AC", "nome": "Acre"},
            {"id": 35, "sigla": "SP", "nome": "São Paulo"},
        ]

        states = client.list_states()

        assert states == [State(12, "AC", "Acre"), State(35, "SP", "São Paulo")]
        session.get.assert_called_once_with(
            "https://ibge.test/estados", params={"orderBy": "nome"}, timeout=3.0
        )

    def test_list_municipalities(self, client: IbgeClient, session: MagicMock) -> None:
        session.get.return_value.json.return_value = [{"id": "3509502", "nome": "Campinas"}]

        assert client.list_municipalities(35) == [Municipality(3509502, "Campinas")]
        assert session.get.call_args.args == ("https://ibge.test/estados/35/municipios",)

    def test_http_error(self, client: IbgeClient, session: MagicMock) -> None:
        session.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("503")

        with pytest.raises(RemoteServiceError):
            client.list_states()

    def test_timeout(self, client: IbgeClient, session: MagicMock) -> None:
        session.get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(RemoteServiceError):
            client.list_municipalities("SP")

    def test_invalid_json(self, client: IbgeClient, session: MagicMock) -> None:
        session.get.return_value.json.side_effect = ValueError("bad json")

        with pytest.raises(RemoteServiceError):
            client.list_states()

    def test_default_config(self) -> None:
        assert IbgeClient().config.base_url.endswith("/localidades")
