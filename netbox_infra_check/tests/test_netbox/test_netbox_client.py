"""
Тесты NetBoxClient: чтение VLAN и префиксов сайта.

pynetbox не ходит в сеть при создании api, поэтому клиент
создаётся настоящий, а endpoints подменяются MagicMock.
"""

from unittest.mock import MagicMock

import pynetbox
import pytest
import requests

from netbox_infra_check.core.exceptions import NetBoxAPIError
from netbox_infra_check.netbox import NetBoxClient, NetBoxSession


@pytest.fixture
def client():
    client = NetBoxClient(url="https://netbox.example.com", token="nb-token", timeout=45)
    client.api = MagicMock()
    return client


@pytest.mark.unit
class TestNetBoxClientInit:
    """Тесты создания клиента."""

    def test_missing_url(self):
        with pytest.raises(ValueError):
            NetBoxClient(url="", token="x")

    def test_missing_token(self):
        with pytest.raises(ValueError):
            NetBoxClient(url="https://netbox.example.com", token="")

    def test_session_configured(self):
        client = NetBoxClient(
            url="https://netbox.example.com", token="x", ssl_verify=False, timeout=45
        )

        session = client.api.http_session
        assert isinstance(session, NetBoxSession)
        assert session.timeout == 45
        assert session.verify is False

    def test_ca_bundle_path(self):
        client = NetBoxClient(
            url="https://netbox.example.com", token="x", ssl_verify="/etc/ssl/certs/corp-ca.pem"
        )
        assert client.api.http_session.verify == "/etc/ssl/certs/corp-ca.pem"


@pytest.mark.unit
class TestNetBoxClientFetch:
    """Тесты get_vlans / get_prefixes."""

    def test_get_vlans(self, client):
        client.api.ipam.vlans.filter.return_value = [
            {"id": 1, "vid": 100, "name": "srv-100", "custom_fields": {"infra": "prod"}},
            {"id": 2, "vid": 200, "name": "srv-200", "custom_fields": {}},
        ]

        vlans = client.get_vlans(site_id=12)

        client.api.ipam.vlans.filter.assert_called_once_with(site_id=12)
        assert [v.tag for v in vlans] == [100, 200]
        assert vlans[0].infra_class == "prod"

    def test_get_prefixes(self, client):
        client.api.ipam.prefixes.filter.return_value = [
            {
                "id": 9,
                "prefix": "10.0.0.0/24",
                "vlan": {"id": 1, "vid": 100, "name": "srv-100"},
                "custom_fields": {"infra": "dev"},
            },
            {"id": 10, "prefix": "10.0.1.0/24", "vlan": None, "custom_fields": {}},
        ]

        prefixes = client.get_prefixes(site_id=12)

        client.api.ipam.prefixes.filter.assert_called_once_with(site_id=12)
        assert prefixes[0].vlan.tag == 100
        assert prefixes[1].vlan is None

    def test_empty_site(self, client):
        client.api.ipam.vlans.filter.return_value = []
        assert client.get_vlans(site_id=12) == []

    def test_request_error(self, client):
        req = MagicMock()
        req.status_code = 403
        req.text = "Invalid token"
        client.api.ipam.vlans.filter.side_effect = pynetbox.RequestError(req)

        with pytest.raises(NetBoxAPIError) as exc_info:
            client.get_vlans(site_id=12)

        assert exc_info.value.status_code == 403
        assert exc_info.value.endpoint == "/api/ipam/vlans/"
        assert "Invalid token" in exc_info.value.message

    def test_transport_error(self, client):
        client.api.ipam.prefixes.filter.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetBoxAPIError) as exc_info:
            client.get_prefixes(site_id=12)

        assert exc_info.value.status_code is None
        assert exc_info.value.url == "https://netbox.example.com"
