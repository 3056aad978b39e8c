"""
Тесты иерархии исключений.
"""

import pytest

from netbox_infra_check.core.exceptions import (
    APIError,
    ConfigError,
    InfraCheckError,
    NAMAPIError,
    NetBoxAPIError,
    SlackError,
    TicketError,
    format_error_for_log,
)


@pytest.mark.unit
class TestExceptions:
    """Тесты исключений."""

    @pytest.mark.parametrize("cls", [NetBoxAPIError, NAMAPIError, TicketError, SlackError])
    def test_api_errors_hierarchy(self, cls):
        error = cls("boom")
        assert isinstance(error, APIError)
        assert isinstance(error, InfraCheckError)

    def test_config_error_is_not_api_error(self):
        assert not isinstance(ConfigError("bad"), APIError)

    def test_api_error_details(self):
        error = NAMAPIError(
            "Unexpected status", url="https://nam.example.com", status_code=503,
            endpoint="api/ipam/vxlans/",
        )

        assert error.to_dict() == {
            "error_type": "NAMAPIError",
            "message": "Unexpected status",
            "details": {
                "url": "https://nam.example.com",
                "status_code": 503,
                "endpoint": "api/ipam/vxlans/",
            },
        }
        assert str(error).startswith("Unexpected status (url=")

    def test_str_without_details(self):
        assert str(InfraCheckError("plain")) == "plain"

    def test_config_error_key(self):
        error = ConfigError("Missing", config_file="config.yaml", key="nam.url")
        assert error.details == {"config_file": "config.yaml", "key": "nam.url"}

    def test_format_error_for_log(self):
        assert format_error_for_log(TicketError("denied")) == "denied"
        assert format_error_for_log(ValueError("x")) == "ValueError: x"
