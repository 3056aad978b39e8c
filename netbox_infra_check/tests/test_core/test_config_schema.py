"""
Тесты Pydantic схем конфигурации.
"""

import pytest

from netbox_infra_check.core.config_schema import (
    AppConfig,
    CheckConfig,
    NetBoxConfig,
    validate_config,
)
from netbox_infra_check.core.exceptions import ConfigError


@pytest.mark.unit
class TestDefaults:
    """Значения по умолчанию."""

    def test_empty_config(self):
        config = validate_config({})

        assert config.netbox.url == ""
        assert config.netbox.timeout == 30
        assert config.checker.old_site_marker == "nam-01"
        assert config.checker.new_site_marker == "nam-03"
        assert config.runner.on_fetch_error == "abort"
        assert config.runner.on_ticket_error == "abort"
        assert config.slack.max_lines == 50
        assert config.esm.display_label_prefix == "VDC Infra Check"
        assert config.group_label == "datasenter"
        assert config.checks == []


@pytest.mark.unit
class TestUrls:
    """Валидация URL."""

    def test_trailing_slash_removed(self):
        assert NetBoxConfig(url="https://netbox.example.com/").url == "https://netbox.example.com"

    def test_invalid_scheme(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"nam": {"url": "nam.example.com"}}, config_file="config.yaml")

        assert exc_info.value.key == "nam.url"
        assert exc_info.value.config_file == "config.yaml"
        assert "NAM" in str(exc_info.value)


@pytest.mark.unit
class TestChecks:
    """Валидация списка проверок."""

    def test_group_key(self):
        check = CheckConfig.model_validate({"netbox_site_id": 1, "infra": "prod", "group": "VDC1"})
        assert check.group == "VDC1"

    def test_dc_name_alias(self, app_config):
        """Ключ dc_name (старый формат) принимается как group."""
        assert app_config.checks[0].group == "DC1"
        assert app_config.checks[0].netbox_site_id == 12

    def test_missing_infra(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"checks": [{"netbox_site_id": 1, "group": "DC1"}]})
        assert exc_info.value.key == "checks.0.infra"

    @pytest.mark.parametrize("site_id", [0, -1])
    def test_site_id_positive(self, site_id):
        with pytest.raises(ConfigError):
            validate_config({"checks": [{"netbox_site_id": site_id, "infra": "p", "group": "g"}]})

    def test_empty_group(self):
        with pytest.raises(ConfigError):
            validate_config({"checks": [{"netbox_site_id": 1, "infra": "p", "group": ""}]})


@pytest.mark.unit
class TestRunnerPolicy:
    """Политика обработки ошибок."""

    def test_skip(self):
        config = AppConfig.model_validate({"runner": {"on_fetch_error": "skip"}})
        assert config.runner.on_fetch_error == "skip"

    def test_unknown_policy(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"runner": {"on_ticket_error": "ignore"}})
        assert exc_info.value.key == "runner.on_ticket_error"

    def test_logging_rotation(self):
        with pytest.raises(ConfigError):
            validate_config({"logging": {"rotation": "weekly"}})


@pytest.mark.unit
class TestVerifySSL:
    """verify_ssl: bool, "true"/"false" или путь к CA bundle."""

    def test_bool(self):
        assert validate_config({"netbox": {"verify_ssl": False}}).netbox.verify_ssl is False

    @pytest.mark.parametrize("value,expected", [("false", False), ("True", True)])
    def test_string_bool(self, value, expected):
        assert validate_config({"nam": {"verify_ssl": value}}).nam.verify_ssl is expected

    def test_ca_bundle_path(self):
        config = validate_config({
            "netbox": {"verify_ssl": "/etc/ssl/certs/corp-ca.pem"},
            "esm": {"verify_ssl": "/etc/ssl/certs/corp-ca.pem"},
            "slack": {"verify_ssl": "/etc/ssl/certs/corp-ca.pem"},
        })

        assert config.netbox.verify_ssl == "/etc/ssl/certs/corp-ca.pem"
        assert config.esm.verify_ssl == "/etc/ssl/certs/corp-ca.pem"
        assert config.slack.verify_ssl == "/etc/ssl/certs/corp-ca.pem"

    def test_empty_string(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"nam": {"verify_ssl": "  "}})
        assert exc_info.value.key == "nam.verify_ssl"
