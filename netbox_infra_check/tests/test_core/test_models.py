"""
Тесты моделей данных NAM и NetBox.

Проверяет разбор JSON через from_dict() и поведение при
отсутствующих или некорректных полях.
"""

import pytest

from netbox_infra_check.core.models import (
    DocumentedPrefix,
    DocumentedVLAN,
    OverlaySegment,
    read_infra,
)


@pytest.mark.unit
class TestOverlaySegment:
    """Тесты VxLAN из NAM."""

    def test_from_dict(self):
        segment = OverlaySegment.from_dict({
            "id": 100,
            "name": "srv-100",
            "containers": [{"id": 7, "name": "DC1"}, {"id": 8, "name": "DC2"}],
        })

        assert segment.id == 100
        assert segment.name == "srv-100"
        assert [g.name for g in segment.groups] == ["DC1", "DC2"]
        assert segment.primary_group == "DC1"

    def test_missing_containers(self):
        segment = OverlaySegment.from_dict({"id": 1, "name": "a"})
        assert segment.groups == ()
        assert segment.primary_group == ""

    def test_null_fields(self):
        segment = OverlaySegment.from_dict({"id": None, "name": None, "containers": None})
        assert segment.id == 0
        assert segment.name == ""
        assert segment.groups == ()

    def test_string_id_converted(self):
        assert OverlaySegment.from_dict({"id": "42", "name": "a"}).id == 42

    def test_hashable(self):
        segment = OverlaySegment.from_dict({"id": 1, "name": "a", "containers": [{"name": "DC1"}]})
        assert segment in {segment}


@pytest.mark.unit
class TestDocumentedVLAN:
    """Тесты VLAN из NetBox."""

    def test_from_dict(self):
        vlan = DocumentedVLAN.from_dict({
            "id": 55,
            "vid": 100,
            "name": "srv-100",
            "custom_fields": {"infra": "prod", "owner": "net"},
        })

        assert vlan.id == 55
        assert vlan.tag == 100
        assert vlan.name == "srv-100"
        assert vlan.infra_class == "prod"
        assert vlan.custom_fields["owner"] == "net"

    def test_null_custom_fields(self):
        vlan = DocumentedVLAN.from_dict({"id": 1, "vid": 2, "name": "a", "custom_fields": None})
        assert vlan.infra_class == ""
        assert dict(vlan.custom_fields) == {}

    def test_custom_fields_read_only(self):
        vlan = DocumentedVLAN(id=1, tag=2, name="a", custom_fields={"infra": "prod"})
        with pytest.raises(TypeError):
            vlan.custom_fields["infra"] = "dev"

    def test_custom_fields_copied(self):
        """Изменение исходного словаря не влияет на модель."""
        source = {"infra": "prod"}
        vlan = DocumentedVLAN(id=1, tag=2, name="a", custom_fields=source)
        source["infra"] = "dev"
        assert vlan.infra_class == "prod"

    def test_hashable(self):
        vlan = DocumentedVLAN(id=1, tag=2, name="a", custom_fields={"infra": "prod"})
        assert hash(vlan) == hash(DocumentedVLAN(id=1, tag=2, name="a"))


@pytest.mark.unit
class TestDocumentedPrefix:
    """Тесты префикса из NetBox."""

    def test_from_dict_with_vlan(self):
        prefix = DocumentedPrefix.from_dict({
            "id": 9,
            "prefix": "10.0.0.0/24",
            "vlan": {"id": 55, "vid": 500, "name": "srv-500"},
            "custom_fields": {"infra": "dev"},
        })

        assert prefix.prefix == "10.0.0.0/24"
        assert prefix.vlan.tag == 500
        assert prefix.vlan.name == "srv-500"
        assert prefix.infra_class == "dev"

    def test_from_dict_null_vlan(self):
        prefix = DocumentedPrefix.from_dict({"id": 9, "prefix": "10.0.0.0/24", "vlan": None})
        assert prefix.vlan is None
        assert prefix.infra_class == ""


@pytest.mark.unit
class TestReadInfra:
    """Тесты чтения custom field infra."""

    @pytest.mark.parametrize("custom_fields,expected", [
        ({"infra": "prod"}, "prod"),
        ({"infra": None}, ""),
        ({"infra": 42}, ""),
        ({"infra": ["prod"]}, ""),
        ({}, ""),
        (None, ""),
    ])
    def test_read_infra(self, custom_fields, expected):
        assert read_infra(custom_fields) == expected
