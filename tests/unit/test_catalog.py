"""Tests for the property catalog."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from resplane.core.errors import CatalogError
from resplane.specs.catalog import PropertyCatalog, ResourceCatalogSpec, ResourceType


class TestPackagedCatalog:
    """The catalog shipped with the package."""

    def test_every_resource_type_present(self, catalog: PropertyCatalog) -> None:
        assert set(catalog.resource_types()) == set(ResourceType)

    def test_cluster_entry(self, catalog: PropertyCatalog) -> None:
        assert "Clusters/cluster_name" in catalog.get_property_ids(ResourceType.CLUSTER)
        assert catalog.get_key_property_ids(ResourceType.CLUSTER) == {
            ResourceType.CLUSTER: "Clusters/cluster_name"
        }
        assert catalog.get_pk_property_ids(ResourceType.CLUSTER) == {"Clusters/cluster_id"}

    def test_component_keys(self, catalog: PropertyCatalog) -> None:
        keys = catalog.get_key_property_ids(ResourceType.COMPONENT)
        assert keys[ResourceType.SERVICE] == "ServiceComponentInfo/service_name"
        assert len(catalog.get_pk_property_ids(ResourceType.COMPONENT)) == 3

    @pytest.mark.parametrize("resource_type", list(ResourceType))
    def test_keys_are_properties(self, catalog: PropertyCatalog, resource_type: ResourceType) -> None:
        ids = catalog.get_property_ids(resource_type)
        assert set(catalog.get_key_property_ids(resource_type).values()) <= ids
        assert catalog.get_pk_property_ids(resource_type) <= ids

    def test_returned_key_map_is_a_copy(self, catalog: PropertyCatalog) -> None:
        keys = catalog.get_key_property_ids(ResourceType.CLUSTER)
        keys.clear()
        assert catalog.get_key_property_ids(ResourceType.CLUSTER)


class TestCatalogEntries:
    """ResourceCatalogSpec validation."""

    def test_key_outside_property_set_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResourceCatalogSpec(
                property_ids=frozenset({"a/b"}),
                key_property_ids={ResourceType.CLUSTER: "a/c"},
            )

    def test_pk_outside_property_set_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResourceCatalogSpec(property_ids=frozenset({"a/b"}), pk_property_ids=frozenset({"x"}))

    def test_entries_are_frozen(self) -> None:
        entry = ResourceCatalogSpec(property_ids=frozenset({"a/b"}))
        with pytest.raises(ValidationError):
            entry.property_ids = frozenset()  # type: ignore[misc]


class TestCatalogLoading:
    """Loading catalogs from dicts and files."""

    def test_from_dict(self) -> None:
        catalog = PropertyCatalog.from_dict(
            {"Cluster": {"property_ids": ["Clusters/cluster_name"], "key_property_ids": {}}}
        )
        assert catalog.resource_types() == [ResourceType.CLUSTER]

    def test_unknown_type_in_data(self) -> None:
        with pytest.raises(CatalogError, match="Unknown resource type"):
            PropertyCatalog.from_dict({"Host": {"property_ids": []}})

    def test_invalid_entry(self) -> None:
        with pytest.raises(CatalogError, match="Invalid catalog entry"):
            PropertyCatalog.from_dict(
                {"Cluster": {"property_ids": ["a"], "pk_property_ids": ["b"]}}
            )

    def test_unknown_type_lookup(self) -> None:
        catalog = PropertyCatalog.from_dict({"Cluster": {"property_ids": ["a"]}})
        with pytest.raises(CatalogError):
            catalog.get_property_ids(ResourceType.SERVICE)

    def test_load_file(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"Service": {"property_ids": ["ServiceInfo/state"]}}))
        catalog = PropertyCatalog.load(path)
        assert catalog.get_property_ids(ResourceType.SERVICE) == {"ServiceInfo/state"}

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogError):
            PropertyCatalog.load(tmp_path / "missing.json")

    def test_load_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError):
            PropertyCatalog.load(path)

    def test_load_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text("[]")
        with pytest.raises(CatalogError, match="JSON object"):
            PropertyCatalog.load(path)
