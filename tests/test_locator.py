"""
Unit tests for value-object lookup.
"""
import unittest
from unittest.mock import patch

from ts_auto_generator.domain.capability import DataObject, is_pydantic_model, is_value_object
from ts_auto_generator.domain.locator import ValueObjectLocator

from tests.blog_app.data_objects import AddressData, GeoPointData, MetadataData
from tests.conftest import VALUE_OBJECT_MODULE


class TestCapability(unittest.TestCase):
    """Test cases for the value-object capability check."""

    def test_data_object_subclasses(self):
        self.assertTrue(is_value_object(AddressData))
        self.assertFalse(is_value_object(DataObject))

    def test_pydantic_models(self):
        self.assertTrue(is_value_object(MetadataData))
        self.assertTrue(is_pydantic_model(MetadataData))
        self.assertFalse(is_pydantic_model(AddressData))

    def test_registered_virtual_subclass(self):
        class LegacyPoint:
            pass

        DataObject.register(LegacyPoint)
        self.assertTrue(is_value_object(LegacyPoint))

    def test_non_value_objects(self):
        self.assertFalse(is_value_object(dict))
        self.assertFalse(is_value_object("AddressData"))
        self.assertFalse(is_value_object(AddressData("Main St", "Springfield")))


class TestValueObjectLocator(unittest.TestCase):
    """Test cases for ValueObjectLocator."""

    def test_short_name_in_configured_module(self):
        locator = ValueObjectLocator([VALUE_OBJECT_MODULE])
        self.assertIs(locator.locate("AddressData"), AddressData)

    def test_dotted_path(self):
        locator = ValueObjectLocator([])
        self.assertIs(locator.locate(f"{VALUE_OBJECT_MODULE}.GeoPointData"), GeoPointData)

    def test_context_module(self):
        locator = ValueObjectLocator([])
        self.assertIsNone(locator.locate("AddressData"))
        self.assertIs(locator.locate("AddressData", context_module="tests.blog_app.fields"), AddressData)

    def test_remembered_classes_resolve_without_modules(self):
        locator = ValueObjectLocator([])
        identifier = locator.remember(GeoPointData)

        self.assertEqual(identifier, f"{VALUE_OBJECT_MODULE}.GeoPointData")
        self.assertIs(locator.locate("GeoPointData"), GeoPointData)
        self.assertIs(locator.locate(identifier), GeoPointData)

    def test_non_value_objects_are_not_located(self):
        locator = ValueObjectLocator(["tests.blog_app.fields"])
        self.assertIsNone(locator.locate("AddressField"))
        self.assertIsNone(locator.locate("list[int]"))
        self.assertIsNone(locator.locate(""))

    def test_resolve_identifier(self):
        locator = ValueObjectLocator([VALUE_OBJECT_MODULE])
        self.assertEqual(
            locator.resolve_identifier("MetadataData"), f"{VALUE_OBJECT_MODULE}.MetadataData"
        )
        self.assertIsNone(locator.resolve_identifier("Missing"))

    def test_missing_modules_are_imported_once(self):
        locator = ValueObjectLocator(["no_such_value_objects"])
        with patch(
            "ts_auto_generator.domain.locator.importlib.import_module",
            side_effect=ImportError("No module named 'no_such_value_objects'"),
        ) as mock_import:
            self.assertIsNone(locator.locate("AddressData"))
            self.assertIsNone(locator.locate("GeoPointData"))

        mock_import.assert_called_once_with("no_such_value_objects")


if __name__ == "__main__":
    unittest.main()
