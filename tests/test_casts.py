"""
Unit tests for custom model field resolution.
"""
import typing
import unittest
from typing import List, Optional

from django.db import models

from ts_auto_generator.domain.diagnostics import Diagnostics, Stage
from ts_auto_generator.domain.locator import ValueObjectLocator
from ts_auto_generator.domain.type_mapping import build_type_mapper
from ts_auto_generator.extraction.casts import (
    CastTypeResolver,
    is_list_annotation,
    item_type_from_docstring,
    unwrap_optional,
)
from ts_auto_generator.extraction.data_objects import DataObjectAnalyzer

from tests.blog_app.data_objects import AddressData
from tests.blog_app.fields import (
    AddressField,
    AddressListField,
    LabelListField,
    MetadataField,
    StructuredDataField,
    UntypedListField,
)
from tests.conftest import VALUE_OBJECT_MODULE


class SlugTextField(models.CharField):
    def from_db_value(self, value, expression, connection) -> str:
        return value


class BrokenHintField(models.JSONField):
    def from_db_value(self, value, expression, connection) -> "NoSuchType":
        return value


class UnknownItemListField(models.JSONField):
    def from_db_value(self, value, expression, connection) -> list:
        """
        :rtype: list[NoSuchData]
        """
        return value


class TestHelpers(unittest.TestCase):
    """Test cases for the annotation and docstring helpers."""

    def test_item_type_from_docstring(self):
        self.assertEqual(item_type_from_docstring(":rtype: list[AddressData]"), "AddressData")
        self.assertEqual(
            item_type_from_docstring("Decode.\n\n:returns: List[app.data.AddressData]"),
            "app.data.AddressData",
        )
        self.assertEqual(item_type_from_docstring(":return: AddressData[]"), "AddressData")
        self.assertEqual(item_type_from_docstring(":rtype: array<AddressData>"), "AddressData")

    def test_item_type_missing(self):
        self.assertIsNone(item_type_from_docstring(":rtype: dict"))
        self.assertIsNone(item_type_from_docstring(None))

    def test_unwrap_optional(self):
        self.assertIs(unwrap_optional(Optional[AddressData]), AddressData)
        self.assertIs(unwrap_optional(AddressData), AddressData)
        self.assertEqual(unwrap_optional(typing.Union[int, str, None]), typing.Union[int, str, None])

    def test_is_list_annotation(self):
        self.assertTrue(is_list_annotation(list))
        self.assertTrue(is_list_annotation(List[AddressData]))
        self.assertTrue(is_list_annotation(list[int]))
        self.assertFalse(is_list_annotation(dict))


class TestCastTypeResolver(unittest.TestCase):
    """Test cases for CastTypeResolver."""

    def setUp(self):
        self.diagnostics = Diagnostics()
        self.locator = ValueObjectLocator([])
        analyzer = DataObjectAnalyzer(build_type_mapper(self.locator), self.locator, self.diagnostics)
        self.resolver = CastTypeResolver(analyzer, self.locator, self.diagnostics)

    def test_optional_value_object(self):
        descriptor = self.resolver.resolve(AddressField, "address")

        self.assertEqual(descriptor.name, "address")
        self.assertEqual(descriptor.declared_type, "AddressData")
        self.assertEqual(descriptor.value_object_type, f"{VALUE_OBJECT_MODULE}.AddressData")
        self.assertTrue(descriptor.nullable)
        self.assertFalse(descriptor.is_array)
        self.assertEqual(
            [prop.name for prop in descriptor.properties],
            ["street", "city", "state", "zip_code", "geo"],
        )

    def test_list_item_from_docstring(self):
        descriptor = self.resolver.resolve(AddressListField, "shipping_addresses")

        self.assertEqual(descriptor.declared_type, "AddressData[]")
        self.assertEqual(descriptor.canonical_name, "AddressData")
        self.assertTrue(descriptor.is_array)
        self.assertFalse(descriptor.nullable)

    def test_pydantic_value_object(self):
        descriptor = self.resolver.resolve(MetadataField, "metadata")

        self.assertEqual(descriptor.declared_type, "MetadataData")
        self.assertTrue(descriptor.nullable)

    def test_non_optional_value_object(self):
        descriptor = self.resolver.resolve(StructuredDataField, "structured_data")

        self.assertEqual(descriptor.declared_type, "JsonLdData")
        self.assertFalse(descriptor.nullable)

    def test_resolved_classes_are_remembered(self):
        self.resolver.resolve(AddressField, "address")
        self.assertIs(self.locator.locate("AddressData"), AddressData)

    def test_plain_fields_are_not_value_objects(self):
        self.assertIsNone(self.resolver.resolve(models.CharField, "title"))
        self.assertIsNone(self.resolver.resolve(models.JSONField, "payload"))
        self.assertIsNone(self.resolver.resolve(SlugTextField, "slug"))
        self.assertEqual(self.diagnostics.items, [])

    def test_non_field_classes(self):
        self.assertIsNone(self.resolver.resolve(AddressData, "address"))
        self.assertIsNone(self.resolver.resolve("AddressField", "address"))

    def test_list_of_scalars_is_skipped(self):
        self.assertIsNone(self.resolver.resolve(LabelListField, "labels"))
        self.assertEqual(self.diagnostics.subjects(Stage.CAST), ["LabelListField.labels"])

    def test_list_without_item_type_is_skipped(self):
        self.assertIsNone(self.resolver.resolve(UntypedListField, "items"))
        self.assertIn("without an item type", self.diagnostics.items[0].reason)

    def test_unresolvable_item_type_is_skipped(self):
        self.assertIsNone(self.resolver.resolve(UnknownItemListField, "items"))
        self.assertIn("NoSuchData", self.diagnostics.items[0].reason)

    def test_unreadable_annotation_is_skipped(self):
        self.assertIsNone(self.resolver.resolve(BrokenHintField, "payload"))
        self.assertEqual(self.diagnostics.subjects(Stage.CAST), ["BrokenHintField.payload"])


if __name__ == "__main__":
    unittest.main()
