"""
Unit tests for the schema descriptors, emission state, diagnostics and errors.
"""
import logging
import unittest

from ts_auto_generator.domain.diagnostics import Diagnostics, Stage
from ts_auto_generator.domain.models import (
    EmissionState,
    ImportDescriptor,
    ModelSchema,
    PivotInfo,
    RelationDescriptor,
    RelationInfo,
    ScalarDescriptor,
    ValueObjectDescriptor,
    ValueObjectField,
    schema_to_dict,
)
from ts_auto_generator.exceptions import (
    CastResolutionError,
    ConfigurationError,
    ModelDiscoveryError,
    OutputWriteError,
    TSAutoGeneratorError,
)


class TestModelSchema(unittest.TestCase):
    """Test cases for ModelSchema field bookkeeping."""

    def setUp(self):
        self.schema = ModelSchema(name="Post", qualified_identifier="app.models.Post")

    def test_first_writer_wins(self):
        self.assertTrue(self.schema.add_field(ScalarDescriptor("title", "CharField")))
        self.assertFalse(self.schema.add_field(ScalarDescriptor("title", "string", literal=True)))

        self.assertEqual(self.schema.field_names, ["title"])
        self.assertEqual(self.schema.get_field("title").declared_type, "CharField")

    def test_get_missing_field(self):
        self.assertIsNone(self.schema.get_field("missing"))
        self.assertFalse(self.schema.has_field("missing"))

    def test_to_dict_preserves_order(self):
        self.schema.add_field(ScalarDescriptor("id", "integer"))
        self.schema.add_field(
            RelationDescriptor(
                "tags",
                "BelongsToMany",
                "app.models.Tag",
                pivot=PivotInfo("pivot", "app.models.PostTag", ("post_id", "tag_id")),
            )
        )

        data = schema_to_dict({"Post": self.schema})

        self.assertEqual(data["Post"]["class"], "app.models.Post")
        self.assertEqual([f["name"] for f in data["Post"]["fields"]], ["id", "tags"])
        self.assertEqual(
            data["Post"]["fields"][1]["pivot"],
            {"accessor": "pivot", "class": "app.models.PostTag", "columns": ["post_id", "tag_id"]},
        )


class TestDescriptors(unittest.TestCase):
    """Test cases for descriptor helpers."""

    def test_relation_is_always_nullable(self):
        descriptor = RelationDescriptor("author", "BelongsTo", "app.models.User")
        self.assertTrue(descriptor.nullable)

    def test_relation_info_collection(self):
        self.assertTrue(RelationInfo("posts", "HasMany", "app.Post").is_collection)
        self.assertFalse(RelationInfo("author", "BelongsTo", "app.User").is_collection)

    def test_value_object_canonical_name(self):
        descriptor = ValueObjectDescriptor(
            "addresses", "AddressData[]", "app.data_objects.AddressData", is_array=True
        )
        self.assertEqual(descriptor.canonical_name, "AddressData")

    def test_value_object_field_optional(self):
        self.assertTrue(ValueObjectField("state", "string", nullable=True).is_optional)
        self.assertTrue(ValueObjectField("zip", "string", has_default=True).is_optional)
        self.assertFalse(ValueObjectField("street", "string").is_optional)

    def test_import_with_alias(self):
        descriptor = ImportDescriptor("media", "@/types/media|Media")
        self.assertEqual(descriptor.module_path, "@/types/media")
        self.assertEqual(descriptor.type_name, "Media")
        self.assertFalse(descriptor.nullable)

    def test_import_without_alias_uses_basename(self):
        descriptor = ImportDescriptor("author", "@/types/Author")
        self.assertEqual(descriptor.module_path, "@/types/Author")
        self.assertEqual(descriptor.type_name, "Author")

    def test_import_array_marker(self):
        descriptor = ImportDescriptor("tags", "@/types/tags|Tag[]")
        self.assertEqual(descriptor.module_path, "@/types/tags")
        self.assertEqual(descriptor.type_name, "Tag[]")
        self.assertEqual(descriptor.import_name, "Tag")


class TestEmissionState(unittest.TestCase):
    """Test cases for EmissionState."""

    def test_mark_processed_once(self):
        state = EmissionState()
        self.assertTrue(state.mark_processed("IUser"))
        self.assertFalse(state.mark_processed("IUser"))

    def test_enqueue_skips_processed_and_pending(self):
        state = EmissionState()
        state.mark_processed("IAddressData")

        self.assertFalse(state.enqueue("app.AddressData", "IAddressData"))
        self.assertTrue(state.enqueue("app.GeoPointData", "IGeoPointData"))
        self.assertFalse(state.enqueue("app.GeoPointData", "IGeoPointData"))
        self.assertEqual(list(state.pending_value_objects), ["app.GeoPointData"])


class TestDiagnostics(unittest.TestCase):
    """Test cases for the skip collector."""

    def test_empty_summary(self):
        self.assertEqual(Diagnostics().summary(), "0 skipped")

    def test_skip_records_and_logs(self):
        diagnostics = Diagnostics()
        with self.assertLogs("ts_auto_generator.domain.diagnostics", level="WARNING") as cm:
            diagnostics.skip(Stage.DISCOVERY, "app.Ghost", "cannot import", level=logging.WARNING)
        diagnostics.skip(Stage.CAST, "LabelField.labels", "not a value object")
        diagnostics.skip(Stage.CAST, "TagField.tags", "no item type")

        self.assertIn("[discovery] app.Ghost: cannot import", cm.output[0])
        self.assertEqual(diagnostics.subjects(Stage.CAST), ["LabelField.labels", "TagField.tags"])
        self.assertEqual(len(diagnostics.by_stage()), 3)
        self.assertEqual(diagnostics.counts(), {"discovery": 1, "cast": 2})
        self.assertEqual(diagnostics.summary(), "3 skipped (cast: 2, discovery: 1)")


class TestExceptions(unittest.TestCase):
    """Test cases for the exception hierarchy."""

    def test_str_includes_code_and_context(self):
        error = CastResolutionError("bad accessor", field_class="app.fields.X", field="x")
        text = str(error)

        self.assertIsInstance(error, TSAutoGeneratorError)
        self.assertEqual(error.error_code, "CAST_ERROR")
        self.assertIn("bad accessor", text)
        self.assertIn("Error Code: CAST_ERROR", text)
        self.assertIn("field_class: app.fields.X", text)

    def test_configuration_error_default_suggestions(self):
        error = ConfigurationError("broken", config_file="gen.yaml")
        self.assertEqual(error.context["config_file"], "gen.yaml")
        self.assertTrue(error.suggestions)

    def test_output_error_path(self):
        error = OutputWriteError("cannot write", path="/tmp/x.ts")
        self.assertEqual(error.context["path"], "/tmp/x.ts")
        self.assertEqual(error.error_code, "OUTPUT_ERROR")

    def test_unset_details_are_left_out(self):
        error = ModelDiscoveryError("missing", model="shop.models.Order", app_label=None)
        self.assertEqual(error.context, {"model": "shop.models.Order"})

    def test_explicit_suggestions_replace_defaults(self):
        error = ConfigurationError("broken", suggestions=["Set settings_module"])
        self.assertEqual(error.suggestions, ["Set settings_module"])
        self.assertEqual(error.error_code, "CONFIG_ERROR")


if __name__ == "__main__":
    unittest.main()
