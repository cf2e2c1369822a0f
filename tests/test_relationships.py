"""
Unit tests for relation resolution against the fixture app.
"""
import unittest
from unittest.mock import Mock

from ts_auto_generator.domain.diagnostics import Diagnostics, Stage
from ts_auto_generator.domain.models import PivotInfo
from ts_auto_generator.exceptions import RelationshipResolutionError
from ts_auto_generator.extraction.relationships import (
    RelationshipResolver,
    is_generic_relation,
    is_reverse_relation,
)

from tests.blog_app.models import Attachment, Post, PostTag, Profile, Tag, User


MODELS = "tests.blog_app.models"
POST_TAG_PIVOT = PivotInfo(
    accessor="pivot",
    class_name=f"{MODELS}.PostTag",
    columns=("post_id", "tag_id", "position", "added_at"),
)


def relations_by_name(relations):
    return {relation.method_name: relation for relation in relations}


class TestRelationHelpers(unittest.TestCase):
    """Test cases for the relation type checks."""

    def test_is_generic_relation(self):
        self.assertTrue(is_generic_relation(Post._meta.get_field("attachments")))
        self.assertFalse(is_generic_relation(Post._meta.get_field("author")))

    def test_is_reverse_relation(self):
        self.assertTrue(is_reverse_relation(User._meta.get_field("posts")))
        self.assertFalse(is_reverse_relation(Post._meta.get_field("author")))


class TestRelationshipResolver(unittest.TestCase):
    """Test cases for RelationshipResolver."""

    def setUp(self):
        self.diagnostics = Diagnostics()
        self.resolver = RelationshipResolver(diagnostics=self.diagnostics)

    def test_forward_one_to_one(self):
        relations = self.resolver.resolve(Profile)

        self.assertEqual(len(relations), 1)
        self.assertEqual(relations[0].method_name, "user")
        self.assertEqual(relations[0].kind, "BelongsTo")
        self.assertEqual(relations[0].related_model, f"{MODELS}.User")
        self.assertIsNone(relations[0].pivot)

    def test_reverse_relations(self):
        relations = self.resolver.resolve(User)

        self.assertEqual([r.method_name for r in relations], ["posts", "comments", "profile"])
        by_name = relations_by_name(relations)
        self.assertEqual(by_name["posts"].kind, "HasMany")
        self.assertEqual(by_name["posts"].related_model, f"{MODELS}.Post")
        self.assertEqual(by_name["comments"].kind, "HasMany")
        self.assertEqual(by_name["profile"].kind, "HasOne")
        self.assertEqual(by_name["profile"].related_model, f"{MODELS}.Profile")

    def test_forward_relations_of_post(self):
        by_name = relations_by_name(self.resolver.resolve(Post))

        self.assertEqual(set(by_name), {"comment_set", "author", "tags", "attachments"})
        self.assertEqual(by_name["author"].kind, "BelongsTo")
        self.assertEqual(by_name["tags"].kind, "BelongsToMany")
        self.assertEqual(by_name["tags"].related_model, f"{MODELS}.Tag")
        self.assertEqual(by_name["comment_set"].kind, "HasMany")
        self.assertEqual(by_name["comment_set"].related_model, f"{MODELS}.Comment")

    def test_generic_relation(self):
        attachments = relations_by_name(self.resolver.resolve(Post))["attachments"]

        self.assertEqual(attachments.kind, "MorphMany")
        self.assertEqual(attachments.related_model, f"{MODELS}.Attachment")
        self.assertIsNone(attachments.pivot)

    def test_pivot_on_both_sides(self):
        tags = relations_by_name(self.resolver.resolve(Post))["tags"]
        posts = relations_by_name(self.resolver.resolve(Tag))["posts"]

        self.assertEqual(tags.pivot, POST_TAG_PIVOT)
        self.assertEqual(posts.kind, "BelongsToMany")
        self.assertEqual(posts.pivot, POST_TAG_PIVOT)

    def test_hidden_reverse_relations_are_ignored(self):
        names = [r.method_name for r in self.resolver.resolve(Tag)]
        self.assertEqual(names, ["posts"])

    def test_through_model_relations(self):
        by_name = relations_by_name(self.resolver.resolve(PostTag))

        self.assertEqual(set(by_name), {"post", "tag"})
        self.assertEqual(by_name["post"].kind, "BelongsTo")

    def test_plural_reverse_accessor_style(self):
        resolver = RelationshipResolver(reverse_accessor_style="plural")
        names = {r.method_name for r in resolver.resolve(Post)}

        self.assertIn("comments", names)
        self.assertNotIn("comment_set", names)

    def test_plural_style_keeps_related_names(self):
        resolver = RelationshipResolver(reverse_accessor_style="plural")
        names = [r.method_name for r in resolver.resolve(User)]
        self.assertEqual(names, ["posts", "comments", "profile"])

    def test_generic_foreign_key_is_skipped(self):
        by_name = relations_by_name(self.resolver.resolve(Attachment))

        self.assertEqual(set(by_name), {"content_type"})
        self.assertEqual(
            by_name["content_type"].related_model, "django.contrib.contenttypes.models.ContentType"
        )
        self.assertEqual(self.diagnostics.subjects(Stage.RELATIONSHIP), ["Attachment.content_object"])

    def test_auto_created_through_has_no_pivot(self):
        through = Mock()
        through._meta.auto_created = True
        self.assertIsNone(self.resolver._pivot(Post, "tags", through))

    def test_unresolved_through_raises(self):
        with self.assertRaises(RelationshipResolutionError):
            self.resolver._pivot(Post, "tags", "blog_app.MissingThrough")

    def test_unresolved_lazy_reference_raises(self):
        with self.assertRaises(RelationshipResolutionError) as cm:
            self.resolver._check_resolved(Post, "editor", "blog_app.Editor")
        self.assertEqual(cm.exception.context["relation"], "editor")


if __name__ == "__main__":
    unittest.main()
