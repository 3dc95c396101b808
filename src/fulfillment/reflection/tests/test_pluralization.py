"""
Unit tests for PluralizationService.
"""

from unittest import TestCase

from fulfillment.reflection.operations.pluralization import PluralizationService


class PluralizationServiceTests(TestCase):
    """Tests for the PluralizationService class."""

    def setUp(self):
        self.service = PluralizationService()

    def test_pluralize_resource_names(self):
        """Test pluralization of the names used by the fulfillment API."""
        test_cases = {
            "cluster": "clusters",
            "clusterorder": "clusterorders",
            "clustertemplate": "clustertemplates",
            "hostclass": "hostclasses",
            "class": "classes",
        }

        for singular, expected_plural in test_cases.items():
            with self.subTest(word=singular):
                self.assertEqual(self.service.pluralize(singular), expected_plural)

    def test_pluralize_suffix_rules(self):
        """Test the regular English suffix rules."""
        test_cases = {
            "box": "boxes",
            "batch": "batches",
            "mesh": "meshes",
            "policy": "policies",
            "gateway": "gateways",
            "key": "keys",
            "shelf": "shelves",
            "knife": "knives",
            "node": "nodes",
        }

        for singular, expected_plural in test_cases.items():
            with self.subTest(word=singular):
                self.assertEqual(self.service.pluralize(singular), expected_plural)

    def test_pluralize_irregular_endings(self):
        """Test that irregular words are matched at the end of compound names."""
        self.assertEqual(self.service.pluralize("person"), "people")
        self.assertEqual(self.service.pluralize("salesperson"), "salespeople")
        self.assertEqual(self.service.pluralize("index"), "indices")
        self.assertEqual(self.service.pluralize("child"), "children")

    def test_pluralize_uncountable(self):
        """Test that uncountable words are returned unchanged."""
        for word in ("metadata", "equipment", "series", "clusterinformation"):
            with self.subTest(word=word):
                self.assertEqual(self.service.pluralize(word), word)

    def test_case_insensitivity(self):
        """Test that the result is always in lower case."""
        self.assertEqual(self.service.pluralize("Cluster"), "clusters")
        self.assertEqual(self.service.pluralize("HOSTCLASS"), "hostclasses")

    def test_empty(self):
        self.assertEqual(self.service.pluralize(""), "")

    def test_pluralize_special_endings(self):
        """Test words whose ending needs more than a suffix rule."""
        test_cases = {
            "quiz": "quizzes",
            "popquiz": "popquizzes",
            "hero": "heroes",
            "superhero": "superheroes",
            "potato": "potatoes",
            "photo": "photos",
            "wildlife": "wildlife",
            "waltz": "waltzes",
        }

        for singular, expected_plural in test_cases.items():
            with self.subTest(word=singular):
                self.assertEqual(self.service.pluralize(singular), expected_plural)
