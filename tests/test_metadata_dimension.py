"""
Tests for the Pydantic-based dimension and category classes.
"""

import unittest

from pydantic import ValidationError

from statcube.errors import ArgumentError, ModelError
from statcube.metadata import Category, CodelistRef, Dimension


class CategoryTestCase(unittest.TestCase):
    """Test case for the Category class."""

    def test_numeric_code_is_string(self):
        category = Category(code=301, index=0)
        self.assertEqual("301", category.code)
        self.assertEqual("301", category.get_label())

    def test_hierarchy_label(self):
        category = Category(code="1", label="¬¬ Eneboliger", index=3)
        self.assertEqual(2, category.depth)
        self.assertEqual("Eneboliger", category.clean_label)

    def test_clean_label_falls_back_to_code(self):
        category = Category(code="1", index=0)
        self.assertEqual(0, category.depth)
        self.assertEqual("1", category.clean_label)

    def test_invalid_category(self):
        with self.assertRaises(ValidationError):
            Category(code="", index=0)
        with self.assertRaises(ValidationError):
            Category(code="1", index=-1)


class DimensionTestCase(unittest.TestCase):
    """Test case for the Dimension class."""

    def setUp(self):
        self.dimension = Dimension(
            code="Kjonn",
            label="kjønn",
            categories=[
                {"code": "2", "label": "Kvinner", "index": 1},
                {"code": "1", "label": "Menn", "index": 0},
            ],
            codelists=[{"id": "agg_KjonnTotal", "label": "Begge kjønn"}],
        )

    def test_categories_sorted_by_index(self):
        self.assertEqual(["1", "2"], self.dimension.codes)
        self.assertEqual(2, self.dimension.size)
        self.assertEqual(1, self.dimension.index_of("2"))

    def test_categories_from_strings(self):
        dimension = Dimension(code="Tid", categories=["2021", "2022", "2023"])
        self.assertEqual(["2021", "2022", "2023"], dimension.codes)
        self.assertEqual(2, dimension.category("2023").index)
        self.assertTrue(dimension.is_time)
        self.assertFalse(dimension.eliminable)

    def test_category_lookup(self):
        self.assertEqual("Menn", self.dimension.category("1").label)
        self.assertTrue(self.dimension.has_category("2"))
        self.assertFalse(self.dimension.has_category("3"))
        with self.assertRaises(ArgumentError):
            self.dimension.category("3")

    def test_codelist_refs(self):
        self.assertTrue(self.dimension.has_codelists)
        ref = self.dimension.codelist_ref("agg_KjonnTotal")
        self.assertIsInstance(ref, CodelistRef)
        self.assertEqual("Begge kjønn", ref.get_label())
        with self.assertRaises(ArgumentError):
            self.dimension.codelist_ref("vs_Unknown")

    def test_duplicate_codes(self):
        with self.assertRaises(ModelError):
            Dimension(
                code="Kjonn",
                categories=[
                    {"code": "1", "index": 0},
                    {"code": "1", "index": 1},
                ],
            )

    def test_indices_must_enumerate(self):
        with self.assertRaises(ModelError):
            Dimension(
                code="Kjonn",
                categories=[
                    {"code": "1", "index": 0},
                    {"code": "2", "index": 2},
                ],
            )

    def test_empty_dimension(self):
        dimension = Dimension(code="Tom")
        self.assertEqual(0, dimension.size)
        self.assertEqual([], dimension.codes)

    def test_from_metadata(self):
        dimension = Dimension.from_metadata("Region")
        self.assertEqual("Region", dimension.code)
        self.assertEqual("Region", str(dimension))

        with self.assertRaises(ArgumentError):
            Dimension.from_metadata(42)
        with self.assertRaises(ModelError):
            Dimension.from_metadata({"code": "Region", "unknown": True})

    def test_to_dict(self):
        data = self.dimension.to_dict()
        self.assertEqual("Kjonn", data["code"])
        self.assertEqual(["1", "2"], [c["code"] for c in data["categories"]])
        self.assertEqual([{"id": "agg_KjonnTotal", "label": "Begge kjønn"}], data["codelists"])
