"""
Tests for the statcube exception hierarchy.
"""

import unittest

from statcube.errors import (
    ArgumentError,
    CellLimitError,
    CodelistResolutionError,
    InternalError,
    LayoutError,
    MandatoryDimensionError,
    NoSuchDimensionError,
    StatCubeError,
    UserError,
    ValidationError,
)


class ErrorsTestCase(unittest.TestCase):
    def test_context_in_message(self):
        error = StatCubeError("Something failed").add_context("table", "07459")
        self.assertEqual({"table": "07459"}, error.context)
        self.assertEqual("Something failed (context: table=07459)", str(error))

    def test_plain_message(self):
        self.assertEqual("Plain", str(ArgumentError("Plain")))

    def test_cause_is_kept(self):
        cause = ValueError("bad")
        error = InternalError("Wrapped", cause=cause)
        self.assertIs(cause, error.cause)

    def test_no_such_dimension_is_key_error(self):
        error = NoSuchDimensionError("No dimension 'Fylke'", "Fylke")
        self.assertIsInstance(error, KeyError)
        self.assertIsInstance(error, UserError)
        self.assertEqual("Fylke", error.name)
        # KeyError would quote the message, the statcube form must not
        self.assertEqual(
            "No dimension 'Fylke' (context: dimension=Fylke)", str(error)
        )

    def test_validation_errors(self):
        error = MandatoryDimensionError("Kjonn")
        self.assertIsInstance(error, ValidationError)
        self.assertEqual("Kjonn", error.dimension)
        self.assertIn("Kjonn", str(error))

        error = CellLimitError(900_000, 800_000)
        self.assertIsInstance(error, ValidationError)
        self.assertEqual(900_000, error.cells)
        self.assertEqual(800_000, error.limit)

        self.assertTrue(issubclass(LayoutError, ValidationError))

    def test_codelist_resolution_error(self):
        error = CodelistResolutionError(
            "Failed", codelist="vs_Fylker", dimension="Region"
        )
        self.assertIsInstance(error, InternalError)
        self.assertEqual("vs_Fylker", error.codelist)
        self.assertEqual("Region", error.dimension)
        self.assertEqual(
            {"codelist": "vs_Fylker", "dimension": "Region"}, error.context
        )
