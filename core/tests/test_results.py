from django.db import DatabaseError
from django.test import SimpleTestCase

from core.exceptions import AlreadyConverted, Conflict, NotFound
from core.services.results import Result, returns_result


class ReturnsResultTests(SimpleTestCase):
    def test_success_wraps_value(self):
        result = returns_result(lambda: 42)()
        self.assertTrue(result.ok)
        self.assertEqual(result.value, 42)

    def test_pipeline_error_becomes_failure(self):
        @returns_result
        def missing():
            raise NotFound("Weaver challan 9 not found.")

        result = missing()
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, NotFound)
        self.assertEqual(result.error.status_code, 404)
        with self.assertRaises(NotFound):
            result.unwrap()

    def test_storage_errors_propagate(self):
        @returns_result
        def broken():
            raise DatabaseError("disk I/O error")

        with self.assertRaises(DatabaseError):
            broken()


class ErrorPayloadTests(SimpleTestCase):
    def test_conflict_carries_blocking_reference(self):
        error = Conflict("in use", blocking={"model": "weaver challan", "id": 3, "label": "WC-3"})
        self.assertEqual(
            error.as_dict(),
            {
                "error": "in use",
                "code": "conflict",
                "blocking": {"model": "weaver challan", "id": 3, "label": "WC-3"},
            },
        )

    def test_already_converted_is_success_adjacent(self):
        error = AlreadyConverted("done", extra={"inventory_number": "INV-SC-1"})
        self.assertTrue(error.success_adjacent)
        self.assertEqual(error.as_dict()["inventory_number"], "INV-SC-1")
        self.assertEqual(Result.failure(error).error.kind, "already_converted")
