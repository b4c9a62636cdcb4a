from datetime import date, datetime
from decimal import Decimal

from django.test import SimpleTestCase

from core.services.csv_export import format_cell, write_csv


class FormatCellTests(SimpleTestCase):
    def test_none_is_empty(self):
        self.assertEqual(format_cell(None), "")

    def test_dates_and_decimals(self):
        self.assertEqual(format_cell(date(2026, 3, 1)), "2026-03-01")
        self.assertEqual(format_cell(datetime(2026, 3, 1, 9, 30, 5)), "2026-03-01 09:30:05")
        self.assertEqual(format_cell(Decimal("4750.00")), "4750.00")

    def test_json_values_are_stable(self):
        self.assertEqual(format_cell({"XL": 2, "M": 5}), '{"M": 5, "XL": 2}')


class WriteCsvTests(SimpleTestCase):
    def test_every_field_is_quoted(self):
        out = write_csv(("No", "Qty"), [("WC-1", 10)])
        self.assertEqual(out, '"No","Qty"\n"WC-1","10"\n')

    def test_embedded_quotes_are_doubled(self):
        out = write_csv(("Remarks",), [('12" reed, "fine" weave',)])
        self.assertEqual(out.splitlines()[1], '"12"" reed, ""fine"" weave"')

    def test_headers_only_when_no_rows(self):
        self.assertEqual(write_csv(("A", "B"), []), '"A","B"\n')
