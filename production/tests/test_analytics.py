from datetime import date
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from core.exceptions import ValidationError
from core.tests.factories import (
    make_expense,
    make_ledger,
    make_payment_voucher,
    make_purchase,
    make_shorting_entry,
    make_stitching_challan,
    make_user,
    make_weaver_challan,
    qc_done_challan,
)
from inventory.services.conversion import convert_to_inventory
from production.services.analytics import month_starts, production_analytics


class MonthStartsTests(TestCase):
    def test_crosses_the_year(self):
        self.assertEqual(
            month_starts(date(2026, 2, 14), 4),
            [date(2025, 11, 1), date(2025, 12, 1), date(2026, 1, 1), date(2026, 2, 1)],
        )


class ProductionAnalyticsTests(TestCase):
    def setUp(self):
        self.weaver = make_ledger("Laxmi Looms", ledger_type="weaver")
        self.stitcher = make_ledger("Om Stitching", ledger_type="stitching")

        make_purchase("PUR-1", material_type="Cotton", total_meters=Decimal("500"))
        make_purchase("PUR-2", material_type="Silk", total_meters=Decimal("200"))
        make_weaver_challan("WC-1", weaver_ledger=self.weaver, quantity_received_meters=Decimal("95"))
        make_weaver_challan("WC-2", weaver_ledger=self.weaver, quantity_sent_meters=Decimal("50"))
        make_shorting_entry()

        make_stitching_challan("SC-1", ledger=self.stitcher, quantity_sent=40, quantity_received=0)
        converted = qc_done_challan("SC-2", ledger=self.stitcher)
        convert_to_inventory(converted.pk).unwrap()

        make_payment_voucher(ledger=self.weaver, amount=Decimal("4000"))

    def test_sections(self):
        data = production_analytics({}).unwrap()

        self.assertEqual(
            data["rawMaterialStock"],
            [
                {
                    "material_type": "Cotton",
                    "total_purchased_meters": 500.0,
                    "total_sent_to_weaver_meters": 150.0,
                    "available_meters": 350.0,
                },
                {
                    "material_type": "Silk",
                    "total_purchased_meters": 200.0,
                    "total_sent_to_weaver_meters": 0.0,
                    "available_meters": 200.0,
                },
            ],
        )
        self.assertEqual(
            data["materialInProduction"],
            [
                {"stage": "Weaving", "quantity": 150.0, "unit": "meters"},
                {"stage": "Stitching", "quantity": 40.0, "unit": "pieces"},
                {"stage": "Quality check", "quantity": 0.0, "unit": "pieces"},
            ],
        )
        self.assertEqual(
            data["finishedGoods"],
            [{"condition_type": "good", "total_quantity": 95, "unique_products": 1, "total_value": 950.0}],
        )

        efficiency = {row["metric_name"]: row["value"] for row in data["productionEfficiency"]}
        self.assertEqual(efficiency["Average weaving loss"], 5.0)
        self.assertEqual(efficiency["Shorting quality rate"], 90.0)
        self.assertEqual(efficiency["Conversion rate"], 50.0)

        dues = {row["name"]: row for row in data["ledgerDues"]}
        self.assertEqual(dues["Laxmi Looms"]["total_invoiced"], 4750.0)
        self.assertEqual(dues["Laxmi Looms"]["total_paid"], 4000.0)
        self.assertEqual(dues["Laxmi Looms"]["due_amount"], 750.0)
        self.assertEqual(dues["Om Stitching"]["total_invoiced"], 950.0)

        self.assertEqual(data["topProducts"][0]["product_sku"], "KUR-M")
        self.assertEqual(data["classificationRollup"]["total"]["quantity"], 95.0)
        self.assertEqual(data["classificationRollup"]["goodPerc"], 84.21)

    def test_monthly_expenses(self):
        make_expense(expense_date=date(2026, 2, 3), cost=Decimal("1200"))
        make_expense(expense_date=date(2026, 2, 9), cost=Decimal("300"))
        make_expense(expense_date=date(2025, 1, 9), cost=Decimal("999"))

        with mock.patch("production.services.analytics.timezone.localdate", return_value=date(2026, 2, 20)):
            data = production_analytics({"months": "3"}).unwrap()

        self.assertEqual(
            data["monthlyExpenses"],
            [{"month": "2026-02", "expense_type": "Transport", "total_cost": 1500.0, "transaction_count": 2}],
        )

    def test_date_range(self):
        data = production_analytics({"endDate": "2025-12-31"}).unwrap()
        self.assertEqual(data["rawMaterialStock"], [])
        self.assertEqual(data["finishedGoods"], [])

    def test_bad_parameters(self):
        self.assertIsInstance(production_analytics({"start_date": "soon"}).error, ValidationError)
        self.assertIsInstance(
            production_analytics({"start_date": "2026-02-01", "end_date": "2026-01-01"}).error, ValidationError
        )
        self.assertIsInstance(production_analytics({"months": "40"}).error, ValidationError)

    def test_query_failure_is_logged_and_raised(self):
        with mock.patch(
            "production.services.analytics.raw_material_stock", side_effect=DatabaseError("no such table")
        ), self.assertLogs("production.services.analytics", level="ERROR"):
            with self.assertRaises(DatabaseError):
                production_analytics({})


class AnalyticsEndpointTests(TestCase):
    def test_endpoint(self):
        self.client.force_login(make_user())
        response = self.client.get(reverse("production:analytics"), {"months": 2})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            set(response.json()),
            {
                "rawMaterialStock", "materialInProduction", "finishedGoods", "productionEfficiency",
                "monthlyExpenses", "ledgerDues", "topProducts", "classificationRollup",
            },
        )
