from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings

from core.exceptions import AlreadyConverted, InvalidState, NotFound
from core.tests.factories import make_stitching_challan, make_user, qc_done_challan
from inventory.models import InventoryConversionLog, InventoryItem
from inventory.services import conversion
from inventory.services.conversion import build_item, convert_to_inventory
from production.models import StitchingChallan
from production.services.pipeline import perform_action


class ConvertToInventoryTests(TestCase):
    def test_qc_done_challan_becomes_one_item(self):
        user = make_user()
        challan = qc_done_challan(batch_numbers=["B-11", "B-12"])

        item = convert_to_inventory(challan.pk, by=user).unwrap()

        self.assertEqual(item.inventory_number, "INV-SC-001")
        self.assertEqual(item.source_challan_id, challan.pk)
        self.assertEqual((item.product_name, item.product_sku), ("Cotton Kurta", "KUR-M"))
        self.assertEqual(item.batch_numbers, ["B-11", "B-12"])
        self.assertEqual(item.quantity, 95)
        self.assertEqual((item.good_quantity, item.bad_quantity, item.wastage_quantity), (80, 10, 5))
        self.assertEqual(item.classification, "good")
        self.assertEqual(item.quality_grade, "A")
        self.assertEqual(item.price_per_piece, Decimal("10"))
        self.assertEqual(item.total_cost, Decimal("950.00"))
        self.assertEqual(item.created_by, user)

        challan = StitchingChallan.objects.get(pk=challan.pk)
        self.assertEqual(challan.status, StitchingChallan.Status.CONVERTED)
        self.assertIsNotNone(challan.converted_at)

        log = InventoryConversionLog.objects.get()
        self.assertEqual((log.challan_id, log.inventory_item_id, log.quantity), (challan.pk, item.pk, 95))
        self.assertEqual(log.converted_by, user)

    def test_second_call_is_already_converted(self):
        challan = qc_done_challan()
        first = convert_to_inventory(challan.pk).unwrap()

        result = convert_to_inventory(challan.pk)

        self.assertIsInstance(result.error, AlreadyConverted)
        self.assertEqual(result.error.extra["inventory_number"], first.inventory_number)
        self.assertEqual(InventoryItem.objects.count(), 1)
        self.assertEqual(InventoryConversionLog.objects.count(), 1)

    def test_wastage_heavy_challan(self):
        challan = qc_done_challan(good=10, bad=20, wastage=65)
        item = convert_to_inventory(challan.pk).unwrap()
        self.assertEqual((item.classification, item.quality_grade), ("wastage", "Waste"))

    @override_settings(PIPELINE={
        "DEFAULT_PAGE_SIZE": 10,
        "MAX_PAGE_SIZE": 100,
        "INVENTORY_NUMBER_PREFIX": "FG/",
        "EXPORT_DATETIME_FORMAT": "%Y-%m-%d %H:%M:%S",
    })
    def test_number_prefix_comes_from_settings(self):
        item = convert_to_inventory(qc_done_challan().pk).unwrap()
        self.assertEqual(item.inventory_number, "FG/SC-001")

    def test_only_qc_done_converts(self):
        pending = make_stitching_challan("SC-101")
        in_qc = make_stitching_challan("SC-102")
        perform_action(StitchingChallan, in_qc.pk, "record_qc", good=95).unwrap()
        cancelled = make_stitching_challan("SC-103")
        perform_action(StitchingChallan, cancelled.pk, "cancel").unwrap()

        for challan in (pending, in_qc, cancelled):
            result = convert_to_inventory(challan.pk)
            self.assertIsInstance(result.error, InvalidState, challan.challan_no)
        self.assertFalse(InventoryItem.objects.exists())

    def test_missing_challan(self):
        self.assertIsInstance(convert_to_inventory(987).error, NotFound)
        self.assertIsInstance(convert_to_inventory("abc").error, NotFound)

    def test_converted_status_without_item_is_already_converted(self):
        challan = qc_done_challan()
        StitchingChallan.objects.filter(pk=challan.pk).update(status=StitchingChallan.Status.CONVERTED)
        result = convert_to_inventory(challan.pk)
        self.assertIsInstance(result.error, AlreadyConverted)
        self.assertFalse(InventoryItem.objects.exists())

    def test_failure_mid_way_leaves_nothing_behind(self):
        challan = qc_done_challan()

        with mock.patch.object(
            InventoryConversionLog.objects, "create", side_effect=DatabaseError("disk I/O error")
        ), self.assertRaises(DatabaseError):
            convert_to_inventory(challan.pk)

        self.assertFalse(InventoryItem.objects.exists())
        self.assertFalse(InventoryConversionLog.objects.exists())
        self.assertEqual(StitchingChallan.objects.get(pk=challan.pk).status, StitchingChallan.Status.QC_DONE)

        # nothing was half-written, so a retry simply works
        item = convert_to_inventory(challan.pk).unwrap()
        self.assertEqual(item.quantity, 95)
        self.assertEqual(StitchingChallan.objects.get(pk=challan.pk).status, StitchingChallan.Status.CONVERTED)

    def test_refusals_are_logged(self):
        challan = make_stitching_challan()
        with self.assertLogs("inventory.services.conversion", level="WARNING") as logs:
            convert_to_inventory(challan.pk)
        self.assertIn("invalid_state", logs.output[0])


class ConcurrentConversionTests(TestCase):
    def test_challan_moved_on_by_another_writer(self):
        challan = qc_done_challan()

        def cancel_first(stale, by=None):
            # another writer cancels the challan between the lock and the save
            StitchingChallan.objects.filter(pk=stale.pk).update(status=StitchingChallan.Status.CANCELLED)
            return build_item(stale, by=by)

        with mock.patch.object(conversion, "build_item", side_effect=cancel_first):
            result = convert_to_inventory(challan.pk)

        self.assertIsInstance(result.error, InvalidState)
        self.assertIn("changed while converting", result.error.message)
        self.assertFalse(InventoryItem.objects.exists())
        self.assertFalse(InventoryConversionLog.objects.exists())

        # the whole attempt was rolled back, so a retry converts normally
        item = convert_to_inventory(challan.pk).unwrap()
        self.assertEqual(item.inventory_number, "INV-SC-001")

    def test_item_written_by_a_racing_conversion(self):
        challan = qc_done_challan()
        raced = build_item(challan)
        raced.save()

        # the first lookup misses the racing writer's row; the unique column catches it
        with mock.patch.object(conversion, "existing_item", side_effect=[None, raced]):
            result = convert_to_inventory(challan.pk)

        self.assertIsInstance(result.error, AlreadyConverted)
        self.assertEqual(result.error.extra["inventory_number"], raced.inventory_number)
        self.assertEqual(result.error.extra["inventory_item_id"], raced.pk)
        self.assertEqual(InventoryItem.objects.count(), 1)
        self.assertFalse(InventoryConversionLog.objects.exists())
        self.assertEqual(StitchingChallan.objects.get(pk=challan.pk).status, StitchingChallan.Status.QC_DONE)
