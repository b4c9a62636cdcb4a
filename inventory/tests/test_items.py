import json
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from core.exceptions import Conflict, ValidationError
from core.tests.factories import make_user, qc_done_challan
from inventory.models import InventoryItem
from inventory.services.conversion import convert_to_inventory
from inventory.services.items import inventory_items


def converted_item(challan_no="SC-001", **kwargs):
    return convert_to_inventory(qc_done_challan(challan_no, **kwargs).pk).unwrap()


class InventoryLedgerTests(TestCase):
    def test_items_cannot_be_created_or_deleted_directly(self):
        item = converted_item()
        self.assertIsInstance(inventory_items.create({"quantity": 5}).error, Conflict)
        self.assertIsInstance(inventory_items.delete(item.pk).error, Conflict)
        self.assertTrue(InventoryItem.objects.filter(pk=item.pk).exists())

    def test_price_edit_recomputes_cost(self):
        item = converted_item()
        updated = inventory_items.update(item.pk, {"price_per_piece": "12.50"}).unwrap()
        self.assertEqual(updated.total_cost, Decimal("1187.50"))

    def test_classification_edit_follows_grade(self):
        item = converted_item()
        updated = inventory_items.update(item.pk, {"classification": "bad"}).unwrap()
        self.assertEqual(updated.quality_grade, "C")

        updated = inventory_items.update(item.pk, {"quality_grade": "Waste"}).unwrap()
        self.assertEqual(updated.classification, "wastage")

    def test_contradicting_grade_and_classification(self):
        item = converted_item()
        result = inventory_items.update(item.pk, {"classification": "bad", "quality_grade": "A"})
        self.assertIsInstance(result.error, ValidationError)
        item.refresh_from_db()
        self.assertEqual((item.classification, item.quality_grade), ("good", "A"))

    def test_matching_grade_and_classification_together(self):
        item = converted_item()
        updated = inventory_items.update(item.pk, {"classification": "bad", "quality_grade": "C"}).unwrap()
        self.assertEqual((updated.classification, updated.quality_grade), ("bad", "C"))

    def test_reclassified_item_counts_wholly_in_its_new_class(self):
        item = converted_item()
        before = inventory_items.list().unwrap().summary
        self.assertEqual(before["goodPerc"], 84.21)
        self.assertEqual(before["wastagePerc"], 5.26)

        inventory_items.update(item.pk, {"classification": "wastage"}).unwrap()

        after = inventory_items.list().unwrap().summary
        self.assertEqual(after["goodPerc"], 0.0)
        self.assertEqual(after["wastagePerc"], 100.0)
        self.assertEqual(after["wastage"]["quantity"], 95.0)
        self.assertEqual(after["lossCost"], 950.0)

        page = inventory_items.list({"classification": "wastage"}).unwrap()
        self.assertEqual(page.summary["total"]["quantity"], 95.0)

    def test_provenance_is_fixed(self):
        item = converted_item()
        result = inventory_items.update(item.pk, {"quantity": 120})
        self.assertIsInstance(result.error, ValidationError)
        self.assertEqual(result.error.field, "quantity")

        result = inventory_items.update(item.pk, {"source_challan": item.source_challan_id + 1})
        self.assertIsInstance(result.error, ValidationError)

        # echoing the stored value back is harmless
        updated = inventory_items.update(item.pk, {"quantity": 95, "remarks": "rack 4"}).unwrap()
        self.assertEqual(updated.remarks, "rack 4")
        self.assertEqual(updated.quantity, 95)

    def test_list_summary_covers_the_whole_filtered_set(self):
        converted_item("SC-1")
        converted_item("SC-2", good=10, bad=80, wastage=5)
        converted_item("SC-3", product_sku="SHR-L")

        page = inventory_items.list({"product_sku": "kur-m"}, limit=1).unwrap()

        self.assertEqual(len(page.records), 1)
        self.assertEqual(page.total, 2)
        self.assertEqual(page.summary["total"]["quantity"], 190.0)
        self.assertEqual(page.summary["good"]["quantity"], 90.0)
        self.assertEqual(page.summary["bad"]["quantity"], 90.0)
        self.assertEqual(page.summary["lossCost"], 1000.0)

    def test_filter_by_classification(self):
        converted_item("SC-1")
        converted_item("SC-2", good=10, bad=80, wastage=5)
        page = inventory_items.list({"classification": "bad"}).unwrap()
        self.assertEqual([i.inventory_number for i in page.records], ["INV-SC-2"])

    def test_export(self):
        converted_item()
        lines = inventory_items.export_csv().unwrap().splitlines()
        self.assertEqual(
            lines[0],
            '"Inventory Number","Challan No","Date","Quality Grade","Quantity","Product Name",'
            '"Product SKU","Classification","Price Per Piece","Total Cost"',
        )
        self.assertTrue(lines[1].startswith('"INV-SC-001","SC-001",'))
        self.assertTrue(lines[1].endswith('"A","95","Cotton Kurta","KUR-M","good","10.00","950.00"'))


class InventoryApiTests(TestCase):
    def setUp(self):
        self.client.force_login(make_user())

    def test_list_includes_summary(self):
        converted_item()
        response = self.client.get(reverse("inventory:item-list"))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["data"][0]["challan_no"], "SC-001")
        self.assertEqual(body["summary"]["goodPerc"], 84.21)

    def test_post_is_not_allowed(self):
        response = self.client.post(reverse("inventory:item-list"), data="{}", content_type="application/json")
        self.assertEqual(response.status_code, 405)

    def test_patch_and_delete(self):
        item = converted_item()
        url = reverse("inventory:item-detail", args=[item.pk])

        response = self.client.patch(url, data=json.dumps({"price_per_piece": "11"}), content_type="application/json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["total_cost"], "1045.00")

        self.assertEqual(self.client.delete(url).status_code, 405)

    def test_export(self):
        converted_item()
        response = self.client.get(reverse("inventory:item-export"), {"classification": "good"})
        self.assertEqual(response.status_code, 200)
        self.assertIn('filename="inventory.csv"', response["Content-Disposition"])
        self.assertEqual(len(response.content.decode().splitlines()), 2)
