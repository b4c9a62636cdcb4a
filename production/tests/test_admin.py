from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase
from django.urls import reverse

from core.tests.factories import make_purchase, make_stitching_challan, make_weaver_challan, qc_done_challan
from inventory.models import InventoryItem
from inventory.services.conversion import convert_to_inventory
from production.models import Purchase, StitchingChallan


class StitchingChallanAdminTests(TestCase):
    def setUp(self):
        self.admin_user = get_user_model().objects.create_superuser("supervisor", "supervisor@example.com", "pw")
        self.client.force_login(self.admin_user)

    def action_url(self, challan, tool):
        return reverse(
            "admin:production_stitchingchallan_actions", kwargs={"pk": challan.pk, "tool": tool}
        )

    def test_change_page_offers_conversion_only_after_qc(self):
        challan = qc_done_challan()
        response = self.client.get(reverse("admin:production_stitchingchallan_change", args=[challan.pk]))
        self.assertContains(response, "Convert to inventory")
        self.assertNotContains(response, "Approve QC")

    def test_convert_button_goes_through_the_orchestrator(self):
        challan = qc_done_challan()
        response = self.client.post(self.action_url(challan, "convert_action"))
        self.assertEqual(response.status_code, 302)
        item = InventoryItem.objects.get(source_challan=challan)
        self.assertEqual(item.created_by, self.admin_user)
        self.assertEqual(StitchingChallan.objects.get(pk=challan.pk).status, StitchingChallan.Status.CONVERTED)

    def test_cancel_button(self):
        challan = make_stitching_challan()
        self.client.post(self.action_url(challan, "cancel_action"))
        challan = StitchingChallan.objects.get(pk=challan.pk)
        self.assertEqual(challan.status, StitchingChallan.Status.CANCELLED)
        self.assertEqual(challan.cancellation_reason, "Cancelled from admin")


class AdminFollowsLedgerRulesTests(TestCase):
    def setUp(self):
        self.admin_user = get_user_model().objects.create_superuser("supervisor", "supervisor@example.com", "pw")
        self.client.force_login(self.admin_user)

    def request(self):
        request = RequestFactory().get("/admin/")
        request.user = self.admin_user
        return request

    def test_challan_past_pending_cannot_be_deleted(self):
        challan = qc_done_challan()
        url = reverse("admin:production_stitchingchallan_delete", args=[challan.pk])

        response = self.client.post(url, {"post": "yes"})

        self.assertEqual(response.status_code, 403)
        self.assertTrue(StitchingChallan.objects.filter(pk=challan.pk).exists())

    def test_bulk_delete_refuses_locked_challans(self):
        pending = make_stitching_challan("SC-P")
        done = qc_done_challan("SC-Q")

        self.client.post(
            reverse("admin:production_stitchingchallan_changelist"),
            {"action": "delete_selected", "_selected_action": [pending.pk, done.pk], "post": "yes"},
        )

        self.assertTrue(StitchingChallan.objects.filter(pk=done.pk).exists())

    def test_pending_challan_can_be_deleted(self):
        challan = make_stitching_challan()
        url = reverse("admin:production_stitchingchallan_delete", args=[challan.pk])

        response = self.client.post(url, {"post": "yes"})

        self.assertEqual(response.status_code, 302)
        self.assertFalse(StitchingChallan.objects.filter(pk=challan.pk).exists())

    def test_referenced_purchase_freezes_quantities(self):
        purchase = make_purchase()
        make_weaver_challan(purchase=purchase)
        readonly = admin.site._registry[Purchase].get_readonly_fields(self.request(), purchase)

        self.assertIn("total_meters", readonly)
        self.assertIn("rate_per_meter", readonly)
        self.assertNotIn("remarks", readonly)
        self.assertNotIn("invoice_number", readonly)

    def test_unreferenced_purchase_stays_editable(self):
        purchase = make_purchase()
        readonly = admin.site._registry[Purchase].get_readonly_fields(self.request(), purchase)
        self.assertNotIn("total_meters", readonly)

    def test_converted_challan_is_fully_read_only(self):
        challan = qc_done_challan()
        convert_to_inventory(challan.pk).unwrap()
        challan = StitchingChallan.objects.get(pk=challan.pk)
        readonly = admin.site._registry[StitchingChallan].get_readonly_fields(self.request(), challan)

        for name in ("quantity_sent", "quantity_received", "rate_per_piece", "transport_name"):
            self.assertIn(name, readonly)

        response = self.client.get(reverse("admin:production_stitchingchallan_change", args=[challan.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertNotContains(response, 'name="quantity_sent"')
