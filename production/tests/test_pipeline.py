from decimal import Decimal
from unittest import mock

from django.db import transaction
from django.test import TestCase
from django_fsm import ConcurrentTransition, can_proceed
from django_fsm_log.models import StateLog

from core.exceptions import InvalidQuantity, InvalidTransition, NotFound, ValidationError
from core.tests.factories import make_stitching_challan, make_user, make_weaver_challan, qc_done_challan
from inventory.services.conversion import convert_to_inventory
from production.models import StitchingChallan, WeaverChallan
from production.services.pipeline import available_actions, perform_action


class WeaverChallanActionTests(TestCase):
    def test_full_lifecycle(self):
        challan = make_weaver_challan()

        received = perform_action(
            WeaverChallan, challan.pk, "mark_received", quantity_received_meters="96.5"
        ).unwrap()
        self.assertEqual(received.status, WeaverChallan.Status.RECEIVED)
        self.assertEqual(received.quantity_received_meters, Decimal("96.5"))
        self.assertEqual(received.loss_percentage, Decimal("3.50"))

        completed = perform_action(WeaverChallan, challan.pk, "complete").unwrap()
        self.assertEqual(completed.status, WeaverChallan.Status.COMPLETED)
        self.assertIsNotNone(completed.completed_at)

    def test_receiving_needs_a_quantity(self):
        challan = make_weaver_challan()
        result = perform_action(WeaverChallan, challan.pk, "mark_received")
        self.assertIsInstance(result.error, InvalidQuantity)
        self.assertEqual(WeaverChallan.objects.get(pk=challan.pk).status, WeaverChallan.Status.SENT)

    def test_receiving_more_than_sent(self):
        challan = make_weaver_challan()
        result = perform_action(WeaverChallan, challan.pk, "mark_received", quantity_received_meters="150")
        self.assertIsInstance(result.error, InvalidQuantity)

    def test_completed_is_terminal(self):
        challan = make_weaver_challan()
        perform_action(WeaverChallan, challan.pk, "mark_received", quantity_received_meters="95").unwrap()
        perform_action(WeaverChallan, challan.pk, "complete").unwrap()

        for action in ("mark_received", "complete"):
            result = perform_action(WeaverChallan, challan.pk, action)
            self.assertIsInstance(result.error, InvalidTransition, action)

    def test_out_of_order_action(self):
        challan = make_weaver_challan()
        result = perform_action(WeaverChallan, challan.pk, "complete")
        self.assertIsInstance(result.error, InvalidTransition)

    def test_unknown_action_and_record(self):
        challan = make_weaver_challan()
        self.assertIsInstance(perform_action(WeaverChallan, challan.pk, "teleport").error, ValidationError)
        self.assertIsInstance(perform_action(WeaverChallan, 999, "complete").error, NotFound)

    def test_transitions_are_logged_with_the_user(self):
        user = make_user()
        challan = make_weaver_challan()
        perform_action(WeaverChallan, challan.pk, "mark_received", by=user, quantity_received_meters="95")

        log = StateLog.objects.for_(challan).get()
        self.assertEqual((log.source_state, log.state, log.transition), ("Sent", "Received", "mark_received"))
        self.assertEqual(log.by, user)


class StitchingChallanActionTests(TestCase):
    def test_qc_then_approval(self):
        user = make_user()
        challan = make_stitching_challan()

        checked = perform_action(
            StitchingChallan, challan.pk, "record_qc", good=85, bad="6", wastage=4, remarks="loose threads"
        ).unwrap()
        self.assertEqual(checked.status, StitchingChallan.Status.QC_PENDING)
        self.assertEqual(checked.qc_remarks, "loose threads")

        # a recount while still pending replaces the totals
        recounted = perform_action(StitchingChallan, challan.pk, "record_qc", good=80, bad=10, wastage=5).unwrap()
        self.assertEqual((recounted.total_good, recounted.total_bad, recounted.total_wastage), (80, 10, 5))

        approved = perform_action(StitchingChallan, challan.pk, "approve_qc", by=user).unwrap()
        self.assertEqual(approved.status, StitchingChallan.Status.QC_DONE)
        self.assertEqual(approved.qc_done_by, user)
        self.assertIsNotNone(approved.qc_done_at)

    def test_qc_needs_received_pieces(self):
        challan = make_stitching_challan(quantity_received=0)
        result = perform_action(StitchingChallan, challan.pk, "record_qc", good=0)
        self.assertIsInstance(result.error, InvalidQuantity)

    def test_qc_counts_must_cover_received(self):
        challan = make_stitching_challan()
        result = perform_action(StitchingChallan, challan.pk, "record_qc", good=80, bad=10)
        self.assertIsInstance(result.error, InvalidQuantity)

    def test_qc_counts_are_validated(self):
        challan = make_stitching_challan()
        result = perform_action(StitchingChallan, challan.pk, "record_qc", good=-1, bad=96)
        self.assertIsInstance(result.error, ValidationError)
        self.assertIn("good", result.error.errors)

        result = perform_action(StitchingChallan, challan.pk, "record_qc", bad=95)
        self.assertIsInstance(result.error, ValidationError)

    def test_conversion_is_not_a_direct_action(self):
        challan = qc_done_challan()
        result = perform_action(StitchingChallan, challan.pk, "mark_converted")
        self.assertIsInstance(result.error, InvalidTransition)
        self.assertEqual(StitchingChallan.objects.get(pk=challan.pk).status, StitchingChallan.Status.QC_DONE)

    def test_cancel_records_reason(self):
        challan = make_stitching_challan()
        cancelled = perform_action(StitchingChallan, challan.pk, "cancel", reason="Fabric recalled").unwrap()
        self.assertEqual(cancelled.status, StitchingChallan.Status.CANCELLED)
        self.assertEqual(cancelled.cancellation_reason, "Fabric recalled")
        self.assertEqual(StateLog.objects.for_(challan).get().description, "Fabric recalled")

    def test_terminal_states_refuse_every_action(self):
        cancelled = make_stitching_challan("SC-010")
        perform_action(StitchingChallan, cancelled.pk, "cancel").unwrap()

        converted = qc_done_challan("SC-011")
        convert_to_inventory(converted.pk).unwrap()

        for challan in (cancelled, converted):
            for action in ("record_qc", "approve_qc", "cancel"):
                result = perform_action(StitchingChallan, challan.pk, action, good=95)
                self.assertIsInstance(result.error, InvalidTransition, (challan.challan_no, action))

    def test_available_actions_follow_the_state(self):
        challan = make_stitching_challan()
        self.assertEqual(available_actions(challan), ["cancel", "record_qc"])

        challan = qc_done_challan("SC-002")
        self.assertEqual(available_actions(challan), ["cancel"])


class ConcurrentWriterTests(TestCase):
    def test_stale_copy_cannot_overwrite_a_newer_status(self):
        challan = make_stitching_challan()
        stale = StitchingChallan.objects.get(pk=challan.pk)
        fresh = StitchingChallan.objects.get(pk=challan.pk)

        fresh.cancel(description="Order dropped")
        fresh.save()

        stale.record_qc(good=80, bad=10, wastage=5)
        with self.assertRaises(ConcurrentTransition), transaction.atomic():
            stale.save()

        challan = StitchingChallan.objects.get(pk=challan.pk)
        self.assertEqual(challan.status, StitchingChallan.Status.CANCELLED)
        self.assertEqual(challan.total_good, 0)

    def test_action_racing_another_writer_is_refused(self):
        challan = make_stitching_challan()

        def cancelled_meanwhile(method):
            StitchingChallan.objects.filter(pk=challan.pk).update(status=StitchingChallan.Status.CANCELLED)
            return can_proceed(method)

        with mock.patch("production.services.pipeline.can_proceed", side_effect=cancelled_meanwhile):
            result = perform_action(StitchingChallan, challan.pk, "record_qc", good=80, bad=10, wastage=5)

        self.assertIsInstance(result.error, InvalidTransition)
        self.assertIn("changed by someone else", result.error.message)
        self.assertEqual(StitchingChallan.objects.get(pk=challan.pk).total_good, 0)
