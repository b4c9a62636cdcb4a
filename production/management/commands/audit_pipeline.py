from django.core.management.base import BaseCommand, CommandError
from django.db.models import F

from inventory.models import InventoryItem
from production.models import ShortingEntry, StitchingChallan, WeaverChallan


def find_issues():
    """Yield (record, problem) for stored rows that break a pipeline invariant.

    Rows written before the invariants were enforced (imports, old data) are
    the usual source; each one needs a correction or a backfill decision.
    """
    for entry in ShortingEntry.objects.exclude(
        total_pieces=F("good_pieces") + F("damaged_pieces") + F("rejected_pieces")
    ):
        yield entry, (
            f"good {entry.good_pieces} + damaged {entry.damaged_pieces} + rejected "
            f"{entry.rejected_pieces} != total {entry.total_pieces}"
        )

    for challan in WeaverChallan.objects.filter(quantity_received_meters__gt=F("quantity_sent_meters")):
        yield challan, (
            f"received {challan.quantity_received_meters} m > sent {challan.quantity_sent_meters} m"
        )

    for challan in StitchingChallan.objects.filter(quantity_received__gt=F("quantity_sent")):
        yield challan, f"received {challan.quantity_received} > sent {challan.quantity_sent} pieces"

    for challan in StitchingChallan.objects.filter(status__in=StitchingChallan.CLASSIFIED).exclude(
        quantity_received=F("total_good") + F("total_bad") + F("total_wastage")
    ):
        yield challan, (
            f"good {challan.total_good} + bad {challan.total_bad} + wastage {challan.total_wastage} "
            f"!= received {challan.quantity_received}"
        )

    for challan in StitchingChallan.objects.filter(
        status=StitchingChallan.Status.CONVERTED, inventory_item__isnull=True
    ):
        yield challan, "Converted but has no inventory item"

    for item in InventoryItem.objects.select_related("source_challan").exclude(
        source_challan__status=StitchingChallan.Status.CONVERTED
    ):
        yield item, f"source challan {item.source_challan} is {item.source_challan.status}, not Converted"


class Command(BaseCommand):
    help = "List stored pipeline rows that violate quantity or conversion invariants"

    def add_arguments(self, parser):
        parser.add_argument(
            "--fail-on-issues", action="store_true", help="Exit with an error when any issue is found"
        )

    def handle(self, *args, **opts):
        count = 0
        for record, problem in find_issues():
            count += 1
            self.stdout.write(f"{record._meta.verbose_name} {record} (id={record.pk}): {problem}")

        if not count:
            self.stdout.write(self.style.SUCCESS("Pipeline audit: no issues found"))
            return

        message = f"Pipeline audit: {count} issue(s) found"
        if opts["fail_on_issues"]:
            raise CommandError(message)
        self.stdout.write(self.style.WARNING(message))
