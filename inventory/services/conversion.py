"""Convert a QC-approved stitching challan into an inventory item.

One transaction does all three writes: the inventory item, the challan's
move to Converted and the conversion log row. Any failure rolls all of
them back, so a failed conversion can simply be retried.

Concurrent attempts on the same challan queue on the challan row lock;
the second one finds the item written by the first and gets
AlreadyConverted. The unique ``source_challan`` column backs this up on
databases that ignore ``select_for_update``.
"""

import logging

from django.db import IntegrityError, transaction
from django_fsm import ConcurrentTransition

from core.exceptions import AlreadyConverted, InvalidState, NotFound, PipelineError
from core.services.results import returns_result
from core.services.stage_ledger import pipeline_setting
from inventory.models import GRADE_FOR_CLASSIFICATION, InventoryConversionLog, InventoryItem
from inventory.services.rollup import dominant_classification
from production.models import StitchingChallan

logger = logging.getLogger(__name__)


def inventory_number_for(challan) -> str:
    return f"{pipeline_setting('INVENTORY_NUMBER_PREFIX')}{challan.challan_no}"


def existing_item(challan):
    return InventoryItem.objects.filter(source_challan=challan).first()


def _already_converted(challan, item):
    return AlreadyConverted(
        f"Stitching challan {challan.challan_no} was already converted to {item.inventory_number}.",
        extra={"inventory_number": item.inventory_number, "inventory_item_id": item.pk},
    )


def build_item(challan, by=None) -> InventoryItem:
    """Unsaved inventory item carrying the challan's product, quantity and QC split."""
    classification = dominant_classification(challan.total_good, challan.total_bad, challan.total_wastage)
    return InventoryItem(
        inventory_number=inventory_number_for(challan),
        source_challan=challan,
        product_name=challan.product_name,
        product_sku=challan.product_sku,
        batch_numbers=list(challan.batch_numbers or []),
        quantity=challan.quantity_received,
        good_quantity=challan.total_good,
        bad_quantity=challan.total_bad,
        wastage_quantity=challan.total_wastage,
        classification=classification,
        quality_grade=GRADE_FOR_CLASSIFICATION[classification],
        price_per_piece=challan.rate_per_piece,
        created_by=by,
    )


@transaction.atomic
def _convert(challan_id, by=None):
    try:
        challan = StitchingChallan.objects.select_for_update().get(pk=challan_id)
    except (StitchingChallan.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Stitching challan {challan_id} not found.")

    # checked before the status so a Converted-looking row without an item
    # and an item next to a stale status are both caught
    existing = existing_item(challan)
    if existing is not None:
        raise _already_converted(challan, existing)
    if challan.status == StitchingChallan.Status.CONVERTED:
        raise AlreadyConverted(f"Stitching challan {challan.challan_no} is already Converted.")
    if challan.status != StitchingChallan.Status.QC_DONE:
        raise InvalidState(
            f"Stitching challan {challan.challan_no} is {challan.status}; "
            f"only a challan in {StitchingChallan.Status.QC_DONE} can be converted."
        )

    item = build_item(challan, by=by)
    try:
        with transaction.atomic():
            item.save()
    except IntegrityError:
        existing = existing_item(challan)
        if existing is not None:
            raise _already_converted(challan, existing)
        raise

    try:
        challan.mark_converted(by=by)
        challan.save()
    except ConcurrentTransition:
        raise InvalidState(
            f"Stitching challan {challan.challan_no} changed while converting. Reload and try again."
        )

    InventoryConversionLog.objects.create(
        challan=challan,
        inventory_item=item,
        quantity=item.quantity,
        converted_by=by,
    )
    logger.info(
        "Converted stitching challan %s to inventory %s (%s pcs, %s)",
        challan.challan_no, item.inventory_number, item.quantity, item.classification,
    )
    return item


@returns_result
def convert_to_inventory(challan_id, by=None):
    """Result with the new InventoryItem, or NotFound / InvalidState / AlreadyConverted."""
    try:
        return _convert(challan_id, by=by)
    except PipelineError as exc:
        logger.warning("Conversion of stitching challan %s refused (%s): %s", challan_id, exc.kind, exc.message)
        raise
