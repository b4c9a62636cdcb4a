from django import forms

from inventory.models import GRADE_FOR_CLASSIFICATION, InventoryItem
from inventory.services.rollup import classify_quality


class InventoryItemForm(forms.ModelForm):
    """Edits after conversion: classification, grade, price and remarks only.

    Classification and grade follow each other: changing one fills in the
    other; sending both with values that disagree is an error.

    ``submitted`` names the keys the caller actually sent. Without it (the
    admin posts every field) the changed fields are used instead.
    """

    class Meta:
        model = InventoryItem
        fields = ["classification", "quality_grade", "price_per_piece", "remarks"]

    def __init__(self, *args, submitted=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.submitted = set(submitted) if submitted is not None else None

    def clean(self):
        cleaned = super().clean()
        classification = cleaned.get("classification")
        grade = cleaned.get("quality_grade")
        changed = set(self.changed_data)
        sent = self.submitted if self.submitted is not None else changed

        if {"classification", "quality_grade"} <= sent:
            if grade and classification and classify_quality(grade) != classification:
                raise forms.ValidationError(
                    f"Quality grade {grade} does not match classification {classification}."
                )
        elif "classification" in sent and "classification" in changed and classification:
            cleaned["quality_grade"] = GRADE_FOR_CLASSIFICATION[classification]
        elif "quality_grade" in sent and "quality_grade" in changed and grade:
            cleaned["classification"] = classify_quality(grade)
        return cleaned
