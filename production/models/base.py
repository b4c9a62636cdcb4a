from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import InvalidQuantity


class QuantityInvariantMixin:
    """Run ``check_quantities`` from ``clean()`` and before every save.

    ``clean()`` reports a broken conservation law as a form error with code
    ``invalid_quantity`` (admin, ModelForms); ``save()`` raises
    ``InvalidQuantity`` so no code path can persist an invalid row.
    """

    def check_quantities(self):
        raise NotImplementedError

    def clean(self):
        super().clean()
        try:
            self.check_quantities()
        except InvalidQuantity as exc:
            raise DjangoValidationError(exc.message, code="invalid_quantity")

    def save(self, *args, **kwargs):
        self.check_quantities()
        super().save(*args, **kwargs)
