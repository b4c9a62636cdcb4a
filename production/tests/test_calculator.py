from decimal import Decimal

from django.test import SimpleTestCase

from core.exceptions import InvalidQuantity, ValidationError
from production.services import calculator
from production.services.calculator import QualityBand


class LossTests(SimpleTestCase):
    def test_weaver_scenario(self):
        self.assertEqual(calculator.loss_quantity(100, 95), Decimal("5"))
        self.assertEqual(calculator.loss_percentage(100, 95), Decimal("5.00"))
        self.assertEqual(calculator.derive_amount(95, 50), Decimal("4750.00"))

    def test_nothing_sent_means_no_loss(self):
        self.assertEqual(calculator.loss_percentage(0, 0), Decimal("0"))
        self.assertEqual(calculator.loss_percentage(None, None), Decimal("0"))

    def test_percentage_is_rounded_half_up(self):
        # 1/3 of the cloth lost
        self.assertEqual(calculator.loss_percentage(3, 2), Decimal("33.33"))
        self.assertEqual(calculator.loss_percentage(8, 7), Decimal("12.50"))

    def test_received_more_than_sent(self):
        with self.assertRaises(InvalidQuantity):
            calculator.loss_quantity(10, Decimal("10.01"))
        with self.assertRaises(InvalidQuantity):
            calculator.loss_percentage(10, 11)

    def test_negative_quantities(self):
        with self.assertRaises(InvalidQuantity):
            calculator.loss_quantity(-1, 0)
        with self.assertRaises(InvalidQuantity):
            calculator.derive_amount(5, -2)

    def test_non_numeric_input(self):
        with self.assertRaises(ValidationError):
            calculator.derive_amount("ten", 2)


class QualityTests(SimpleTestCase):
    def test_quality_rate(self):
        self.assertEqual(calculator.quality_rate(200, 180), "90.0")
        self.assertEqual(calculator.quality_rate(3, 2), "66.7")
        self.assertEqual(calculator.quality_rate(0, 0), "0")

    def test_bands(self):
        self.assertEqual(calculator.quality_band("90.0"), QualityBand.GOOD)
        self.assertEqual(calculator.quality_band("89.9"), QualityBand.ACCEPTABLE)
        self.assertEqual(calculator.quality_band("70"), QualityBand.ACCEPTABLE)
        self.assertEqual(calculator.quality_band("69.9"), QualityBand.POOR)
        self.assertEqual(calculator.quality_band("0"), QualityBand.POOR)

    def test_conservation(self):
        calculator.check_piece_conservation(200, 180, 15, 5)
        with self.assertRaises(InvalidQuantity):
            calculator.check_piece_conservation(200, 180, 15, 10)


class AmountTests(SimpleTestCase):
    def test_missing_values_count_as_zero(self):
        self.assertEqual(calculator.derive_amount(None, 50), Decimal("0.00"))
        self.assertEqual(calculator.derive_amount(12, ""), Decimal("0.00"))

    def test_gst(self):
        self.assertEqual(calculator.gst_multiplier("5%"), Decimal("1.05"))
        self.assertEqual(calculator.gst_multiplier("Not Applicable"), Decimal("1"))
        self.assertEqual(calculator.gst_multiplier(None), Decimal("1"))
        self.assertEqual(calculator.purchase_amount(100, 40, "5%"), Decimal("4200.00"))
        self.assertEqual(calculator.purchase_amount(10, "12.50", "2.5%"), Decimal("128.13"))

    def test_unit_conversions(self):
        self.assertEqual(calculator.meters_to_pieces(10, "2.5"), 4)
        self.assertEqual(calculator.meters_to_pieces(10, 3), 3)
        self.assertEqual(calculator.pieces_to_meters(4, "2.5"), Decimal("10.00"))
        self.assertEqual(calculator.meters_per_taka(100, 4), Decimal("25.00"))
        self.assertEqual(calculator.meters_per_taka(100, 0), Decimal("0"))

    def test_zero_piece_length(self):
        with self.assertRaises(ValidationError):
            calculator.meters_to_pieces(10, 0)
