from .purchase import GstRate, MaterialType, Purchase
from .weaver import WeaverChallan
from .shorting import ShortingEntry
from .stitching import StitchingChallan
from .finance import Expense, PaymentMode, PaymentVoucher
