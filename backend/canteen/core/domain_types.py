"""Domain Types — enums that replace raw strings across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching in rules
    - str Enums: serialize to JSON and store in String columns without converters
"""

from enum import Enum


class PrincipalRole(str, Enum):
    """Who a token was issued to — drives route-level access checks."""
    ADMIN = "admin"
    USER = "user"
    CANTEEN_STAFF = "canteen_staff"


class UserRole(str, Enum):
    """Campus role of a user account."""
    STUDENT = "student"
    FACULTY = "faculty"


class OrderStatus(str, Enum):
    """Order lifecycle: pending -> preparing -> ready -> delivered -> completed | cancelled."""
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PriorityReason(str, Enum):
    EXAM = "exam"
    MEDICAL = "medical"
    FACULTY = "faculty"
    OTHER = "other"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    UPI = "upi"
    WALLET = "wallet"
    CASH = "cash"
    RAZORPAY = "razorpay"
    CARD = "card"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class ImageFolder(str, Enum):
    """Sub-folders under the configured Cloudinary root folder."""
    CANTEENS = "canteens"
    MENU = "menu"
