"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Canteen owns menu items and staff; User owns one cart

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from canteen.models.admin import Admin  # noqa: F401
from canteen.models.user import User  # noqa: F401
from canteen.models.canteen import Canteen  # noqa: F401
from canteen.models.canteen_staff import CanteenStaff  # noqa: F401
from canteen.models.menu_item import MenuItem  # noqa: F401
from canteen.models.cart import Cart, CartItem  # noqa: F401
from canteen.models.exam import ExamDetails  # noqa: F401
from canteen.models.order import Order, OrderItem  # noqa: F401
from canteen.models.payment import Payment  # noqa: F401
from canteen.models.feedback import Feedback  # noqa: F401
