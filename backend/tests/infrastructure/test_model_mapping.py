"""ORM mapping tests — every model's relationships resolve before any query.

Tests cover:
    - configure_mappers() succeeds for the whole model package
    - Staff and feedback resolve their canteen; feedback has no FK to it
"""

from sqlalchemy.orm import configure_mappers

from canteen.models import CanteenStaff, Feedback


def test_mappers_configure():
    configure_mappers()


def test_staff_canteen_is_plain_many_to_one():
    prop = CanteenStaff.__mapper__.relationships["canteen"]
    assert prop.back_populates is None
    assert prop.direction.name == "MANYTOONE"


def test_feedback_canteen_has_no_foreign_key():
    assert not Feedback.__table__.c.canteen_id.foreign_keys
    assert Feedback.__mapper__.relationships["canteen"].viewonly
