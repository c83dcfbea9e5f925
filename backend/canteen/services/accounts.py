"""Account Service — registration, credential checks and cascading deletes.

Invariants:
    - Emails compared lower-cased; uniqueness pre-checked before insert
      (DuplicateResourceError), DB unique constraints remain the backstop
    - Users must register with the configured campus email domain
    - A canteen has at most one staff account
    - delete_user removes cart, feedback, payments, orders and the user in
      one transaction: either all rows go or none do
    - The default admin is created only when its configured email logs in
      and no admin with that email exists yet
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.config import get_settings
from canteen.core.errors import (
    AuthenticationError, DuplicateResourceError, RequestValidationFailed,
    ResourceNotFoundError,
)
from canteen.infrastructure.security import hash_password, verify_password
from canteen.models import (
    Admin, Canteen, CanteenStaff, Cart, CartItem, Feedback, Order, Payment,
    User,
)
from canteen.schemas.accounts import (
    AdminProfileUpdate, AdminRegister, StaffProfileUpdate, StaffRegister,
    StaffUpdate, UserProfileUpdate, UserRegister,
)

logger = logging.getLogger(__name__)


async def _email_taken(
    db: AsyncSession, model, email: str, exclude_id: UUID | None = None,
) -> bool:
    stmt = select(func.count()).select_from(model).where(model.email == email)
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    return (await db.execute(stmt)).scalar_one() > 0


def check_email_domain(email: str) -> None:
    domain = get_settings().allowed_email_domain
    if not email.endswith(f"@{domain}"):
        raise RequestValidationFailed(
            f"Email ID is not registered on the campus domain. "
            f"Please use your @{domain} email.",
            field="email",
        )


# ─── Admin ──────────────────────────────────────────────────────

async def authenticate_admin(db: AsyncSession, email: str, password: str) -> Admin:
    """Verify admin credentials, creating the configured default admin on first use."""
    settings = get_settings()
    admin = (
        await db.execute(select(Admin).where(Admin.email == email))
    ).scalar_one_or_none()

    if admin is None and email == settings.default_admin_email.lower():
        if password != settings.default_admin_password:
            raise AuthenticationError("Invalid credentials")
        admin = Admin(
            name="Admin", email=email,
            password_hash=hash_password(password),
        )
        db.add(admin)
        await db.commit()
        await db.refresh(admin)
        logger.info("Default admin account created")
        return admin

    if admin is None:
        raise ResourceNotFoundError("Admin")
    if not verify_password(password, admin.password_hash):
        raise AuthenticationError("Invalid credentials")
    return admin


async def register_admin(db: AsyncSession, body: AdminRegister) -> Admin:
    if await _email_taken(db, Admin, body.email):
        raise DuplicateResourceError("Admin already exists with this email")
    admin = Admin(
        name=body.name, email=body.email,
        password_hash=hash_password(body.password),
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def update_admin(db: AsyncSession, admin: Admin, body: AdminProfileUpdate) -> Admin:
    if body.email and body.email != admin.email:
        if await _email_taken(db, Admin, body.email, exclude_id=admin.id):
            raise DuplicateResourceError("Email is already in use by another admin")
        admin.email = body.email
    if body.name:
        admin.name = body.name
    if body.password:
        admin.password_hash = hash_password(body.password)
    await db.commit()
    await db.refresh(admin)
    return admin


# ─── Users ──────────────────────────────────────────────────────

async def _uni_id_taken(
    db: AsyncSession, uni_id: str, exclude_id: UUID | None = None,
) -> bool:
    stmt = select(func.count()).select_from(User).where(
        func.upper(User.uni_id) == uni_id.upper(),
    )
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return (await db.execute(stmt)).scalar_one() > 0


async def register_user(db: AsyncSession, body: UserRegister) -> User:
    if await _email_taken(db, User, body.email):
        raise DuplicateResourceError("User already exists with this email")
    check_email_domain(body.email)
    if await _uni_id_taken(db, body.uni_id):
        raise DuplicateResourceError("A user with this University ID already exists")

    user = User(
        name=body.name,
        email=body.email,
        uni_id=body.uni_id,
        phone_no=body.phone_no,
        password_hash=hash_password(body.password),
        role=body.role.value,
        department=body.department,
        semester=body.semester,
        is_privileged=body.is_privileged,
        privilege_reason=body.privilege_reason if body.is_privileged else None,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User registered", extra={"user_id": str(user.id)})
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    user = (
        await db.execute(select(User).where(User.email == email))
    ).scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User")
    if not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user


async def reset_password(db: AsyncSession, email: str, new_password: str) -> None:
    user = (
        await db.execute(select(User).where(User.email == email))
    ).scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User", email)
    user.password_hash = hash_password(new_password)
    await db.commit()


async def update_user_profile(
    db: AsyncSession, user: User, body: UserProfileUpdate,
) -> User:
    if body.email and body.email != user.email:
        check_email_domain(body.email)
        if await _email_taken(db, User, body.email, exclude_id=user.id):
            raise DuplicateResourceError("Email is already in use by another user")
        user.email = body.email
    if body.uni_id is not None and body.uni_id != user.uni_id:
        if await _uni_id_taken(db, body.uni_id, exclude_id=user.id):
            raise DuplicateResourceError("A user with this University ID already exists")
        user.uni_id = body.uni_id
    for field in ("name", "phone_no", "department", "semester"):
        value = getattr(body, field)
        if value is not None:
            setattr(user, field, value)
    if body.password:
        user.password_hash = hash_password(body.password)
    await db.commit()
    await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, user_id: UUID) -> dict[str, int]:
    """Delete a user and everything tied to them; returns per-table counts."""
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))

    email = user.email
    order_ids = select(Order.id).where(Order.email == email)
    try:
        await db.execute(
            delete(CartItem).where(
                CartItem.cart_id.in_(select(Cart.id).where(Cart.user_id == user.id)),
            ),
        )
        carts = await db.execute(delete(Cart).where(Cart.user_id == user.id))
        feedback = await db.execute(delete(Feedback).where(Feedback.email == email))
        payments = await db.execute(
            delete(Payment).where(
                (Payment.email == email) | Payment.order_id.in_(order_ids),
            ),
        )
        orders = (
            await db.execute(select(Order).where(Order.email == email))
        ).scalars().all()
        for order in orders:
            await db.delete(order)
        await db.delete(user)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    summary = {
        "carts": carts.rowcount,
        "feedback": feedback.rowcount,
        "payments": payments.rowcount,
        "orders": len(orders),
    }
    logger.info(
        f"User deleted with dependents: {summary}",
        extra={"user_id": str(user_id)},
    )
    return summary


# ─── Canteen staff ──────────────────────────────────────────────

async def _check_staff_canteen(
    db: AsyncSession, canteen_id: UUID, exclude_id: UUID | None = None,
) -> None:
    if await db.get(Canteen, canteen_id) is None:
        raise RequestValidationFailed(
            "Canteen does not exist with the provided ID", field="canteenId",
        )
    stmt = select(func.count()).select_from(CanteenStaff).where(
        CanteenStaff.canteen_id == canteen_id,
    )
    if exclude_id is not None:
        stmt = stmt.where(CanteenStaff.id != exclude_id)
    if (await db.execute(stmt)).scalar_one() > 0:
        raise DuplicateResourceError(
            "A staff member is already registered for this canteen",
        )


async def register_staff(db: AsyncSession, body: StaffRegister) -> CanteenStaff:
    if await _email_taken(db, CanteenStaff, body.email):
        raise DuplicateResourceError("Staff already exists with this email")
    await _check_staff_canteen(db, body.canteen_id)
    staff = CanteenStaff(
        name=body.name,
        email=body.email,
        canteen_id=body.canteen_id,
        contact_number=body.contact_number,
        password_hash=hash_password(body.password),
        member_id=body.member_id,
    )
    db.add(staff)
    await db.commit()
    await db.refresh(staff)
    return staff


async def update_staff(
    db: AsyncSession, staff: CanteenStaff, body: StaffUpdate,
) -> CanteenStaff:
    if body.email and body.email != staff.email:
        if await _email_taken(db, CanteenStaff, body.email, exclude_id=staff.id):
            raise DuplicateResourceError(
                "Email is already in use by another staff member",
            )
        staff.email = body.email
    if body.canteen_id and body.canteen_id != staff.canteen_id:
        await _check_staff_canteen(db, body.canteen_id, exclude_id=staff.id)
        staff.canteen_id = body.canteen_id
    for field in ("name", "contact_number", "member_id"):
        value = getattr(body, field)
        if value is not None:
            setattr(staff, field, value)
    if body.password:
        staff.password_hash = hash_password(body.password)
    await db.commit()
    await db.refresh(staff, attribute_names=["canteen"])
    return staff


async def update_staff_profile(
    db: AsyncSession, staff: CanteenStaff, body: StaffProfileUpdate,
) -> CanteenStaff:
    return await update_staff(db, staff, StaffUpdate(
        name=body.name, email=body.email,
        contact_number=body.contact_number, password=body.password,
    ))


async def authenticate_staff(
    db: AsyncSession, email: str, password: str,
) -> CanteenStaff:
    staff = (
        await db.execute(select(CanteenStaff).where(CanteenStaff.email == email))
    ).scalar_one_or_none()
    if staff is None:
        raise ResourceNotFoundError("Canteen staff")
    if not verify_password(password, staff.password_hash):
        raise AuthenticationError("Invalid credentials")
    return staff
