"""
Goal contribution engine.

A contribution is a signed amount: positive tops the goal up, negative
withdraws from it. Every contribution is logged as a GoalTransaction and
keeps the goal status in sync with its progress:

    ACTIVE    -> COMPLETED  when current_amount reaches target_amount
    COMPLETED -> ACTIVE     when a withdrawal drops it below target again

Progress milestones (20/50/80/100 %) are announced once per goal. The
current amount is not clamped to the target, so later withdrawals are
computed against what was actually contributed.
"""
import logging
import uuid
from decimal import Decimal, ROUND_FLOOR
from datetime import date
from typing import Optional, List, Tuple, Union
from sqlalchemy import insert
from sqlalchemy.dialects import sqlite, postgresql
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload
from app.core.exceptions import NotFoundError, ValidationError, parse_enum
from app.core.money import ZERO, MAX_AMOUNT, to_money, parse_money
from app.db.base import utcnow
from app.db.session import atomic
from app.models.goal import Goal, GoalTransaction, GoalNotification, GoalStatus, GoalSource
from app.services.ownership import get_owned

logger = logging.getLogger(__name__)

MILESTONES = (20, 50, 80, 100)

TOP_UP_NOTE = "Top-up"
WITHDRAWAL_NOTE = "Withdrawal"


def progress_percentage(amount: Decimal, target_amount: Decimal) -> int:
    """Progress towards the target in whole percent, rounded down."""
    target_amount = to_money(target_amount)
    if target_amount <= 0:
        return 0
    ratio = to_money(amount) * 100 / target_amount
    return int(ratio.to_integral_value(rounding=ROUND_FLOOR))


def crossed_milestones(
    old_amount: Decimal,
    new_amount: Decimal,
    target_amount: Decimal,
    signed_amount: Decimal
) -> List[int]:
    """
    Milestones passed on the way from old_amount to new_amount.
    
    Only top-ups announce milestones; withdrawals never do.
    """
    if signed_amount <= 0:
        return []
    old_percentage = progress_percentage(old_amount, target_amount)
    new_percentage = progress_percentage(new_amount, target_amount)
    return [m for m in MILESTONES if old_percentage < m <= new_percentage]


def _parse_amount(amount: Union[Decimal, int, float, str]) -> Decimal:
    value = parse_money(amount)
    if value == 0:
        raise ValidationError("Amount must not be zero", field="amount")
    return value


def _record_notifications(db: Session, goal_id: str, milestones: List[int]) -> None:
    """Insert one notification per milestone, skipping pairs that already exist."""
    if not milestones:
        return
    
    now = utcnow()
    rows = [
        {
            "id": str(uuid.uuid4()),
            "goal_id": goal_id,
            "milestone": milestone,
            "is_read": False,
            "created_at": now,
            "updated_at": now,
        }
        for milestone in milestones
    ]
    
    notifications = GoalNotification.__table__
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        stmt = sqlite.insert(notifications).values(rows).on_conflict_do_nothing(
            index_elements=["goal_id", "milestone"]
        )
    elif dialect == "postgresql":
        stmt = postgresql.insert(notifications).values(rows).on_conflict_do_nothing(
            index_elements=["goal_id", "milestone"]
        )
    elif dialect in ("mysql", "mariadb"):
        stmt = insert(notifications).values(rows).prefix_with("IGNORE")
    else:
        for row in rows:
            try:
                with db.begin_nested():
                    db.execute(insert(notifications).values(**row))
            except IntegrityError:
                logger.debug("Milestone %s already recorded for goal %s", row["milestone"], goal_id)
        return
    
    db.execute(stmt)


def contribute(
    db: Session,
    user_id: str,
    goal_id: str,
    amount: Union[Decimal, int, float, str],
    source: GoalSource = GoalSource.MANUAL,
    note: Optional[str] = None
) -> Tuple[Goal, List[int]]:
    """
    Apply a signed contribution to a goal.
    
    Args:
        db: Database session
        user_id: Id of the requesting user
        goal_id: Goal id
        amount: Positive to top up, negative to withdraw; must be non-zero
        source: Where the money came from
        note: Optional note; defaults to "Top-up" or "Withdrawal"
    
    Returns:
        (updated goal, milestones newly crossed by this contribution)
    
    Raises:
        NotFoundError: goal missing or owned by another user
        ValidationError: bad amount, or a withdrawal larger than the current amount
    """
    signed_amount = _parse_amount(amount)
    source = parse_enum(GoalSource, source, "source")
    
    with atomic(db):
        goal = get_owned(db, Goal, goal_id, user_id, lock=True)
        
        old_amount = to_money(goal.current_amount)
        new_amount = old_amount + signed_amount
        if new_amount < 0:
            logger.warning(
                "Rejected withdrawal of %s from goal %s holding %s", -signed_amount, goal.id, old_amount
            )
            raise ValidationError("Insufficient funds", field="amount")
        if new_amount > MAX_AMOUNT:
            raise ValidationError("Amount is too large", field="amount")
        
        target_amount = to_money(goal.target_amount)
        milestones = crossed_milestones(old_amount, new_amount, target_amount, signed_amount)
        
        db.add(GoalTransaction(
            goal_id=goal.id,
            amount=signed_amount,
            source=source,
            note=note or (TOP_UP_NOTE if signed_amount > 0 else WITHDRAWAL_NOTE),
            date=utcnow()
        ))
        
        was_completed = goal.status == GoalStatus.COMPLETED
        is_completed = new_amount >= target_amount
        goal.current_amount = new_amount
        goal.status = GoalStatus.COMPLETED if is_completed else GoalStatus.ACTIVE
        if is_completed and not (was_completed and goal.completed_at):
            goal.completed_at = utcnow()
        elif not is_completed:
            goal.completed_at = None
        
        _record_notifications(db, goal.id, milestones)
    
    db.refresh(goal)
    logger.info(
        "Goal %s: %s -> %s (%s), milestones %s", goal.id, old_amount, new_amount, source.value, milestones
    )
    return goal, milestones


def create_goal(
    db: Session,
    user_id: str,
    name: str,
    target_amount: Decimal,
    priority: int = 1,
    deadline: Optional[date] = None,
    image_url: Optional[str] = None
) -> Goal:
    """Create an active goal with nothing saved yet."""
    if not name or not name.strip():
        raise ValidationError("Goal name is required", field="name")
    target_amount = parse_money(target_amount, field="target_amount")
    if target_amount <= 0:
        raise ValidationError("Target amount must be positive", field="target_amount")
    if not 1 <= priority <= 3:
        raise ValidationError("Priority must be between 1 and 3", field="priority")
    
    with atomic(db):
        goal = Goal(
            user_id=user_id,
            name=name.strip(),
            target_amount=target_amount,
            current_amount=ZERO,
            priority=priority,
            deadline=deadline,
            image_url=image_url or None,
            status=GoalStatus.ACTIVE
        )
        db.add(goal)
    
    db.refresh(goal)
    logger.info("Goal %s created by user %s", goal.id, user_id)
    return goal


def delete_goal(db: Session, user_id: str, goal_id: str) -> bool:
    """Delete a goal together with its transactions and notifications."""
    with atomic(db):
        goal = get_owned(db, Goal, goal_id, user_id)
        db.delete(goal)
    
    logger.info("Goal %s deleted by user %s", goal_id, user_id)
    return True


def list_goals(db: Session, user_id: str, status: Optional[GoalStatus] = GoalStatus.ACTIVE) -> List[Goal]:
    """List the user's goals by priority; status None lists all."""
    query = db.query(Goal).options(selectinload(Goal.transactions)).filter(Goal.user_id == user_id)
    if status:
        query = query.filter(Goal.status == parse_enum(GoalStatus, status, "status"))
    return query.order_by(Goal.priority.asc(), Goal.created_at.asc()).all()


def list_notifications(db: Session, user_id: str, unread_only: bool = False) -> List[GoalNotification]:
    """Milestone notifications for all of the user's goals, newest first."""
    query = db.query(GoalNotification).join(
        Goal, GoalNotification.goal_id == Goal.id
    ).options(joinedload(GoalNotification.goal)).filter(Goal.user_id == user_id)
    if unread_only:
        query = query.filter(GoalNotification.is_read.is_(False))
    return query.order_by(GoalNotification.created_at.desc(), GoalNotification.milestone.desc()).all()


def mark_notification_read(db: Session, user_id: str, notification_id: str) -> GoalNotification:
    """Mark one of the user's milestone notifications as read."""
    with atomic(db):
        notification = db.query(GoalNotification).join(
            Goal, GoalNotification.goal_id == Goal.id
        ).filter(
            GoalNotification.id == notification_id,
            Goal.user_id == user_id
        ).first()
        if not notification:
            raise NotFoundError("Notification not found")
        notification.is_read = True
    
    db.refresh(notification)
    return notification
