"""
Goal routes: goals, contributions and milestone notifications.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db.session import get_db
from app.models.user import User
from app.models.goal import Goal, GoalStatus
from app.schemas.goal import (
    GoalCreate, GoalContribution, GoalResponse, GoalContributionResult,
    GoalTransactionResponse, GoalNotificationResponse
)
from app.api.dependencies import get_current_user
from app.services import goal_service

router = APIRouter(prefix="/goals", tags=["goals"])

RECENT_TRANSACTIONS = 10
ALL_GOALS = "all"


def _to_response(goal: Goal, limit: Optional[int] = None) -> GoalResponse:
    transactions = goal.transactions[:limit] if limit else goal.transactions
    return GoalResponse(
        id=goal.id,
        user_id=goal.user_id,
        name=goal.name,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        image_url=goal.image_url,
        priority=goal.priority,
        deadline=goal.deadline,
        status=goal.status,
        completed_at=goal.completed_at,
        percentage=goal_service.progress_percentage(goal.current_amount, goal.target_amount),
        transactions=[GoalTransactionResponse.model_validate(t) for t in transactions],
        created_at=goal.created_at
    )


@router.get("", response_model=List[GoalResponse])
async def get_goals(
    status: str = Query(GoalStatus.ACTIVE.value),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List goals with a given status (active by default, "all" for every goal), by priority."""
    goal_status = None if status.lower() == ALL_GOALS else status.upper()
    return [_to_response(goal) for goal in goal_service.list_goals(db, current_user.id, goal_status)]


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_data: GoalCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a goal."""
    goal = goal_service.create_goal(
        db,
        current_user.id,
        name=goal_data.name,
        target_amount=goal_data.target_amount,
        priority=goal_data.priority,
        deadline=goal_data.deadline,
        image_url=goal_data.image_url
    )
    return _to_response(goal)


@router.post("/add", response_model=GoalContributionResult)
async def add_to_goal(
    contribution: GoalContribution,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Top up (positive amount) or withdraw from (negative amount) a goal."""
    goal, milestones = goal_service.contribute(
        db,
        current_user.id,
        contribution.goal_id,
        contribution.amount,
        source=contribution.source,
        note=contribution.note
    )
    return {"goal": _to_response(goal, limit=RECENT_TRANSACTIONS), "notifications": milestones}


@router.get("/notifications", response_model=List[GoalNotificationResponse])
async def get_notifications(
    unread: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List milestone notifications."""
    notifications = goal_service.list_notifications(db, current_user.id, unread_only=unread)
    return [
        GoalNotificationResponse(
            id=n.id,
            goal_id=n.goal_id,
            goal_name=n.goal.name,
            milestone=n.milestone,
            is_read=n.is_read,
            created_at=n.created_at
        )
        for n in notifications
    ]


@router.patch("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark a milestone notification as read."""
    goal_service.mark_notification_read(db, current_user.id, notification_id)
    return {"success": True}


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a goal with its history and notifications."""
    return {"success": goal_service.delete_goal(db, current_user.id, goal_id)}
