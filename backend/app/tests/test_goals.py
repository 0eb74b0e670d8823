"""
Tests for the goal contribution engine.
"""
from decimal import Decimal
import pytest
from app.core.exceptions import NotFoundError, ValidationError
from app.models.goal import GoalNotification, GoalSource, GoalStatus, GoalTransaction
from app.services import goal_service
from app.services.goal_service import crossed_milestones, progress_percentage


@pytest.fixture
def goal(db, user):
    return goal_service.create_goal(db, user.id, name="Vacation", target_amount=Decimal("1000"))


def _notification_milestones(db, goal_id):
    rows = db.query(GoalNotification).filter(GoalNotification.goal_id == goal_id).all()
    return sorted(n.milestone for n in rows)


class TestMilestones:
    """Pure milestone arithmetic."""
    
    def test_percentage_rounds_down(self):
        assert progress_percentage(Decimal("199.99"), Decimal("1000")) == 19
        assert progress_percentage(Decimal("1050"), Decimal("1000")) == 105
    
    def test_crossed_milestones(self):
        assert crossed_milestones(Decimal("0"), Decimal("200"), Decimal("1000"), Decimal("200")) == [20]
        assert crossed_milestones(Decimal("200"), Decimal("850"), Decimal("1000"), Decimal("650")) == [50, 80]
        assert crossed_milestones(Decimal("0"), Decimal("1000"), Decimal("1000"), Decimal("1000")) == [20, 50, 80, 100]
        assert crossed_milestones(Decimal("210"), Decimal("250"), Decimal("1000"), Decimal("40")) == []
    
    def test_withdrawals_never_cross_milestones(self):
        assert crossed_milestones(Decimal("900"), Decimal("100"), Decimal("1000"), Decimal("-800")) == []


def test_contribution_scenario(db, user, goal):
    """0 -> 200 -> 850 -> 1050 against a target of 1000."""
    updated, milestones = goal_service.contribute(db, user.id, goal.id, Decimal("200"), GoalSource.MANUAL)
    assert updated.current_amount == Decimal("200")
    assert milestones == [20]
    assert updated.status == GoalStatus.ACTIVE
    assert updated.completed_at is None
    
    updated, milestones = goal_service.contribute(db, user.id, goal.id, Decimal("650"))
    assert updated.current_amount == Decimal("850")
    assert milestones == [50, 80]
    assert updated.status == GoalStatus.ACTIVE
    
    updated, milestones = goal_service.contribute(db, user.id, goal.id, Decimal("200"))
    assert updated.current_amount == Decimal("1050")
    assert milestones == [100]
    assert updated.status == GoalStatus.COMPLETED
    assert updated.completed_at is not None
    
    assert _notification_milestones(db, goal.id) == [20, 50, 80, 100]
    notes = sorted(t.note for t in db.query(GoalTransaction).filter(GoalTransaction.goal_id == goal.id))
    assert notes == ["Top-up", "Top-up", "Top-up"]


def test_withdrawal_reopens_completed_goal(db, user, goal):
    goal_service.contribute(db, user.id, goal.id, Decimal("1000"))
    updated, milestones = goal_service.contribute(db, user.id, goal.id, Decimal("-300"), note="Car repair")
    
    assert milestones == []
    assert updated.current_amount == Decimal("700")
    assert updated.status == GoalStatus.ACTIVE
    assert updated.completed_at is None
    last = db.query(GoalTransaction).filter(GoalTransaction.amount < 0).one()
    assert last.amount == Decimal("-300")
    assert last.note == "Car repair"


def test_completion_time_is_kept_on_further_top_ups(db, user, goal):
    completed, _ = goal_service.contribute(db, user.id, goal.id, Decimal("1000"))
    completed_at = completed.completed_at
    
    updated, milestones = goal_service.contribute(db, user.id, goal.id, Decimal("10"))
    assert milestones == []
    assert updated.status == GoalStatus.COMPLETED
    assert updated.completed_at == completed_at


def test_withdrawal_guard(db, user, goal):
    goal_service.contribute(db, user.id, goal.id, Decimal("100"))
    
    with pytest.raises(ValidationError) as exc:
        goal_service.contribute(db, user.id, goal.id, Decimal("-100.01"))
    assert exc.value.message == "Insufficient funds"
    
    db.refresh(goal)
    assert goal.current_amount == Decimal("100")
    assert db.query(GoalTransaction).filter(GoalTransaction.goal_id == goal.id).count() == 1


def test_withdraw_everything(db, user, goal):
    goal_service.contribute(db, user.id, goal.id, Decimal("100"))
    updated, _ = goal_service.contribute(db, user.id, goal.id, Decimal("-100"))
    assert updated.current_amount == Decimal("0")
    assert updated.status == GoalStatus.ACTIVE


def test_milestone_notified_once(db, user, goal):
    """Crossing 50 % twice leaves a single notification row."""
    goal_service.contribute(db, user.id, goal.id, Decimal("600"))
    goal_service.contribute(db, user.id, goal.id, Decimal("-200"))
    _, milestones = goal_service.contribute(db, user.id, goal.id, Decimal("200"))
    
    assert milestones == [50]
    assert _notification_milestones(db, goal.id) == [20, 50]


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("0.001"), "NaN", "Infinity", "abc", "1e30", None])
def test_rejects_bad_amounts(db, user, goal, amount):
    with pytest.raises(ValidationError):
        goal_service.contribute(db, user.id, goal.id, amount)


def test_rejects_unknown_source(db, user, goal):
    with pytest.raises(ValidationError) as exc:
        goal_service.contribute(db, user.id, goal.id, Decimal("10"), source="BOGUS")
    assert exc.value.field == "source"
    db.refresh(goal)
    assert goal.current_amount == Decimal("0")
    assert db.query(GoalTransaction).count() == 0


def test_rejects_balance_beyond_column_limit(db, user, goal):
    goal_service.contribute(db, user.id, goal.id, Decimal("9999999999999"))
    with pytest.raises(ValidationError):
        goal_service.contribute(db, user.id, goal.id, Decimal("1"))


def test_other_users_goal_is_not_found(db, other_user, goal):
    with pytest.raises(NotFoundError):
        goal_service.contribute(db, other_user.id, goal.id, Decimal("10"))
    with pytest.raises(NotFoundError):
        goal_service.delete_goal(db, other_user.id, goal.id)


def test_delete_goal_cascades(db, user, goal):
    goal_service.contribute(db, user.id, goal.id, Decimal("500"))
    assert goal_service.delete_goal(db, user.id, goal.id) is True
    
    assert db.query(GoalTransaction).count() == 0
    assert db.query(GoalNotification).count() == 0


def test_create_goal_validation(db, user):
    with pytest.raises(ValidationError):
        goal_service.create_goal(db, user.id, name="Bike", target_amount=Decimal("0"))
    with pytest.raises(ValidationError):
        goal_service.create_goal(db, user.id, name="Bike", target_amount=Decimal("10"), priority=4)
    with pytest.raises(ValidationError):
        goal_service.create_goal(db, user.id, name="  ", target_amount=Decimal("10"))
    with pytest.raises(ValidationError) as exc:
        goal_service.create_goal(db, user.id, name="Yacht", target_amount="1e30")
    assert exc.value.field == "target_amount"


def test_goal_api_flow(client, auth_headers, other_auth_headers):
    response = client.post(
        "/api/goals",
        json={"name": "Laptop", "target_amount": 1000, "priority": 2, "deadline": "2026-12-31"},
        headers=auth_headers
    )
    assert response.status_code == 201
    goal_id = response.json()["id"]
    assert response.json()["status"] == "ACTIVE"
    
    response = client.post(
        "/api/goals/add",
        json={"goal_id": goal_id, "amount": 550, "source": "FROM_SAVINGS"},
        headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["notifications"] == [20, 50]
    assert data["goal"]["percentage"] == 55
    assert data["goal"]["transactions"][0]["source"] == "FROM_SAVINGS"
    
    response = client.post(
        "/api/goals/add",
        json={"goal_id": goal_id, "amount": -600},
        headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient funds"
    
    response = client.post("/api/goals/add", json={"goal_id": goal_id, "amount": 0}, headers=auth_headers)
    assert response.status_code == 400
    
    response = client.post("/api/goals/add", json={"goal_id": goal_id, "amount": 10}, headers=other_auth_headers)
    assert response.status_code == 404
    
    goals = client.get("/api/goals", headers=auth_headers).json()
    assert [g["id"] for g in goals] == [goal_id]
    assert client.get("/api/goals?status=COMPLETED", headers=auth_headers).json() == []
    
    notifications = client.get("/api/goals/notifications", headers=auth_headers).json()
    assert sorted(n["milestone"] for n in notifications) == [20, 50]
    assert all(n["goal_name"] == "Laptop" for n in notifications)
    
    response = client.patch(f"/api/goals/notifications/{notifications[0]['id']}/read", headers=auth_headers)
    assert response.status_code == 200
    unread = client.get("/api/goals/notifications?unread=true", headers=auth_headers).json()
    assert len(unread) == 1
    
    assert client.delete(f"/api/goals/{goal_id}", headers=other_auth_headers).status_code == 404
    assert client.delete(f"/api/goals/{goal_id}", headers=auth_headers).json() == {"success": True}
    assert client.get("/api/goals", headers=auth_headers).json() == []


def test_huge_amounts_are_rejected_by_api(client, auth_headers):
    response = client.post("/api/goals", json={"name": "Yacht", "target_amount": "1e30"}, headers=auth_headers)
    assert response.status_code == 422
    
    goal_id = client.post(
        "/api/goals", json={"name": "Laptop", "target_amount": 1000}, headers=auth_headers
    ).json()["id"]
    response = client.post("/api/goals/add", json={"goal_id": goal_id, "amount": "1e30"}, headers=auth_headers)
    assert response.status_code == 422
    response = client.post("/api/goals/add", json={"goal_id": goal_id, "amount": "-1e30"}, headers=auth_headers)
    assert response.status_code == 422
    
    goal = client.get("/api/goals", headers=auth_headers).json()[0]
    assert Decimal(goal["current_amount"]) == Decimal("0")
    assert goal["transactions"] == []


def test_list_goals_by_status(client, auth_headers):
    done = client.post("/api/goals", json={"name": "Phone", "target_amount": 100}, headers=auth_headers).json()
    open_goal = client.post("/api/goals", json={"name": "Car", "target_amount": 5000}, headers=auth_headers).json()
    client.post("/api/goals/add", json={"goal_id": done["id"], "amount": 100}, headers=auth_headers)
    
    active = client.get("/api/goals", headers=auth_headers).json()
    assert [g["id"] for g in active] == [open_goal["id"]]
    completed = client.get("/api/goals?status=completed", headers=auth_headers).json()
    assert [g["id"] for g in completed] == [done["id"]]
    everything = client.get("/api/goals?status=all", headers=auth_headers).json()
    assert sorted(g["id"] for g in everything) == sorted([done["id"], open_goal["id"]])
    
    response = client.get("/api/goals?status=ARCHIVED", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "status"
