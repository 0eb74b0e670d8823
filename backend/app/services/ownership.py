"""
Ownership checks shared by every service.

A row is visible to a user only through its parent chain:
category -> budget -> user, goal -> user, savings -> user,
transaction -> user. Missing rows and rows owned by someone else are
reported the same way so that ids of other users' data do not leak.
"""
from typing import Type, TypeVar
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError
from app.models.budget import Budget, Category

ModelT = TypeVar("ModelT")


def belongs_to(entity, user_id: str) -> bool:
    """Return True if the entity is owned by the given user."""
    if entity is None:
        return False
    if isinstance(entity, Category):
        return entity.budget is not None and entity.budget.user_id == user_id
    return getattr(entity, "user_id", None) == user_id


def get_owned(
    db: Session,
    model: Type[ModelT],
    entity_id: str,
    user_id: str,
    lock: bool = False
) -> ModelT:
    """
    Load an entity by id and check it belongs to the user.
    
    Args:
        db: Database session
        model: ORM model class (Category, Budget, Goal, Savings, Transaction)
        entity_id: Entity id
        user_id: Id of the requesting user
        lock: Take a row lock (SELECT ... FOR UPDATE) for a read-modify-write
    
    Raises:
        NotFoundError: the entity does not exist or is owned by another user
    """
    query = db.query(model).filter(model.id == entity_id)
    if model is Category:
        query = query.join(Budget, Category.budget_id == Budget.id).filter(Budget.user_id == user_id)
    else:
        query = query.filter(model.user_id == user_id)
    if lock:
        query = query.with_for_update()
    
    entity = query.first()
    if not belongs_to(entity, user_id):
        raise NotFoundError(f"{model.__name__} not found")
    return entity
