from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.models.admin_action import AdminAction, AdminActionStatus


class AdminActionRepository:
    """Repository for the admin activity log"""

    def __init__(self, db: Session):
        self.db = db

    def log(
        self,
        admin_id: int,
        action_type: str,
        target_type: Optional[str] = None,
        target_id: Optional[int] = None,
        details: Optional[dict] = None,
        status: AdminActionStatus = AdminActionStatus.SUCCESS,
    ) -> AdminAction:
        """Append an entry to the activity log and commit it"""
        action = AdminAction(
            admin_id=admin_id,
            action_type=action_type,
            target_type=target_type,
            target_id=target_id,
            details=details or {},
            status=status,
        )
        self.db.add(action)
        self.db.commit()
        self.db.refresh(action)
        return action

    def get_with_filters(
        self,
        action_type: Optional[str] = None,
        admin_id: Optional[int] = None,
        target_type: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 100,
    ) -> list[AdminAction]:
        """Newest-first activity log with optional filters"""
        query = self.db.query(AdminAction)

        if action_type is not None:
            query = query.filter(AdminAction.action_type == action_type)

        if admin_id is not None:
            query = query.filter(AdminAction.admin_id == admin_id)

        if target_type is not None:
            query = query.filter(AdminAction.target_type == target_type)

        if start is not None:
            query = query.filter(AdminAction.created_at >= start)

        if end is not None:
            query = query.filter(AdminAction.created_at <= end)

        return query.order_by(AdminAction.created_at.desc(), AdminAction.id.desc()).limit(limit).all()
