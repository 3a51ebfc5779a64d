from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Enum, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, TimestampMixin


class AdminActionStatus(str, PyEnum):
    SUCCESS = "success"
    FAILED = "failed"


class AdminAction(Base, TimestampMixin):
    """
    Audit trail of administrator actions.

    admin_id is kept as a plain column (no cascade) so the log survives
    deletion of the admin or of the target.
    """

    __tablename__ = "admin_actions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admin_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    action_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    target_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    target_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[AdminActionStatus] = mapped_column(
        Enum(AdminActionStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=AdminActionStatus.SUCCESS,
    )

    __table_args__ = (
        Index("ix_admin_actions_target", "target_type", "target_id"),
    )
