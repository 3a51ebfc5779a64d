import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.actor_context import ActorContext
from app.models.admin_action import AdminActionStatus
from app.models.property import Property, PropertyStatus, RejectionCategory
from app.repositories.admin_action_repository import AdminActionRepository
from app.repositories.property_repository import PropertyRepository
from app.schemas.property_schemas import BulkOutcome
from app.core.exceptions import (
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    RentalMarketplaceException,
)

logger = logging.getLogger(__name__)


def format_rejection_reason(category: RejectionCategory, notes: Optional[str] = None) -> str:
    """Stored rejection reason: "<Category label>: <notes>", or just the label"""
    notes = (notes or "").strip()
    return f"{category.label}: {notes}" if notes else category.label


def bulk_outcome(succeeded: int, failed: int) -> BulkOutcome:
    if failed == 0:
        return BulkOutcome.SUCCESS
    if succeeded == 0:
        return BulkOutcome.FAILED
    return BulkOutcome.PARTIAL


class ModerationService:
    """
    Administrator review of submitted listings.

    Only PENDING listings can be approved or rejected. Every attempt,
    successful or not, is written to the admin activity log.
    """

    def __init__(self, db: Session):
        self.db = db
        self.property_repo = PropertyRepository(db)
        self.action_repo = AdminActionRepository(db)

    def _require_admin(self, context: ActorContext) -> None:
        if not context.is_admin():
            raise ForbiddenException("Only administrators can moderate properties")

    def _get_pending(self, property_id: int) -> Property:
        property_ = self.property_repo.get_by_id(property_id)
        if not property_:
            raise NotFoundException(f"Property {property_id} not found")
        if property_.status != PropertyStatus.PENDING:
            raise InvalidTransitionException(
                f"Property {property_id} is {property_.status.value}, only pending listings can be moderated"
            )
        return property_

    def _log_failure(
        self, context: ActorContext, action_type: str, property_id: int, error: str
    ) -> None:
        self.action_repo.log(
            admin_id=context.user_id,
            action_type=action_type,
            target_type="property",
            target_id=property_id,
            details={"error": error},
            status=AdminActionStatus.FAILED,
        )

    def _approve(self, property_id: int, context: ActorContext) -> Property:
        property_ = self._get_pending(property_id)
        property_.status = PropertyStatus.APPROVED
        property_.approved_at = datetime.now(timezone.utc)
        property_.approved_by = context.user_id
        property_.rejection_reason = None
        property_ = self.property_repo.update(property_)

        self.action_repo.log(
            admin_id=context.user_id,
            action_type="approve_property",
            target_type="property",
            target_id=property_.id,
            details={"title": property_.title},
        )
        logger.info("Admin %s approved property %s", context.user_id, property_.id)
        return property_

    def _reject(
        self,
        property_id: int,
        category: RejectionCategory,
        notes: Optional[str],
        context: ActorContext,
    ) -> Property:
        property_ = self._get_pending(property_id)
        property_.status = PropertyStatus.REJECTED
        property_.rejection_reason = format_rejection_reason(category, notes)
        property_.approved_at = None
        property_.approved_by = None
        property_ = self.property_repo.update(property_)

        self.action_repo.log(
            admin_id=context.user_id,
            action_type="reject_property",
            target_type="property",
            target_id=property_.id,
            details={"title": property_.title, "reason": property_.rejection_reason},
        )
        logger.info(
            "Admin %s rejected property %s (%s)", context.user_id, property_.id, category.value
        )
        return property_

    def _run_logged(
        self, action_type: str, property_id: int, context: ActorContext, action: Callable
    ) -> Property:
        try:
            return action()
        except RentalMarketplaceException as exc:
            self.db.rollback()
            self._log_failure(context, action_type, property_id, str(exc))
            raise

    def approve_property(self, property_id: int, context: ActorContext) -> Property:
        """
        Approve a pending listing.

        Raises:
            ForbiddenException: Caller is not an administrator
            NotFoundException: Property not found
            InvalidTransitionException: Property is not pending
        """
        self._require_admin(context)
        return self._run_logged(
            "approve_property", property_id, context, lambda: self._approve(property_id, context)
        )

    def reject_property(
        self,
        property_id: int,
        category: RejectionCategory,
        notes: Optional[str],
        context: ActorContext,
    ) -> Property:
        """Reject a pending listing with a category and optional notes"""
        self._require_admin(context)
        return self._run_logged(
            "reject_property",
            property_id,
            context,
            lambda: self._reject(property_id, category, notes, context),
        )

    def _bulk(
        self,
        property_ids: list[int],
        action: Callable[[int], Property],
        action_type: str,
        context: ActorContext,
    ) -> dict:
        """
        Apply `action` to each id in order, committing each one separately.

        A failing item is rolled back and reported; it does not stop the
        remaining items. Database errors are reported per item as well.
        """
        succeeded: list[int] = []
        failed: list[dict] = []

        # dict.fromkeys keeps order and drops duplicates
        for property_id in dict.fromkeys(property_ids):
            try:
                action(property_id)
            except (RentalMarketplaceException, SQLAlchemyError) as exc:
                self.db.rollback()
                error = str(exc) if isinstance(exc, RentalMarketplaceException) else "Database error"
                self._log_failure(context, action_type, property_id, error)
                logger.warning(
                    "Bulk %s failed for property %s: %s", action_type, property_id, exc
                )
                failed.append({"property_id": property_id, "error": error})
            else:
                succeeded.append(property_id)

        outcome = bulk_outcome(len(succeeded), len(failed))
        logger.info(
            "Bulk %s by admin %s: %d succeeded, %d failed",
            action_type,
            context.user_id,
            len(succeeded),
            len(failed),
        )
        return {"status": outcome, "succeeded": succeeded, "failed": failed}

    def bulk_approve(self, property_ids: list[int], context: ActorContext) -> dict:
        self._require_admin(context)
        return self._bulk(
            property_ids,
            lambda property_id: self._approve(property_id, context),
            "approve_property",
            context,
        )

    def bulk_reject(
        self,
        property_ids: list[int],
        category: RejectionCategory,
        notes: Optional[str],
        context: ActorContext,
    ) -> dict:
        self._require_admin(context)
        return self._bulk(
            property_ids,
            lambda property_id: self._reject(property_id, category, notes, context),
            "reject_property",
            context,
        )

    def list_properties(
        self,
        context: ActorContext,
        status: Optional[PropertyStatus] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Property], int]:
        """Moderation queue: every listing, optionally filtered by status"""
        self._require_admin(context)
        return self.property_repo.get_with_filters(
            status=status, search=search, limit=limit, offset=offset
        )

    def get_property_counts(self, context: ActorContext) -> dict:
        self._require_admin(context)
        counts = self.property_repo.count_by_status()
        return {
            "all": sum(counts.values()),
            "pending": counts[PropertyStatus.PENDING],
            "approved": counts[PropertyStatus.APPROVED],
            "rejected": counts[PropertyStatus.REJECTED],
        }
