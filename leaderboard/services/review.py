"""Application review workflow: status transitions and promotion into the player table.

Reviewing an application is a single transaction:

1. compare-and-set ``status`` from ``pending`` to the decision,
2. on approval, merge the claim into the player whose name equals the
   application's nickname, never lowering that player's total,
3. commit.

Any storage failure rolls both writes back, leaving the application
``pending`` so the admin can simply repeat the call.
"""
from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboard.errors import Conflict, InvalidArgument, NotFound, ReviewFailed
from leaderboard.models import Application, ApplicationStatus, Player
from leaderboard.services.avatar import default_avatar

logger = logging.getLogger("leaderboard.review")

# Only pending applications move, and only to one of these; both are terminal.
DECISIONS = (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED)


class MergeOutcome:
    CREATED = "created"
    RAISED = "raised"
    UNCHANGED = "unchanged"


def validate_decision(decision) -> str:
    """Return ``decision`` if it is a review outcome, else raise InvalidArgument."""
    if not isinstance(decision, str) or decision not in DECISIONS:
        raise InvalidArgument(f"Invalid status {decision!r}; expected 'approved' or 'rejected'")
    return decision


async def _raise_total(session: AsyncSession, name: str, total_win: int) -> bool:
    """Set the player's total to ``total_win`` only if that is higher. Returns True if a row changed."""
    result = await session.execute(
        update(Player)
        .where(Player.name == name, Player.total_win < total_win)
        .values(total_win=total_win)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def merge_player(session: AsyncSession, nickname: str, total_win: int) -> str:
    """Reconcile an approved claim with the player named ``nickname``.

    Creates the player if missing, raises its total if the claim is higher,
    otherwise leaves it alone. Does not commit.
    """
    if await _raise_total(session, nickname, total_win):
        return MergeOutcome.RAISED
    existing_id = await session.scalar(select(Player.id).where(Player.name == nickname))
    if existing_id is not None:
        return MergeOutcome.UNCHANGED
    try:
        async with session.begin_nested():
            session.add(Player(name=nickname, total_win=total_win, avatar=default_avatar(nickname)))
    except IntegrityError:
        # Another approval inserted the same name after our lookup
        logger.info("Player %r created concurrently; merging claim into it", nickname)
        if await _raise_total(session, nickname, total_win):
            return MergeOutcome.RAISED
        return MergeOutcome.UNCHANGED
    return MergeOutcome.CREATED


async def review_application(session: AsyncSession, application_id: str, decision) -> Application:
    """Approve or reject a pending application, promoting it into a player on approval.

    Raises InvalidArgument for an unknown decision, NotFound for an unknown id,
    Conflict if the application was already reviewed, and ReviewFailed if the
    storage layer fails (nothing is persisted in that case).
    """
    decision = validate_decision(decision)
    try:
        result = await session.execute(
            update(Application)
            .where(Application.id == application_id, Application.status == ApplicationStatus.PENDING)
            .values(status=decision)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            current = await session.scalar(select(Application.status).where(Application.id == application_id))
            await session.rollback()
            if current is None:
                raise NotFound("Application not found")
            raise Conflict(f"Application has already been {current}")

        application = await session.get(Application, application_id, populate_existing=True)
        outcome = None
        if decision == ApplicationStatus.APPROVED:
            outcome = await merge_player(session, application.nickname, application.total_win)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Review of application %s rolled back", application_id)
        raise ReviewFailed(application_id) from e

    if outcome is None:
        logger.info("Application %s rejected", application_id)
    else:
        logger.info(
            "Application %s approved: player %r %s (claim %d)",
            application_id,
            application.nickname,
            outcome,
            application.total_win,
        )
    return application
