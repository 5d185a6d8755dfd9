"""Tests for the application review workflow against the database."""
import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from leaderboard.errors import Conflict, InvalidArgument, NotFound, ReviewFailed
from leaderboard.models import Application, ApplicationStatus, Player, async_session_factory
from leaderboard.services import review
from leaderboard.services.applications import submit_application
from leaderboard.services.avatar import default_avatar
from leaderboard.services.review import MergeOutcome, merge_player, review_application


async def _submit(**overrides) -> Application:
    data = {
        "name": "Alice",
        "email": "a@x.com",
        "phone_number": "555",
        "nickname": "AceA",
        "account_name": "acc1",
        "total_win": 1_000_000,
    }
    data.update(overrides)
    async with async_session_factory() as session:
        return await submit_application(session, **data)


async def _review(application_id, decision) -> Application:
    async with async_session_factory() as session:
        return await review_application(session, application_id, decision)


async def _players() -> list[Player]:
    async with async_session_factory() as session:
        result = await session.execute(select(Player).order_by(Player.name))
        return list(result.scalars().all())


async def _status(application_id) -> str:
    async with async_session_factory() as session:
        return await session.scalar(select(Application.status).where(Application.id == application_id))


@pytest.mark.asyncio
async def test_approve_creates_player():
    """Approving a pending application creates a player named after the nickname."""
    app = await _submit()
    reviewed = await _review(app.id, "approved")
    assert reviewed.status == ApplicationStatus.APPROVED
    assert await _status(app.id) == "approved"
    players = await _players()
    assert len(players) == 1
    assert players[0].name == "AceA"
    assert players[0].total_win == 1_000_000
    assert players[0].avatar == default_avatar("AceA")


@pytest.mark.asyncio
async def test_approve_lower_claim_keeps_total():
    """A smaller claim for an existing player never lowers the total."""
    await _review((await _submit(total_win=1_000_000)).id, "approved")
    await _review((await _submit(total_win=500_000)).id, "approved")
    players = await _players()
    assert [(p.name, p.total_win) for p in players] == [("AceA", 1_000_000)]


@pytest.mark.asyncio
async def test_approve_equal_claim_keeps_total():
    await _review((await _submit(total_win=700)).id, "approved")
    await _review((await _submit(total_win=700)).id, "approved")
    players = await _players()
    assert [(p.name, p.total_win) for p in players] == [("AceA", 700)]


@pytest.mark.asyncio
async def test_approve_higher_claim_raises_total():
    await _review((await _submit(total_win=1_000_000)).id, "approved")
    await _review((await _submit(total_win=2_000_000)).id, "approved")
    players = await _players()
    assert [(p.name, p.total_win) for p in players] == [("AceA", 2_000_000)]


@pytest.mark.asyncio
async def test_reject_touches_no_player():
    """Rejecting never creates or modifies a player."""
    await _review((await _submit(total_win=100)).id, "approved")
    app = await _submit(total_win=9_999_999)
    reviewed = await _review(app.id, "rejected")
    assert reviewed.status == "rejected"
    players = await _players()
    assert [(p.name, p.total_win) for p in players] == [("AceA", 100)]

    other = await _submit(nickname="Nobody")
    await _review(other.id, "rejected")
    assert [p.name for p in await _players()] == ["AceA"]


@pytest.mark.asyncio
async def test_unknown_application_not_found():
    with pytest.raises(NotFound):
        await _review("does-not-exist", "approved")
    assert await _players() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("decision", ["pending", "APPROVED", "", None, 1])
async def test_invalid_decision_makes_no_writes(decision):
    app = await _submit()
    with pytest.raises(InvalidArgument):
        await _review(app.id, decision)
    assert await _status(app.id) == "pending"
    assert await _players() == []


@pytest.mark.asyncio
async def test_reapprove_is_conflict():
    """Approved is terminal: approving again is refused and changes nothing."""
    app = await _submit()
    await _review(app.id, "approved")
    with pytest.raises(Conflict):
        await _review(app.id, "approved")
    with pytest.raises(Conflict):
        await _review(app.id, "rejected")
    assert await _status(app.id) == "approved"
    players = await _players()
    assert [(p.name, p.total_win) for p in players] == [("AceA", 1_000_000)]


@pytest.mark.asyncio
async def test_rejected_cannot_be_approved():
    app = await _submit()
    await _review(app.id, "rejected")
    with pytest.raises(Conflict):
        await _review(app.id, "approved")
    assert await _status(app.id) == "rejected"
    assert await _players() == []


@pytest.mark.asyncio
async def test_merge_failure_rolls_back_and_retry_succeeds(monkeypatch):
    """A storage error during the merge leaves the application pending; the same call can be repeated."""
    app = await _submit()

    async def broken_merge(session, nickname, total_win):
        raise OperationalError("UPDATE players", {}, Exception("database is locked"))

    monkeypatch.setattr(review, "merge_player", broken_merge)
    with pytest.raises(ReviewFailed) as exc_info:
        await _review(app.id, "approved")
    assert exc_info.value.application_id == app.id
    assert await _status(app.id) == "pending"
    assert await _players() == []

    monkeypatch.undo()
    reviewed = await _review(app.id, "approved")
    assert reviewed.status == "approved"
    assert [(p.name, p.total_win) for p in await _players()] == [("AceA", 1_000_000)]


@pytest.mark.asyncio
async def test_merge_player_outcomes():
    async with async_session_factory() as session:
        assert await merge_player(session, "Zed", 10) == MergeOutcome.CREATED
        await session.commit()
    async with async_session_factory() as session:
        assert await merge_player(session, "Zed", 5) == MergeOutcome.UNCHANGED
        assert await merge_player(session, "Zed", 10) == MergeOutcome.UNCHANGED
        assert await merge_player(session, "Zed", 50) == MergeOutcome.RAISED
        await session.commit()
    assert [(p.name, p.total_win) for p in await _players()] == [("Zed", 50)]


@pytest.mark.asyncio
async def test_nickname_match_is_exact():
    """Players are matched by exact name; a different case is a different player."""
    await _review((await _submit(nickname="AceA", total_win=10)).id, "approved")
    await _review((await _submit(nickname="acea", total_win=20)).id, "approved")
    assert [(p.name, p.total_win) for p in await _players()] == [("AceA", 10), ("acea", 20)]


async def _seed_player(name, total_win):
    async with async_session_factory() as session:
        session.add(Player(name=name, total_win=total_win, avatar=default_avatar(name)))
        await session.commit()


@pytest.mark.asyncio
async def test_merge_recovers_when_player_appears_after_lookup(monkeypatch):
    """The player row shows up between the lookup and the insert: no duplicate, lower claim keeps the total."""
    await _seed_player("Z", 10)
    async with async_session_factory() as session:

        async def lookup_misses(*args, **kwargs):
            return None

        monkeypatch.setattr(session, "scalar", lookup_misses)
        assert await merge_player(session, "Z", 5) == MergeOutcome.UNCHANGED
        await session.commit()
    assert [(p.name, p.total_win) for p in await _players()] == [("Z", 10)]


@pytest.mark.asyncio
async def test_merge_recovers_and_raises_after_concurrent_insert(monkeypatch):
    """The first conditional update sees no row, the insert collides, the retried update raises the total."""
    await _seed_player("Z", 10)
    real_raise_total = review._raise_total
    calls = []

    async def raise_total_before_row_exists(session, name, total_win):
        calls.append(total_win)
        if len(calls) == 1:
            # Runs a real statement that matches nothing, as if the row were not there yet
            await real_raise_total(session, name, -1)
            return False
        return await real_raise_total(session, name, total_win)

    monkeypatch.setattr(review, "_raise_total", raise_total_before_row_exists)
    async with async_session_factory() as session:

        async def lookup_misses(*args, **kwargs):
            return None

        monkeypatch.setattr(session, "scalar", lookup_misses)
        assert await merge_player(session, "Z", 50) == MergeOutcome.RAISED
        await session.commit()
    assert calls == [50, 50]
    assert [(p.name, p.total_win) for p in await _players()] == [("Z", 50)]
