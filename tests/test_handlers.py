"""
Handler-level tests: argument parsing, reply texts, and the spin/grant
handlers driven with a stand-in message.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from lootbox.config import Settings
from lootbox.database.models import Content, ContentType, RarityTier
from lootbox.database.repo import users as users_repo
from lootbox.handlers.admin.grant import grant_cmd
from lootbox.handlers.admin.dashboard import activity_cmd, adminstats_cmd
from lootbox.handlers.admin.roles import demote_cmd, promote_cmd
from lootbox.handlers.user.achievements import achievements_cmd
from lootbox.handlers.user.collection import next_page_command, parse_collection_args
from lootbox.handlers.user.spin import _open
from lootbox.services.collection import CollectionStats
from lootbox.services.entitlement import Entitlement
from lootbox.services.errors import DailyLimitReached, PersistenceFailure
from lootbox.services.lootbox import SpinOutcome
from lootbox.services.rarity import classify
from lootbox.utils import texts
from lootbox.utils.middleware import DbSessionMiddleware
from tests.conftest import EPIC

RESET = datetime(2026, 10, 20, tzinfo=timezone.utc)


def make_message(telegram_id: int = 1001, chat_type: str = "private"):
    return SimpleNamespace(
        from_user=SimpleNamespace(
            id=telegram_id,
            username=f"user{telegram_id}",
            first_name="Ann",
            last_name=None,
        ),
        chat=SimpleNamespace(type=chat_type),
        answer=AsyncMock(),
    )


def sent_text(message) -> str:
    return message.answer.await_args.args[0]


def anora() -> Content:
    return Content(
        type=ContentType.MOVIE,
        title="Anora <3",
        year=2024,
        critics_score=93,
        audience_score=68,
        imdb_rating=7.6,
        description=None,
    )


class TestParseCollectionArgs:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, (None, None, 1)),
            ("", (None, None, 1)),
            ("movie", (ContentType.MOVIE, None, 1)),
            ("series epic 3", (ContentType.SERIES, RarityTier.EPIC, 3)),
            ("2 Mythic", (None, RarityTier.MYTHIC, 2)),
            ("0 banana", (None, None, 1)),
            ("²", (None, None, 1)),
            ("series ³ epic", (ContentType.SERIES, RarityTier.EPIC, 1)),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_collection_args(raw) == expected

    def test_next_page_keeps_filters(self):
        cmd = next_page_command(ContentType.SERIES, RarityTier.EPIC, 2)

        assert cmd == "/collection series epic 2"
        assert parse_collection_args(cmd.split(" ", 1)[1]) == (ContentType.SERIES, RarityTier.EPIC, 2)
        assert next_page_command(None, None, 3) == "/collection 3"


class TestTexts:
    def test_new_unlock(self):
        out = SpinOutcome(
            content=anora(), quality_score=86, rarity=classify(86),
            was_new_unlock=True, spins_remaining=2, total_unlocks=4,
        )
        text = texts.spin_outcome(out)

        assert "💎 <b>EPIC</b> 🎬" in text
        assert "Anora &lt;3 (2024)" in text
        assert "New unlock!</b> (4 in your collection)" in text
        assert "Spins left: <b>2</b>" in text
        assert "Where to watch" not in text

    def test_platforms_and_genres(self):
        content = anora()
        content.platforms_json = '["Hulu", "Apple TV"]'
        content.genres_json = '["Drama", "Comedy & Romance"]'
        out = SpinOutcome(
            content=content, quality_score=86, rarity=classify(86),
            was_new_unlock=True, spins_remaining=2,
        )
        text = texts.spin_outcome(out)

        assert "📺 Where to watch: Hulu, Apple TV" in text
        assert "🎭 Drama, Comedy &amp; Romance" in text

    def test_duplicate(self):
        out = SpinOutcome(
            content=anora(), quality_score=86, rarity=classify(86),
            was_new_unlock=False, spins_remaining=0,
        )
        assert "Already in your collection" in texts.spin_outcome(out)

    def test_guest(self):
        out = SpinOutcome(
            content=anora(), quality_score=86, rarity=classify(86),
            was_new_unlock=True, spins_remaining=0,
        )
        text = texts.spin_outcome(out, guest=True)

        assert "Preview only" in text
        assert "Spins left" not in text

    def test_limit_reached(self):
        text = texts.limit_reached(DailyLimitReached(reset_at=RESET, daily_limit=3))

        assert "Daily spin limit reached" in text
        assert "3 new spins at <b>2026-10-20 00:00 UTC</b>" in text

    def test_status(self):
        e = Entitlement(
            user_id=1, used=1, remaining=4, daily_limit=3,
            admin_override=2, reset_date=RESET.date(), next_reset_at=RESET,
        )
        text = texts.spin_status(e)

        assert "Used today: <b>1/3</b>" in text
        assert "Bonus spins: <b>2</b>" in text

    def test_collection_stats(self):
        s = CollectionStats(total_unlocks=2, total_spins=5, by_tier={RarityTier.MYTHIC: 1, RarityTier.RARE: 1})
        text = texts.collection_stats(s)

        assert "Epic or better: <b>1</b>" in text
        assert "🌟 MYTHIC: 1" in text
        assert "⚪ COMMON: 0" in text


class TestSpinHandler:
    @pytest.mark.asyncio
    async def test_success_reply(self, session, service, make_user, make_content):
        await make_user()
        await make_content("Anora", EPIC)
        message = make_message()

        await _open(message, session, service, ContentType.MOVIE)

        text = sent_text(message)
        assert "EPIC" in text and "Anora" in text
        assert "reply_markup" in message.answer.await_args.kwargs

    @pytest.mark.asyncio
    async def test_limit_reply(self, session, make_user):
        await make_user()
        svc = SimpleNamespace(
            open_lootbox=AsyncMock(side_effect=DailyLimitReached(reset_at=RESET, daily_limit=3))
        )
        message = make_message()

        await _open(message, session, svc, ContentType.MOVIE)

        assert "2026-10-20 00:00 UTC" in sent_text(message)

    @pytest.mark.asyncio
    async def test_bad_type_reply(self, session, service, make_user):
        await make_user()
        message = make_message(chat_type="group")

        await _open(message, session, service, "anime")

        assert sent_text(message).startswith("Usage: /spin")
        assert message.answer.await_args.kwargs["reply_markup"] is None

    @pytest.mark.asyncio
    async def test_empty_catalog_reply(self, session, service, make_user):
        await make_user()
        message = make_message()

        await _open(message, session, service, ContentType.SERIES)

        assert "No series boxes" in sent_text(message)

    @pytest.mark.asyncio
    async def test_store_failure_reply(self, session, make_user):
        await make_user()
        svc = SimpleNamespace(open_lootbox=AsyncMock(side_effect=PersistenceFailure("x")))
        message = make_message()

        await _open(message, session, svc, ContentType.MOVIE)

        assert "No spin was used" in sent_text(message)


class TestGrantHandler:
    @pytest.mark.asyncio
    async def test_root_admin_grants(self, session, service, make_user):
        await make_user(telegram_id=1)
        target = await make_user(telegram_id=1002)
        settings = Settings(bot_token="x", root_admin_ids=(1,))
        message = make_message(telegram_id=1)

        await grant_cmd(message, SimpleNamespace(args="@user1002 2"), session, settings, service)

        assert "They now have 2" in sent_text(message)
        assert (await users_repo.get_user(session, target.id)).admin_override_spins == 2

    @pytest.mark.asyncio
    async def test_non_admin_refused(self, session, service, make_user):
        target = await make_user(telegram_id=1002)
        settings = Settings(bot_token="x")
        message = make_message(telegram_id=1002)

        await grant_cmd(message, SimpleNamespace(args="1002 5"), session, settings, service)

        assert "Admins only" in sent_text(message)
        assert (await users_repo.get_user(session, target.id)).admin_override_spins == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", ["", "@user1002", "@user1002 lots", "@user1002 0"])
    async def test_bad_args(self, session, service, make_user, args):
        await make_user(telegram_id=1)
        await make_user(telegram_id=1002)
        settings = Settings(bot_token="x", root_admin_ids=(1,))
        message = make_message(telegram_id=1)

        await grant_cmd(message, SimpleNamespace(args=args), session, settings, service)

        assert "❌" in sent_text(message) or "Usage" in sent_text(message)


class TestMiddleware:
    @pytest.mark.asyncio
    async def test_injects_session_and_user(self, db):
        seen = {}

        async def handler(event, data):
            seen["user"] = data["db_user"]
            seen["session"] = data["session"]
            return "handled"

        event = make_message(telegram_id=777)
        result = await DbSessionMiddleware(db)(handler, event, {})

        assert result == "handled"
        assert seen["user"].telegram_id == 777
        async with db.session() as s:
            assert (await users_repo.find_user_by_ref(s, "@user777")) is not None

    @pytest.mark.asyncio
    async def test_user_row_survives_handler_failure(self, db):
        async def handler(event, data):
            raise RuntimeError("handler blew up")

        with pytest.raises(RuntimeError):
            await DbSessionMiddleware(db)(handler, make_message(telegram_id=778), {})

        async with db.session() as s:
            assert (await users_repo.find_user_by_ref(s, "778")) is not None


class TestAchievementsHandler:
    @pytest.mark.asyncio
    async def test_reply(self, session, make_user):
        await make_user()
        message = make_message()

        await achievements_cmd(message, session)

        text = sent_text(message)
        assert "Achievements</b> (0/8)" in text
        assert "First Discovery</b> 0/1" in text
        assert "Active days (last 30): <b>0</b>" in text


class TestDashboardHandlers:
    @pytest.mark.asyncio
    async def test_non_admin_refused(self, session, make_user):
        await make_user(telegram_id=1002)
        message = make_message(telegram_id=1002)

        await adminstats_cmd(message, session, Settings(bot_token="x"))

        assert "Admins only" in sent_text(message)

    @pytest.mark.asyncio
    async def test_flagged_admin_sees_stats(self, session, make_user, make_content):
        await make_user(telegram_id=1002, is_admin=True)
        await make_content("Anora", EPIC)
        message = make_message(telegram_id=1002)

        await adminstats_cmd(message, session, Settings(bot_token="x"))

        text = sent_text(message)
        assert "Admin dashboard" in text
        assert "Content: <b>1</b> (1 movies, 0 series)" in text

    @pytest.mark.asyncio
    async def test_activity(self, session, service, make_user, make_content):
        await make_user(telegram_id=1)
        await make_content("Anora", EPIC)
        settings = Settings(bot_token="x", root_admin_ids=(1,))
        await _open(make_message(telegram_id=1), session, service, ContentType.MOVIE)
        message = make_message(telegram_id=1)

        await activity_cmd(message, SimpleNamespace(args="²"), session, settings)

        text = sent_text(message)
        assert "Recent spins</b> (page 1/1, 1 total)" in text
        assert "@user1 💎 Anora (2024) 🆕" in text

    @pytest.mark.asyncio
    async def test_activity_empty(self, session, make_user):
        await make_user(telegram_id=1)
        message = make_message(telegram_id=1)

        await activity_cmd(message, SimpleNamespace(args=None), session, Settings(bot_token="x", root_admin_ids=(1,)))

        assert "No spins recorded yet" in sent_text(message)


class TestRoleHandlers:
    @pytest.mark.asyncio
    async def test_root_promotes_and_demotes(self, session, make_user):
        await make_user(telegram_id=1)
        target_id = (await make_user(telegram_id=1002)).id
        settings = Settings(bot_token="x", root_admin_ids=(1,))

        message = make_message(telegram_id=1)
        await promote_cmd(message, SimpleNamespace(args="@user1002"), session, settings)
        assert "is now an admin" in sent_text(message)
        assert (await users_repo.get_user(session, target_id)).is_admin

        message = make_message(telegram_id=1)
        await demote_cmd(message, SimpleNamespace(args="1002"), session, settings)
        assert "no longer an admin" in sent_text(message)
        assert not (await users_repo.get_user(session, target_id)).is_admin

    @pytest.mark.asyncio
    async def test_flagged_admin_cannot_promote(self, session, make_user):
        await make_user(telegram_id=1002, is_admin=True)
        plain_id = (await make_user(telegram_id=1003)).id
        message = make_message(telegram_id=1002)

        await promote_cmd(message, SimpleNamespace(args="@user1003"), session, Settings(bot_token="x"))

        assert "Root admins only" in sent_text(message)
        assert not (await users_repo.get_user(session, plain_id)).is_admin

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", [None, "@nobody"])
    async def test_bad_target(self, session, make_user, args):
        await make_user(telegram_id=1)
        message = make_message(telegram_id=1)

        await promote_cmd(message, SimpleNamespace(args=args), session, Settings(bot_token="x", root_admin_ids=(1,)))

        assert sent_text(message).startswith(("Usage", "❌"))
