"""
Tests for timezone preference, admin resolution and the nightly job wiring.
"""

import pytest

from lootbox.config import Settings
from lootbox.database import Database
from lootbox.database.repo import users as users_repo
from lootbox.handlers.admin.guard import is_admin, is_root
from lootbox.scheduler.jobs import build_scheduler, refresh_quality_scores_job
from lootbox.services.errors import InvalidTimezone
from lootbox.services.user import UserService


class TestTimezone:
    @pytest.mark.asyncio
    async def test_set_and_clear(self, session, make_user):
        user = await make_user()

        assert await UserService.set_timezone(session, user, " Asia/Tokyo ") == "Asia/Tokyo"
        assert (await users_repo.get_user(session, user.id)).timezone == "Asia/Tokyo"

        assert await UserService.set_timezone(session, user, "") is None
        assert (await users_repo.get_user(session, user.id)).timezone is None

    @pytest.mark.asyncio
    async def test_rejects_unknown(self, session, make_user):
        user = await make_user(timezone="Europe/Berlin")

        with pytest.raises(InvalidTimezone):
            await UserService.set_timezone(session, user, "Moon/Base")

        assert (await users_repo.get_user(session, user.id)).timezone == "Europe/Berlin"


class TestAdminRoles:
    @pytest.mark.asyncio
    async def test_roles(self, session, make_user):
        root = await make_user(telegram_id=1)
        admin = await make_user(telegram_id=2, is_admin=True)
        plain = await make_user(telegram_id=3)
        settings = Settings(bot_token="x", root_admin_ids=(1,))

        assert is_root(settings, root) and is_admin(settings, root)
        assert is_admin(settings, admin) and not is_root(settings, admin)
        assert not is_admin(settings, plain)

    @pytest.mark.asyncio
    async def test_flag_defaults_off(self, session, make_user):
        user = await make_user()

        assert (await users_repo.get_user(session, user.id)).is_admin is False

        await users_repo.set_admin(session, user.id, True)
        await session.commit()
        assert (await users_repo.get_user(session, user.id)).is_admin is True


class TestScheduler:
    def test_job_is_registered(self, tmp_path):
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'jobs.db'}")
        settings = Settings(bot_token="x", rescore_hour=5, default_timezone="Europe/Berlin")

        scheduler = build_scheduler(db, settings)

        job = scheduler.get_job("refresh_quality_scores")
        assert job is not None
        assert job.func is refresh_quality_scores_job
        assert job.kwargs == {"db": db}

    @pytest.mark.asyncio
    async def test_job_survives_errors(self, caplog):
        class Broken:
            def session(self):
                raise RuntimeError("no database")

        await refresh_quality_scores_job(Broken())

        assert "Quality score refresh failed" in caplog.text


class TestDatabase:
    @pytest.mark.asyncio
    async def test_from_settings_creates_the_sqlite_dir(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'dir' / 'bot.db'}"
        db = Database.from_settings(Settings(bot_token="x", database_url=url))
        try:
            await db.init_models()
        finally:
            await db.close()

        assert (tmp_path / "nested" / "dir" / "bot.db").exists()
