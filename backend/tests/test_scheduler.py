"""Tests for the periodic reload job."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.tasks import scheduler as scheduler_module
from app.tasks.scheduler import reload_board_job, setup_scheduler, shutdown_scheduler


class TestReloadBoardJob:
    @pytest.mark.asyncio
    async def test_reloads_board(self):
        board = MagicMock()
        board.reload = AsyncMock(return_value=True)

        await reload_board_job(board)

        board.reload.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_errors_are_logged_not_raised(self):
        board = MagicMock()
        board.reload = AsyncMock(side_effect=RuntimeError("boom"))

        await reload_board_job(board)

        board.reload.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reloads_synced_board(self, synced_board_service, fake_remote):
        fake_remote.tables["calls"] = [
            {
                "id": "c_9", "title": "Alarm", "address": "", "postal": "", "priority": "3",
                "origin": "Alarms", "code": "10-0", "active": True, "notes": "", "assigned": [],
            }
        ]

        await reload_board_job(synced_board_service)

        assert synced_board_service.snapshot().find_call("c_9").origin == "Alarms"


class TestSetupScheduler:
    def test_disabled_without_remote(self, monkeypatch):
        monkeypatch.setattr(scheduler_module.settings, "remote_url", None)

        assert setup_scheduler() is None

    def test_disabled_with_zero_interval(self, monkeypatch):
        monkeypatch.setattr(scheduler_module.settings, "remote_url", "https://board.example.supabase.co")
        monkeypatch.setattr(scheduler_module.settings, "reload_interval_minutes", 0)

        assert setup_scheduler() is None

    @pytest.mark.asyncio
    async def test_schedules_reload_job(self, monkeypatch):
        monkeypatch.setattr(scheduler_module.settings, "remote_url", "https://board.example.supabase.co")
        monkeypatch.setattr(scheduler_module.settings, "reload_interval_minutes", 5)

        scheduler = setup_scheduler()
        try:
            job = scheduler.get_job("reload_board")
            assert job is not None
            assert job.trigger.interval.total_seconds() == 300
        finally:
            shutdown_scheduler()

        assert scheduler_module.scheduler is None
