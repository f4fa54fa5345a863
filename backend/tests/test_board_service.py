"""Tests for the board service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.schemas.board import Snapshot
from app.services import mutations
from app.services.board import BoardService
from app.services.mutations import ValidationError
from app.services.store import RecordStore
from app.services.sync import diff_snapshots


class TestApply:
    """Tests for BoardService.apply."""

    @pytest.mark.asyncio
    async def test_apply_replaces_and_bumps_version(self, board_service):
        board_service.apply(mutations.create_unit, "Unit 23", "LASD", unit_id="u_1")

        assert board_service.version == 1
        assert board_service.snapshot().find_unit("u_1").name == "Unit 23"

    @pytest.mark.asyncio
    async def test_noop_keeps_version(self, board_service):
        result = board_service.apply(mutations.delete_unit, "u_missing")

        assert board_service.version == 0
        assert result is board_service.snapshot()

    @pytest.mark.asyncio
    async def test_validation_error_leaves_store_unchanged(self, board_service):
        with pytest.raises(ValidationError):
            board_service.apply(mutations.create_unit, "", "LASD")

        assert board_service.version == 0
        assert board_service.snapshot() == Snapshot()

    @pytest.mark.asyncio
    async def test_local_save_in_background(self, board_service, storage):
        board_service.apply(mutations.create_call, "Robbery", call_id="c_1")
        board_service.apply(mutations.toggle_call_active, "c_1")

        await board_service.flush()

        stored = await storage.load()
        assert stored.find_call("c_1").active is False
        assert storage.saved_version == 2

    @pytest.mark.asyncio
    async def test_broadcast_when_screens_connected(self, storage):
        notifier = MagicMock()
        notifier.connection_count = 1
        notifier.broadcast = AsyncMock()
        board = BoardService(storage=storage, notifier=notifier)

        board.apply(mutations.set_dispatch_notes, "Briefing")
        await board.flush()

        notifier.broadcast.assert_awaited_once()
        snapshot, version = notifier.broadcast.call_args.args
        assert snapshot.dispatch_notes == "Briefing"
        assert version == 1

    @pytest.mark.asyncio
    async def test_no_broadcast_without_screens(self, storage):
        notifier = MagicMock()
        notifier.connection_count = 0
        notifier.broadcast = AsyncMock()
        board = BoardService(storage=storage, notifier=notifier)

        board.apply(mutations.set_dispatch_notes, "Briefing")
        await board.flush()

        notifier.broadcast.assert_not_called()


class TestRemoteMirror:
    """Tests for mirroring to the remote store."""

    @pytest.mark.asyncio
    async def test_mutation_mirrored(self, synced_board_service, fake_remote):
        synced_board_service.apply(mutations.create_unit, "Unit 23", "LASD", unit_id="u_1")
        synced_board_service.apply(mutations.set_unit_status, "u_1", "Busy")
        await synced_board_service.flush()

        assert fake_remote.tables["units"] == [
            {"id": "u_1", "name": "Unit 23", "type": "LASD", "subdivision": "", "status": "Busy"}
        ]

    @pytest.mark.asyncio
    async def test_failed_write_keeps_local_state(self, synced_board_service, fake_remote):
        fake_remote.fail_methods.add("POST")

        synced_board_service.apply(mutations.create_bolo, "Black SUV", bolo_id="b_1")
        await synced_board_service.flush()

        assert synced_board_service.snapshot().find_bolo("b_1") is not None
        assert fake_remote.tables["bolos"] == []
        assert synced_board_service.sync.stats.failed_writes == 1

    @pytest.mark.asyncio
    async def test_writes_reach_remote_in_mutation_order(self, synced_board_service, fake_remote):
        """A slow insert must still land before the delete that follows it."""
        fake_remote.delays["POST"] = 0.05

        synced_board_service.apply(mutations.create_unit, "Unit 23", "LASD", unit_id="u_1")
        synced_board_service.apply(mutations.delete_unit, "u_1")
        await synced_board_service.flush()

        assert fake_remote.methods() == ["POST", "DELETE"]
        assert fake_remote.tables["units"] == []

        assert await synced_board_service.reload() is True
        assert synced_board_service.snapshot().units == ()

    @pytest.mark.asyncio
    async def test_queued_writes_keep_order_across_failures(self, synced_board_service, fake_remote):
        fake_remote.fail_methods.add("PATCH")

        synced_board_service.apply(mutations.create_call, "Robbery", call_id="c_1")
        synced_board_service.apply(mutations.toggle_call_active, "c_1")
        synced_board_service.apply(mutations.delete_call, "c_1")
        await synced_board_service.flush()

        assert fake_remote.methods() == ["POST", "PATCH", "DELETE"]
        assert fake_remote.tables["calls"] == []
        assert synced_board_service.sync.stats.failed_writes == 1

    @pytest.mark.asyncio
    async def test_notes_not_mirrored(self, synced_board_service, fake_remote):
        synced_board_service.apply(mutations.set_dispatch_notes, "local only")
        await synced_board_service.flush()

        assert fake_remote.requests == []


class TestReload:
    """Tests for BoardService.reload."""

    @pytest.mark.asyncio
    async def test_reload_replaces_collections_keeps_notes(
        self, synced_board_service, sync_adapter, sample_board
    ):
        await sync_adapter.push(diff_snapshots(Snapshot(), sample_board))
        synced_board_service.apply(mutations.set_dispatch_notes, "local notes")
        synced_board_service.apply(mutations.create_unit, "Local only", "CHP", unit_id="u_local")
        await synced_board_service.flush()
        # The local unit was mirrored too; drop it remotely to simulate another client
        await sync_adapter.client.delete("units", "u_local")

        assert await synced_board_service.reload() is True

        snapshot = synced_board_service.snapshot()
        assert [u.id for u in snapshot.units] == ["u_1", "u_2"]
        assert snapshot.calls == sample_board.calls
        assert snapshot.dispatch_notes == "local notes"
        assert synced_board_service.version == 3

    @pytest.mark.asyncio
    async def test_failed_reload_keeps_local(self, synced_board_service, fake_remote):
        synced_board_service.apply(mutations.create_call, "Robbery", call_id="c_1")
        await synced_board_service.flush()
        fake_remote.fail_methods.add("GET")

        assert await synced_board_service.reload() is False

        assert synced_board_service.snapshot().find_call("c_1") is not None
        assert synced_board_service.version == 1

    @pytest.mark.asyncio
    async def test_reload_does_not_write_back(self, synced_board_service, fake_remote, sample_board):
        fake_remote.tables["units"] = [
            {"id": "u_1", "name": "Unit 23", "type": "LASD", "subdivision": "", "status": "Busy"}
        ]

        await synced_board_service.reload()
        await synced_board_service.flush()

        assert set(fake_remote.methods()) == {"GET"}

    @pytest.mark.asyncio
    async def test_reload_survives_null_and_bad_rows(self, synced_board_service, fake_remote):
        fake_remote.tables["units"] = [
            {"id": "u_1", "name": "Unit 1", "type": "LASD", "subdivision": "", "status": "Available"},
            {"id": "u_2", "name": "Unit 2", "type": "CHP", "subdivision": None, "status": "Busy"},
            {"id": "u_3", "name": "Unit 3", "type": "Navy", "subdivision": "", "status": "Busy"},
        ]

        assert await synced_board_service.reload() is True

        assert [u.id for u in synced_board_service.snapshot().units] == ["u_1", "u_2"]
        assert synced_board_service.sync.stats.failed_reloads == 0
        assert synced_board_service.sync.stats.skipped_rows == 1

    @pytest.mark.asyncio
    async def test_reload_without_sync(self, board_service):
        assert await board_service.reload() is False
        assert board_service.schedule_reload() is None

    @pytest.mark.asyncio
    async def test_schedule_reload(self, synced_board_service, fake_remote):
        fake_remote.tables["bolos"] = [
            {"id": "b_1", "title": "Van", "plate": "", "note": "", "active": True,
             "created_at": "2024-01-18T10:00:00Z"}
        ]

        task = synced_board_service.schedule_reload()
        await task

        assert synced_board_service.snapshot().bolos[0].title == "Van"

    @pytest.mark.asyncio
    async def test_reload_persists_locally(self, synced_board_service, fake_remote, storage):
        fake_remote.tables["units"] = [
            {"id": "u_9", "name": "Unit 9", "type": "DHS", "subdivision": "", "status": "Available"}
        ]

        await synced_board_service.reload()
        await synced_board_service.flush()

        assert (await storage.load()).find_unit("u_9") is not None


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_restores_saved_board(self, storage, sample_board):
        await storage.save(sample_board, version=7)
        board = BoardService(store=RecordStore(), storage=storage)

        await board.load()

        assert board.snapshot() == sample_board
        assert board.version == 1

    @pytest.mark.asyncio
    async def test_load_without_storage(self):
        board = BoardService()

        await board.load()

        assert board.version == 0
