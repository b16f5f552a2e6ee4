"""Integration tests for BoardService."""

from pathlib import Path

import pytest

from atlasflow.models import Board, CardPatch, ColumnPatch, ColumnTheme, DragPayload
from atlasflow.repositories import FilesystemRepository, MemoryRepository, SnapshotError
from atlasflow.services import BoardService, BoardStore


def starter_board() -> Board:
    """Two columns, two cards, fixed ids."""
    return Board.from_snapshot(
        {
            "boardTitle": "Work",
            "columns": [
                {
                    "id": "todo",
                    "title": "To Do",
                    "theme": "sky",
                    "cards": [
                        {"id": "c1", "title": "One", "tags": [], "createdAt": "2025-01-15T10:30:00Z"},
                        {"id": "c2", "title": "Two", "tags": [], "createdAt": "2025-01-15T10:30:00Z"},
                    ],
                },
                {"id": "done", "title": "Done", "theme": "emerald", "cards": []},
            ],
            "availableTags": ["work"],
        }
    )


@pytest.fixture
def repo() -> MemoryRepository:
    """Memory repository pre-loaded with the starter board."""
    repository = MemoryRepository()
    repository.save(starter_board())
    repository.save_count = 0
    return repository


@pytest.fixture
def service(repo: MemoryRepository) -> BoardService:
    """Create a BoardService with the repository."""
    return BoardService(repo)


class FailingRepository(MemoryRepository):
    """Repository whose saves always fail."""

    def save(self, board: Board) -> None:
        raise OSError("disk full")


class BrokenRepository(MemoryRepository):
    """Repository whose stored data is unreadable."""

    def load(self) -> Board | None:
        raise SnapshotError("board.yaml is empty")


class TestBoardServiceLoad:
    """Tests for loading the board."""

    def test_loads_stored_board(self, service: BoardService):
        """The board comes from the repository on first access."""
        assert service.board.title == "Work"
        assert service.board.column_ids == ["todo", "done"]
        assert not service.has_load_error

    def test_missing_board_uses_default(self):
        """Empty storage starts from the default board without saving it."""
        repo = MemoryRepository()
        service = BoardService(repo)

        assert [c.title for c in service.board.columns] == ["To Do", "In Progress", "Done"]
        assert repo.save_count == 0

    def test_unreadable_board_falls_back(self):
        """A SnapshotError is recorded and the default board used."""
        service = BoardService(BrokenRepository())

        assert service.board.title == "My Todo Board"
        assert service.has_load_error
        assert "empty" in service.load_error

    def test_unreadable_board_is_not_overwritten(self):
        """Commands after a load error change memory but never save."""
        repo = BrokenRepository()
        service = BoardService(repo)

        board = service.add_tag("fresh")

        assert "fresh" in board.available_tags
        assert repo.save_count == 0
        assert repo.document is None
        assert "not overwriting" in service.persist_error

    def test_reload_reads_storage_again(self, service: BoardService, repo: MemoryRepository):
        """reload replaces in-memory state with the stored board."""
        service.set_board_title("Changed")
        repo.document = starter_board().to_snapshot()

        board = service.reload()

        assert board.title == "Work"
        assert service.board is board

    def test_uses_injected_store(self, repo: MemoryRepository):
        """An injected store is loaded rather than replaced."""
        store = BoardStore()
        service = BoardService(repo, store=store)

        service.load()

        assert service.store is store
        assert store.snapshot.title == "Work"


class TestBoardServicePersistence:
    """Tests for saving after commands."""

    def test_command_saves_snapshot(self, service: BoardService, repo: MemoryRepository):
        """A changing command saves the new snapshot."""
        board = service.add_column("Review", ColumnTheme.AMBER)

        assert repo.save_count == 1
        assert repo.load().to_snapshot() == board.to_snapshot()

    def test_noop_command_does_not_save(self, service: BoardService, repo: MemoryRepository):
        """No-op commands leave storage alone."""
        service.delete_column("missing")
        service.add_tag("work")
        service.move_card("todo", "todo", "c1", 0)
        service.update_card("todo", "c1", CardPatch())

        assert repo.save_count == 0

    def test_every_command_persists(self, service: BoardService, repo: MemoryRepository):
        """Each of the mutating commands triggers exactly one save."""
        service.set_board_title("Renamed")
        service.add_column("Later", "slate")
        service.update_column("done", ColumnPatch(title="Finished"))
        service.add_card("todo", "Three", tags=["work"])
        service.update_card("todo", "c1", CardPatch(description="desc"))
        service.move_card("todo", "done", "c2", 0)
        service.delete_card("todo", "c1")
        service.add_tag("urgent")
        service.create_card_tag("done", "c2", "review")
        service.remove_tag("urgent")
        service.delete_column("done")

        assert repo.save_count == 11
        assert repo.load().to_snapshot() == service.board.to_snapshot()

    def test_failed_save_keeps_state(self):
        """A save error is recorded; the change stays in memory."""
        repo = FailingRepository()
        repo.document = starter_board().to_snapshot()
        service = BoardService(repo)

        board = service.set_board_title("Unsaved")

        assert board.title == "Unsaved"
        assert service.board.title == "Unsaved"
        assert "disk full" in service.persist_error

    def test_persist_error_cleared_by_successful_save(self, service: BoardService, repo: MemoryRepository):
        """A later successful save clears the error."""
        service._persist_error = "Failed to save board: earlier"
        service.add_tag("fresh")
        assert service.persist_error is None

    def test_round_trip_through_filesystem(self, tmp_path: Path):
        """Changes made through one service are seen by the next."""
        board_file = tmp_path / "board.yaml"
        first = BoardService(FilesystemRepository(board_file))
        column_id = first.board.column_ids[0]
        first.add_card(column_id, "Persisted")

        second = BoardService(FilesystemRepository(board_file))

        assert second.board.to_snapshot() == first.board.to_snapshot()


class TestBoardServiceDragAndDrop:
    """Tests for drop_card."""

    def test_drop_moves_card(self, service: BoardService):
        """A valid payload moves the card to the drop target."""
        payload = DragPayload(card_id="c1", from_column_id="todo").to_json()

        board = service.drop_card(payload, "done", 0)

        assert board.get_column("done").card_ids == ["c1"]
        assert board.get_column("todo").card_ids == ["c2"]

    def test_drop_reorders_within_column(self, service: BoardService):
        """Dropping above the first card of the same column moves to the front."""
        payload = DragPayload(card_id="c2", from_column_id="todo").to_json()

        board = service.drop_card(payload, "todo", 0)

        assert board.get_column("todo").card_ids == ["c2", "c1"]

    def test_drop_below_next_card_keeps_order(self, service: BoardService, repo: MemoryRepository):
        """Index 2 in a two-card column is clamped, then shifted back onto c1's slot."""
        payload = DragPayload(card_id="c1", from_column_id="todo").to_json()

        board = service.drop_card(payload, "todo", 2)

        assert board.get_column("todo").card_ids == ["c1", "c2"]
        assert repo.save_count == 0

    def test_drop_bad_payload_ignored(self, service: BoardService, repo: MemoryRepository):
        """Garbage payloads change nothing."""
        before = service.board
        assert service.drop_card("garbage", "done", 0) is before
        assert repo.save_count == 0


class TestBoardServiceToggleTag:
    """Tests for toggle_card_tag."""

    def test_toggle_adds_then_removes(self, service: BoardService):
        """Toggling flips membership through update_card."""
        board = service.toggle_card_tag("todo", "c1", "work")
        assert board.find_card("c1")[1].tags == ("work",)

        board = service.toggle_card_tag("todo", "c1", "work")
        assert board.find_card("c1")[1].tags == ()
        assert "work" in board.available_tags

    def test_toggle_new_tag_registers_it(self, service: BoardService):
        """A tag not yet in the vocabulary is added to it."""
        board = service.toggle_card_tag("todo", "c2", "fresh")
        assert "fresh" in board.available_tags

    def test_toggle_unknown_card(self, service: BoardService, repo: MemoryRepository):
        """Unknown card is a no-op."""
        before = service.board
        assert service.toggle_card_tag("todo", "missing", "work") is before
        assert repo.save_count == 0
