"""Test membership materialization."""

from datetime import datetime, timezone
from itertools import count

from chat_service.repositories.interactions.participants import (
    materialize_memberships,
    membership_window_end,
)


def _ms(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


class TestMaterializeMemberships:
    """Test cases for materialize_memberships."""

    def setup_method(self) -> None:
        self.now = _ms(2024, 1, 1, 12, 0, 0)

    def test_one_record_per_participant_in_order(self) -> None:
        records = materialize_memberships("chat-1", ["u1", "u2", "u3"], self.now)

        assert [r.user_id for r in records] == ["u1", "u2", "u3"]
        assert all(r.chat_id == "chat-1" for r in records)

    def test_batch_shares_the_same_instant(self) -> None:
        records = materialize_memberships("chat-1", ["u1", "u2"], self.now)

        for record in records:
            assert record.added_at == self.now
            assert record.start_message_id == self.now
            assert record.max_read_date == self.now
            assert record.end_message_id == _ms(2034, 1, 1, 12, 0, 0)
            assert record.start_message_id <= record.end_message_id

    def test_ids_come_from_the_factory(self) -> None:
        counter = count(1)

        records = materialize_memberships(
            "chat-1", ["u1", "u2"], self.now, id_factory=lambda: f"m{next(counter)}"
        )

        assert [r.id for r in records] == ["m1", "m2"]

    def test_default_ids_are_unique(self) -> None:
        records = materialize_memberships("chat-1", [f"u{i}" for i in range(50)], self.now)

        assert len({r.id for r in records}) == 50

    def test_empty_participants_give_no_records(self) -> None:
        assert materialize_memberships("chat-1", [], self.now) == []


def test_window_end_is_ten_calendar_years_later() -> None:
    assert membership_window_end(_ms(2020, 3, 1)) == _ms(2030, 3, 1)


def test_window_end_from_leap_day() -> None:
    assert membership_window_end(_ms(2024, 2, 29, 8, 30)) == _ms(2034, 2, 28, 8, 30)
