# tests/test_window_validator.py

from __future__ import annotations

import pytest

from quest_clock.errors import DataAccessError, ValidationConflict
from quest_clock.quests.window_validator import (
    find_overlapping_quest,
    validate_overlap,
    windows_overlap,
)

from .fakes import FakeQuestRepo, day, make_quest


@pytest.mark.parametrize(
    ("candidate", "existing", "expected"),
    [
        ((10, 20), (15, 25), True),  # partial overlap
        ((10, 20), (21, 30), False),  # disjoint, after
        ((10, 20), (1, 9), False),  # disjoint, before
        ((10, 20), (12, 14), True),  # existing inside candidate
        ((12, 14), (10, 20), True),  # candidate inside existing
        ((10, 20), (20, 25), True),  # touching bounds count (closed intervals)
        ((10, None), (5, None), True),  # both open-ended
        ((10, None), (1, 5), False),  # open candidate after a closed window
        ((1, 5), (10, None), False),  # closed candidate before an open window
        ((1, 12), (10, None), True),
    ],
)
def test_windows_overlap_closed_intervals(candidate, existing, expected) -> None:
    a_start, a_end = candidate
    b_start, b_end = existing
    got = windows_overlap(
        day(a_start),
        day(a_end) if a_end else None,
        day(b_start),
        day(b_end) if b_end else None,
    )
    assert got is expected
    # symmetric
    assert (
        windows_overlap(
            day(b_start),
            day(b_end) if b_end else None,
            day(a_start),
            day(a_end) if a_end else None,
        )
        is expected
    )


def test_validate_rejects_overlap_and_names_the_quest() -> None:
    repo = FakeQuestRepo([make_quest(1, day(15), day(25), name="Sprint 7")])

    with pytest.raises(ValidationConflict) as excinfo:
        validate_overlap(repo, "team-a", day(10), day(20))

    assert excinfo.value.quest_name == "Sprint 7"
    assert excinfo.value.quest_id == 1
    assert "Sprint 7" in str(excinfo.value)


def test_validate_accepts_free_window() -> None:
    repo = FakeQuestRepo([make_quest(1, day(21), day(30))])
    validate_overlap(repo, "team-a", day(10), day(20))


def test_open_ended_candidate_conflicts_with_open_ended_quest() -> None:
    repo = FakeQuestRepo([make_quest(1, day(5), None)])
    with pytest.raises(ValidationConflict):
        validate_overlap(repo, "team-a", day(10), None)


def test_archived_and_other_team_quests_are_ignored() -> None:
    repo = FakeQuestRepo(
        [
            make_quest(1, day(10), day(20), is_archived=True),
            make_quest(2, day(10), day(20), team_id="team-b"),
        ]
    )
    validate_overlap(repo, "team-a", day(12), day(18))


def test_exclude_id_lets_a_quest_revalidate_itself() -> None:
    repo = FakeQuestRepo([make_quest(1, day(10), day(20)), make_quest(2, day(25), day(28))])

    validate_overlap(repo, "team-a", day(9), day(21), exclude_id=1)

    with pytest.raises(ValidationConflict) as excinfo:
        validate_overlap(repo, "team-a", day(9), day(26), exclude_id=1)
    assert excinfo.value.quest_id == 2


def test_find_overlapping_quest_returns_first_match() -> None:
    quests = [make_quest(1, day(1), day(3)), make_quest(2, day(4), day(8)), make_quest(3, day(6), None)]
    found = find_overlapping_quest(quests, day(5), day(7))
    assert found is not None
    assert found.id == 2
    assert find_overlapping_quest(quests, day(1), day(2), exclude_id=1) is None


def test_end_before_start_is_input_error_not_conflict() -> None:
    repo = FakeQuestRepo([])
    with pytest.raises(ValueError):
        validate_overlap(repo, "team-a", day(20), day(10))


def test_store_failure_is_data_access_error() -> None:
    repo = FakeQuestRepo([make_quest(1, day(15), day(25))])
    repo.fail_list = True
    with pytest.raises(DataAccessError):
        validate_overlap(repo, "team-a", day(10), day(20))
