"""
Pytest fixtures and configuration for all tests.

MongoDB is never contacted: repositories are replaced with AsyncMock
and collections with MagicMock cursors.
"""

import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

import pytest
from unittest.mock import AsyncMock, MagicMock

from app.models.participant import ProgramParticipant
from app.models.program import Program
from app.models.score import ScoreRecord
from app.models.team import Candidate, Team


def _make_program(program_id="prog1", **overrides) -> Program:
    data = {
        "_id": program_id,
        "name": f"Program {program_id}",
        "participant_type": "individual",
        "best_of_judge_count": None,
        "status": "live",
    }
    data.update(overrides)
    return Program(**data)


def _make_participant(participant_id, program_id="prog1", **overrides) -> ProgramParticipant:
    data = {"_id": participant_id, "program_id": program_id}
    data.update(overrides)
    return ProgramParticipant(**data)


def _make_scores(participant_id, judge_totals, program_id="prog1", rules=1) -> list[ScoreRecord]:
    """
    One row per judge per rule. Each judge total is split evenly over `rules`.
    """
    rows = []
    for judge_index, total in enumerate(judge_totals, start=1):
        for rule_index in range(1, rules + 1):
            rows.append(ScoreRecord(
                program_id=program_id,
                participant_id=participant_id,
                judge_id=f"judge{judge_index}",
                rule_id=f"rule{rule_index}",
                score_value=total / rules,
            ))
    return rows


@pytest.fixture
def mock_collection():
    """Collection whose find() returns a cursor with sort() and to_list()."""
    collection = MagicMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock(return_value=MagicMock(matched_count=1))
    collection.bulk_write = AsyncMock(return_value=MagicMock(matched_count=0))
    collection.cursor = cursor
    return collection


@pytest.fixture
def mock_db(mock_collection):
    """Database mock: every db["name"] returns the same mock collection."""
    db = MagicMock()
    db.__getitem__.return_value = mock_collection
    return db


@pytest.fixture
def sample_teams():
    return [
        Team(_id="team_a", name="Team A"),
        Team(_id="team_b", name="Team B"),
        Team(_id="team_c", name="Team C"),
    ]


@pytest.fixture
def sample_candidates():
    return {
        "cand_a1": Candidate(_id="cand_a1", name="Alice", team_id="team_a"),
        "cand_a2": Candidate(_id="cand_a2", name="Aaron", team_id="team_a"),
        "cand_b1": Candidate(_id="cand_b1", name="Bella", team_id="team_b"),
        "cand_c1": Candidate(_id="cand_c1", name="Carl", team_id="team_c"),
    }


@pytest.fixture
def make_program():
    return _make_program


@pytest.fixture
def make_participant():
    return _make_participant


@pytest.fixture
def make_scores():
    return _make_scores
