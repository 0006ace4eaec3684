"""
Unit tests for RankingService and the pure aggregation functions
"""

import pytest
from unittest.mock import AsyncMock

from app.models.score import ScoreRecord
from app.models.team import Candidate, Team
from app.services.ranking_service import (
    ProgramNotFoundError,
    RankingService,
    aggregate,
    best_of_average,
    display_name,
    judge_totals,
)


def ranks_of(results):
    return [r.rank for r in results]


def ids_of(results):
    return [r.participant_id for r in results]


class TestAggregate:
    """Test suite for the judge grouping, best-of-N average and ranking."""

    def test_dense_ranking_with_ties(self, make_participant, make_scores):
        """Sorted scores [10, 8, 8, 5] rank [1, 2, 2, 3], not [1, 2, 2, 4]."""
        participants = [make_participant(pid) for pid in ("p1", "p2", "p3", "p4")]
        rows = (
            make_scores("p1", [10])
            + make_scores("p2", [8])
            + make_scores("p3", [8])
            + make_scores("p4", [5])
        )

        results = aggregate(participants, rows)

        assert [r.score for r in results] == [10, 8, 8, 5]
        assert ranks_of(results) == [1, 2, 2, 3]

    def test_best_of_two_judges(self, make_participant, make_scores):
        """Judge totals [9, 7, 5] with best-of-2 -> (9 + 7) / 2."""
        results = aggregate([make_participant("p1")], make_scores("p1", [9, 7, 5]), 2)

        assert results[0].score == 8.0

    @pytest.mark.parametrize("best_of", [None, 0, -1, 3, 10])
    def test_all_judges_when_best_of_not_restrictive(self, best_of, make_participant, make_scores):
        """Absent, non-positive or >= count uses every judge: (9 + 7 + 5) / 3."""
        results = aggregate([make_participant("p1")], make_scores("p1", [5, 9, 7]), best_of)

        assert results[0].score == pytest.approx(7.0)

    def test_rule_rows_are_summed_per_judge(self, make_participant, make_scores):
        """Two rules per judge: each judge total is the sum of its rule rows."""
        rows = make_scores("p1", [9, 7], rules=2)
        assert len(rows) == 4

        results = aggregate([make_participant("p1")], rows, 1)

        assert results[0].score == 9.0

    def test_tied_first_place_then_next_rank(self, make_participant, make_scores):
        """P1 (10, 10) and P2 (10) tie at rank 1 with best-of-1; P3 (6) is rank 2."""
        participants = [make_participant(pid) for pid in ("p1", "p2", "p3")]
        rows = make_scores("p1", [10, 10]) + make_scores("p2", [10]) + make_scores("p3", [6])

        results = aggregate(participants, rows, 1)

        assert ids_of(results) == ["p1", "p2", "p3"]
        assert ranks_of(results) == [1, 1, 2]

    def test_participant_without_scores_is_kept(self, make_participant, make_scores):
        """Nobody scored p2: score 0, still in the output, ranked last."""
        participants = [make_participant("p2"), make_participant("p1")]

        results = aggregate(participants, make_scores("p1", [7, 8]))

        assert ids_of(results) == ["p1", "p2"]
        assert results[1].score == 0
        assert ranks_of(results) == [1, 2]

    def test_decimal_rule_scores_tie_at_two_decimals(self, make_participant):
        """0.1 + 0.2 from one judge ties with 0.3; the score is the persisted 2-decimal value."""
        participants = [make_participant("p1"), make_participant("p2")]
        rows = [
            ScoreRecord(program_id="prog1", participant_id="p1", judge_id="j1", rule_id="r1", score_value=0.1),
            ScoreRecord(program_id="prog1", participant_id="p1", judge_id="j1", rule_id="r2", score_value=0.2),
            ScoreRecord(program_id="prog1", participant_id="p2", judge_id="j1", rule_id="r1", score_value=0.3),
        ]

        results = aggregate(participants, rows)

        assert [r.score for r in results] == [0.3, 0.3]
        assert ranks_of(results) == [1, 1]

    def test_mean_is_rounded_to_two_decimals(self, make_participant, make_scores):
        results = aggregate([make_participant("p1")], make_scores("p1", [9, 9, 8]))

        assert results[0].score == 8.67

    def test_no_scores_at_all(self, make_participant):
        """Everybody at 0 shares rank 1."""
        participants = [make_participant(pid) for pid in ("p1", "p2", "p3")]

        results = aggregate(participants, [])

        assert [r.score for r in results] == [0, 0, 0]
        assert ranks_of(results) == [1, 1, 1]

    def test_no_participants(self, make_scores):
        assert aggregate([], make_scores("p1", [10])) == []

    def test_scores_for_unknown_participant_are_ignored(self, make_participant, make_scores):
        rows = make_scores("p1", [6]) + make_scores("ghost", [10])

        results = aggregate([make_participant("p1")], rows)

        assert ids_of(results) == ["p1"]
        assert results[0].rank == 1

    def test_exact_ties_keep_input_order(self, make_participant, make_scores):
        participants = [make_participant(pid) for pid in ("p3", "p1", "p2")]
        rows = make_scores("p1", [5]) + make_scores("p2", [5]) + make_scores("p3", [5])

        results = aggregate(participants, rows)

        assert ids_of(results) == ["p3", "p1", "p2"]
        assert ranks_of(results) == [1, 1, 1]

    def test_negative_values_flow_through(self, make_participant, make_scores):
        participants = [make_participant("p1"), make_participant("p2")]
        rows = make_scores("p1", [-4]) + make_scores("p2", [2])

        results = aggregate(participants, rows)

        assert [r.score for r in results] == [2, -4]
        assert ranks_of(results) == [1, 2]

    def test_aggregation_is_idempotent(self, make_participant, make_scores):
        participants = [make_participant(pid) for pid in ("p1", "p2", "p3")]
        rows = make_scores("p1", [8, 6]) + make_scores("p2", [7, 7]) + make_scores("p3", [9])

        first = aggregate(participants, rows, 2)
        second = aggregate(participants, rows, 2)

        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]

    def test_display_names_and_participant_no(self, make_participant, make_scores):
        participants = [make_participant("p1", participant_no="101"), make_participant("p2")]

        results = aggregate(participants, make_scores("p1", [3]), names={"p1": "Alice"})

        assert results[0].display_name == "Alice"
        assert results[0].participant_no == "101"
        assert results[1].display_name == "Unknown"


class TestHelpers:
    def test_judge_totals(self, make_scores):
        rows = make_scores("p1", [9, 7], rules=2) + make_scores("p2", [4])

        totals = judge_totals(rows)

        assert totals == {
            "p1": {"judge1": 9.0, "judge2": 7.0},
            "p2": {"judge1": 4.0},
        }

    def test_best_of_average_empty(self):
        assert best_of_average([], 3) == 0.0

    def test_display_name_individual(self, make_participant):
        candidates = {"c1": Candidate(_id="c1", name="Alice", team_id="t1")}
        participant = make_participant("p1", candidate_id="c1")

        assert display_name(participant, "individual", candidates, {}) == "Alice"
        assert display_name(make_participant("p2"), "individual", candidates, {}) == "Unknown"

    def test_display_name_team_with_lead(self, make_participant):
        candidates = {"c1": Candidate(_id="c1", name="Alice", team_id="t1")}
        teams = {"t1": Team(_id="t1", name="Red")}

        with_lead = make_participant("p1", team_id="t1", candidate_id="c1")
        without_lead = make_participant("p2", team_id="t1")

        assert display_name(with_lead, "team", candidates, teams) == "Red (Alice)"
        assert display_name(without_lead, "team", candidates, teams) == "Red"


@pytest.fixture
def ranking_service(mock_db):
    """RankingService with every repository replaced by an AsyncMock."""
    service = RankingService(mock_db)
    service.program_repo = AsyncMock()
    service.participant_repo = AsyncMock()
    service.score_repo = AsyncMock()
    service.team_repo = AsyncMock()
    service.candidate_repo = AsyncMock()
    service.candidate_repo.get_by_ids.return_value = {}
    service.team_repo.get_by_ids.return_value = {}
    return service


class TestRankingService:
    """Test suite for RankingService data loading."""

    @pytest.mark.asyncio
    async def test_program_not_found(self, ranking_service):
        ranking_service.program_repo.get_by_id.return_value = None

        with pytest.raises(ProgramNotFoundError):
            await ranking_service.calculate_program_rankings("missing")

    @pytest.mark.asyncio
    async def test_calculate_program_rankings(self, ranking_service, make_program, make_participant, make_scores):
        ranking_service.program_repo.get_by_id.return_value = make_program(best_of_judge_count=2)
        ranking_service.participant_repo.get_by_program.return_value = [
            make_participant("p1", candidate_id="c1"),
            make_participant("p2", candidate_id="c2"),
        ]
        ranking_service.score_repo.get_by_program.return_value = (
            make_scores("p1", [9, 7, 5]) + make_scores("p2", [10, 9])
        )
        ranking_service.candidate_repo.get_by_ids.return_value = {
            "c1": Candidate(_id="c1", name="Alice"),
            "c2": Candidate(_id="c2", name="Bob"),
        }

        results = await ranking_service.calculate_program_rankings("prog1")

        assert [(r.display_name, r.score, r.rank) for r in results] == [
            ("Bob", 9.5, 1),
            ("Alice", 8.0, 2),
        ]
        ranking_service.score_repo.get_by_program.assert_awaited_once_with("prog1")

    @pytest.mark.asyncio
    async def test_empty_participants_returns_empty(self, ranking_service, make_program):
        ranking_service.program_repo.get_by_id.return_value = make_program()
        ranking_service.participant_repo.get_by_program.return_value = []

        assert await ranking_service.calculate_program_rankings("prog1") == []
        ranking_service.score_repo.get_by_program.assert_not_called()

    @pytest.mark.asyncio
    async def test_team_program_resolves_team_names(self, ranking_service, make_program, make_participant):
        ranking_service.program_repo.get_by_id.return_value = make_program(participant_type="team")
        ranking_service.participant_repo.get_by_program.return_value = [
            make_participant("p1", team_id="t1"),
        ]
        ranking_service.score_repo.get_by_program.return_value = []
        ranking_service.team_repo.get_by_ids.return_value = {"t1": Team(_id="t1", name="Red")}

        results = await ranking_service.calculate_program_rankings("prog1")

        assert results[0].display_name == "Red"
        assert results[0].rank == 1

    @pytest.mark.asyncio
    async def test_score_matrix_live(self, ranking_service, make_program, make_participant, make_scores):
        ranking_service.program_repo.get_by_id.return_value = make_program(best_of_judge_count=1)
        ranking_service.participant_repo.get_by_program.return_value = [
            make_participant("p1"),
            make_participant("p2"),
        ]
        ranking_service.score_repo.get_by_program.return_value = (
            make_scores("p1", [4, 6]) + make_scores("p2", [8])
        )

        matrix = await ranking_service.get_score_matrix("prog1")

        assert matrix.judge_ids == ["judge1", "judge2"]
        assert [row.participant_id for row in matrix.rows] == ["p2", "p1"]
        assert matrix.rows[1].judge_totals == {"judge1": 4.0, "judge2": 6.0}
        assert matrix.rows[1].score == 6.0
        assert [row.rank for row in matrix.rows] == [1, 2]

    @pytest.mark.asyncio
    async def test_score_matrix_completed_uses_persisted_rank(self, ranking_service, make_program, make_participant, make_scores):
        ranking_service.program_repo.get_by_id.return_value = make_program(status="completed")
        ranking_service.participant_repo.get_by_program.return_value = [
            make_participant("p1", rank=None),
            make_participant("p2", rank=2, total_score=7.5),
            make_participant("p3", rank=1, total_score=9.0),
        ]
        # Scores edited after finalize must not change the official ranking
        ranking_service.score_repo.get_by_program.return_value = make_scores("p1", [10])

        matrix = await ranking_service.get_score_matrix("prog1")

        assert [row.participant_id for row in matrix.rows] == ["p3", "p2", "p1"]
        assert [row.rank for row in matrix.rows] == [1, 2, None]
        assert matrix.rows[0].score == 9.0
        assert matrix.rows[2].score == 0.0
