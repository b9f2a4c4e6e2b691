"""
Tests for the weekly challenge engine.
"""

import pytest

from focusflow.engine.gamification import (
    ACHIEVEMENTS,
    CHALLENGES,
    DEFAULT_TARGET_PERCENTAGE,
    apply_meeting_score,
    average_criteria_scores,
    build_achievement,
    build_weekly_challenge,
    describe_challenge,
    generate_weekly_challenge,
    select_target_criteria,
)
from focusflow.models.gamification import ChallengeStatus
from focusflow.models.meeting import ScoreCriteria


@pytest.fixture
def challenge(week_start):
    """Fresh timing challenge."""
    return build_weekly_challenge("user-1", week_start, ScoreCriteria.TIMING)


class TestChallengeGeneration:
    """Tests for picking the week's target criterion."""

    def test_no_history_defaults_to_agenda(self, week_start):
        """Test the default challenge for users without scored meetings."""
        result = generate_weekly_challenge("user-1", week_start, [])

        assert result.target_criteria == ScoreCriteria.AGENDA
        assert result.target_percentage == DEFAULT_TARGET_PERCENTAGE
        assert result.goal_description == CHALLENGES[ScoreCriteria.AGENDA].description
        assert result.status == ChallengeStatus.ACTIVE
        assert result.week_start_date == week_start

    def test_lowest_average_wins(self, make_score):
        """Test that the weakest criterion is targeted."""
        scores = [
            make_score(attention_score=4),
            make_score(attention_score=10, actions_score=12),
        ]
        assert select_target_criteria(scores) == ScoreCriteria.ATTENTION

    def test_ties_use_last_criterion(self, make_score):
        """Test that equal averages resolve to the criterion listed last."""
        scores = [make_score(participants_score=8, actions_score=8)]
        assert select_target_criteria(scores) == ScoreCriteria.ACTIONS

    def test_tie_with_agenda(self, make_score):
        scores = [make_score(agenda_score=5, actions_score=5)]
        assert select_target_criteria(scores) == ScoreCriteria.ACTIONS

    def test_all_equal_picks_attention(self, make_score):
        assert select_target_criteria([make_score(10), make_score(10)]) == ScoreCriteria.ATTENTION

    def test_average_criteria_scores(self, make_score):
        averages = average_criteria_scores([make_score(10), make_score(20, timing_score=0)])

        assert averages[ScoreCriteria.AGENDA] == 15
        assert averages[ScoreCriteria.TIMING] == 5

    def test_accepts_generators(self, make_score):
        """Test that a one-shot iterable works."""
        scores = (s for s in [make_score(20, timing_score=1)])
        assert select_target_criteria(scores) == ScoreCriteria.TIMING

    def test_every_criterion_has_templates(self):
        assert set(CHALLENGES) == set(ScoreCriteria)
        assert set(ACHIEVEMENTS) == set(ScoreCriteria)

    def test_describe_challenge_adds_card_fields(self, week_start):
        """Test that the serialized challenge carries its tip and icon."""
        data = describe_challenge(build_weekly_challenge("user-1", week_start, ScoreCriteria.TIMING))

        assert data["target_criteria"] == "timing"
        assert data["week_start_date"] == week_start.isoformat()
        assert data["tip"] == "The sweet spot for productive discussions"
        assert data["icon_name"] == "Clock"


class TestApplyMeetingScore:
    """Tests for challenge progress updates."""

    def test_passing_meeting(self, challenge, make_score):
        """Test that a score of 15+ on the target criterion passes."""
        updated, achievement = apply_meeting_score(challenge, "m1", make_score(0, timing_score=15))

        assert updated.total_meetings == 1
        assert updated.meetings_completed == 1
        assert updated.current_progress == 100
        assert updated.counted_meeting_ids == ["m1"]
        assert achievement is None

    def test_failing_meeting(self, challenge, make_score):
        """Test that 14 on the target criterion does not pass."""
        updated, _ = apply_meeting_score(challenge, "m1", make_score(20, timing_score=14))

        assert updated.total_meetings == 1
        assert updated.meetings_completed == 0
        assert updated.current_progress == 0

    def test_same_meeting_counted_once(self, challenge, make_score):
        """Test that rescoring a meeting never double-counts it."""
        once, _ = apply_meeting_score(challenge, "m1", make_score(20))
        twice, achievement = apply_meeting_score(once, "m1", make_score(20))

        assert twice.total_meetings == 1
        assert twice.meetings_completed == 1
        assert twice is once
        assert achievement is None

    def test_input_not_modified(self, challenge, make_score):
        apply_meeting_score(challenge, "m1", make_score(20))

        assert challenge.total_meetings == 0
        assert challenge.counted_meeting_ids == []

    def test_progress_rounds_half_up(self, challenge, make_score):
        """Test 1 of 8 meetings -> 12.5% -> 13."""
        current = challenge.model_copy(update={"target_percentage": 101})
        current, _ = apply_meeting_score(current, "m0", make_score(20))
        for i in range(1, 8):
            current, _ = apply_meeting_score(current, f"m{i}", make_score(0))

        assert current.total_meetings == 8
        assert current.current_progress == 13

    def test_completes_after_five_meetings(self, challenge, make_score):
        """Test completion once 5 meetings are counted at 80%+."""
        current = challenge
        results = []
        for i, passing in enumerate([True, True, False, True, True]):
            current, achievement = apply_meeting_score(
                current, f"m{i}", make_score(20 if passing else 0)
            )
            results.append(achievement)

        assert current.status == ChallengeStatus.COMPLETED
        assert current.current_progress == 80
        assert results[:4] == [None, None, None, None]
        assert results[4].title == "Time Optimizer"
        assert results[4].icon_name == "Medal"
        assert results[4].user_id == "user-1"

    def test_no_completion_before_five_meetings(self, challenge, make_score):
        """Test that 4 perfect meetings are not enough."""
        current = challenge
        for i in range(4):
            current, achievement = apply_meeting_score(current, f"m{i}", make_score(20))

        assert current.status == ChallengeStatus.ACTIVE
        assert current.current_progress == 100
        assert achievement is None

    def test_completed_challenge_is_frozen(self, challenge, make_score):
        """Test that further meetings do not change a completed challenge."""
        done = challenge.model_copy(update={"status": ChallengeStatus.COMPLETED})

        updated, achievement = apply_meeting_score(done, "m9", make_score(20))

        assert updated is done
        assert achievement is None


class TestAchievements:
    """Tests for achievement lookup."""

    @pytest.mark.parametrize("criteria,title,icon", [
        (ScoreCriteria.AGENDA, "Agenda Master", "Trophy"),
        (ScoreCriteria.PARTICIPANTS, "Team Size Pro", "Award"),
        (ScoreCriteria.TIMING, "Time Optimizer", "Medal"),
        (ScoreCriteria.ACTIONS, "Action Hero", "Zap"),
        (ScoreCriteria.ATTENTION, "Highlight Champion", "Sparkles"),
    ])
    def test_lookup(self, criteria, title, icon):
        achievement = build_achievement("user-1", criteria)

        assert achievement.title == title
        assert achievement.icon_name == icon
        assert achievement.type == "challenge_complete"
