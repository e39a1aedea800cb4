"""
Tests for the grade recommendation resolver.
"""

import pytest

from gradepath.services.grade_recommendation import recommend, recommendation_message
from gradepath.services.placement_catalog import PLACEMENT_QUESTIONS
from gradepath.services.scoring import AnswerSubmission, score


def full_marks(*levels):
    return {level: 100.0 for level in levels}


class TestRecommend:
    """Highest mastered level plus the overall nudge"""

    @pytest.mark.unit
    def test_highest_mastered_level_wins(self):
        accuracy = {1: 100.0, 2: 100.0, 3: 50.0, 4: 70.0, 5: 0.0, 6: 0.0, 7: 0.0}
        assert recommend(accuracy, 60) == 4

    @pytest.mark.unit
    def test_gap_does_not_stop_scan(self):
        """A mastered upper level counts even after a failed lower level"""
        accuracy = {1: 0.0, 2: 0.0, 3: 0.0, 4: 0.0, 5: 100.0, 6: 0.0, 7: 0.0}
        assert recommend(accuracy, 50) == 5

    @pytest.mark.unit
    def test_defaults_to_lowest_level(self):
        assert recommend({1: 0.0, 2: 50.0}, 45) == 1

    @pytest.mark.unit
    def test_threshold_uses_unrounded_accuracy(self):
        assert recommend({1: 100.0, 2: 69.5}, 60) == 1
        assert recommend({1: 100.0, 2: 70.0}, 60) == 2

    @pytest.mark.unit
    def test_excellent_overall_promotes(self):
        assert recommend(full_marks(1, 2, 3), 85) == 4

    @pytest.mark.unit
    def test_promotion_capped_at_common_entrance(self):
        assert recommend(full_marks(*range(1, 8)), 100) == 7

    @pytest.mark.unit
    def test_weak_overall_demotes(self):
        assert recommend(full_marks(7), 39.9) == 6

    @pytest.mark.unit
    def test_demotion_floored_at_grade_one(self):
        assert recommend({1: 0.0}, 0) == 1

    @pytest.mark.unit
    def test_boundaries_do_not_nudge(self):
        assert recommend(full_marks(3), 40) == 3
        assert recommend(full_marks(3), 84.9) == 3

    @pytest.mark.unit
    def test_always_within_range(self):
        for overall in (0, 20, 40, 60, 85, 100):
            for top in range(1, 8):
                level = recommend(full_marks(*range(1, top + 1)), overall)
                assert 1 <= level <= 7


class TestRecommendFromPlacement:
    """End-to-end scenarios on the placement catalog"""

    def _answers(self, correct_levels, skip_ids=()):
        answers = []
        for i, q in enumerate(PLACEMENT_QUESTIONS):
            right = q.grade_level in correct_levels and q.id not in skip_ids
            selected = q.correct_option_index if right else (q.correct_option_index + 1) % 4
            answers.append(AnswerSubmission(i, selected))
        return answers

    @pytest.mark.unit
    def test_forty_percent_overall_keeps_level(self):
        """Grades 1-3 correct is 6 of 15 (40%): no demotion"""
        result = score(PLACEMENT_QUESTIONS, self._answers((1, 2, 3)))
        assert result.overall_percentage == 40
        assert result.recommended_grade == 3

    @pytest.mark.unit
    def test_low_overall_demotes(self):
        """Grades 1-2 correct is 4 of 15: demoted from 2 to 1"""
        result = score(PLACEMENT_QUESTIONS, self._answers((1, 2)))
        assert result.recommended_grade == 1

    @pytest.mark.unit
    def test_high_overall_promotes_past_missed_level(self):
        """One Common Entrance miss leaves 7 at 67% but 93% overall promotes 6 to 7"""
        result = score(PLACEMENT_QUESTIONS, self._answers(range(1, 8), skip_ids=(15,)))
        assert result.accuracy_for(7).percentage == 67
        assert result.overall_percentage == 93
        assert result.recommended_grade == 7

    @pytest.mark.unit
    def test_common_entrance_only_is_demoted(self):
        result = score(PLACEMENT_QUESTIONS, self._answers((7,)))
        assert result.overall_percentage == 20
        assert result.recommended_grade == 6


class TestRecommendationMessage:
    """Summary text shown with the recommendation"""

    @pytest.mark.unit
    def test_common_entrance_message(self):
        assert "Common Entrance preparation" in recommendation_message(7)

    @pytest.mark.unit
    @pytest.mark.parametrize("level", [4, 5, 6])
    def test_upper_levels_name_grade(self, level):
        assert f"Grade {level}" in recommendation_message(level)

    @pytest.mark.unit
    def test_grade_one_message(self):
        assert recommendation_message(1).startswith("We recommend starting with Grade 1")

    @pytest.mark.unit
    @pytest.mark.parametrize("level", [2, 3])
    def test_lower_levels_message(self, level):
        assert recommendation_message(level).startswith(f"Starting at Grade {level}")
