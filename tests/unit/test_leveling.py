"""
레벨 계산 유닛 테스트
"""
import pytest

from config import GAMIFICATION, xp_required_for_level
from service.gamification.leveling import build_level_up_result, calculate_level_up


class TestCalculateLevelUp:
    def test_below_threshold_keeps_level(self):
        assert calculate_level_up(1, 99) == (1, 99)

    def test_exact_threshold_levels_up(self):
        assert calculate_level_up(1, 100) == (2, 0)

    def test_multiple_levels(self):
        """250 XP → 레벨 3, 50 XP"""
        assert calculate_level_up(1, 250) == (3, 50)

    @pytest.mark.parametrize("total_xp", [0, 1, 99, 100, 101, 250, 999, 1000, 12345])
    def test_matches_floor_and_mod(self, total_xp):
        level, remaining = calculate_level_up(1, total_xp)
        assert level == 1 + total_xp // GAMIFICATION.XP_PER_LEVEL
        assert remaining == total_xp % GAMIFICATION.XP_PER_LEVEL

    def test_negative_xp_clamped(self):
        assert calculate_level_up(4, -10) == (4, 0)

    def test_custom_curve(self):
        """레벨 곡선 교체 가능"""
        def curve(level):
            return level * 100

        # 1→2: 100, 2→3: 200, 남은 50
        assert calculate_level_up(1, 350, curve=curve) == (3, 50)

    def test_zero_cost_curve_does_not_loop(self):
        assert calculate_level_up(1, 500, curve=lambda level: 0) == (1, 500)


class TestBuildLevelUpResult:
    def test_level_up_result(self):
        result = build_level_up_result(1, 240)
        assert result.leveled_up is True
        assert result.old_level == 1
        assert result.new_level == 3
        assert result.levels_gained == 2
        assert result.experience_points == 40
        assert result.next_level_xp_threshold == xp_required_for_level(3)

    def test_no_level_up_result(self):
        result = build_level_up_result(2, 30)
        assert result.leveled_up is False
        assert result.levels_gained == 0
        assert result.experience_points == 30
