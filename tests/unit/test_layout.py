"""
Unit tests for the map layout engine.
"""

from src.quest.layout import (
    Biome,
    MapLayout,
    build_node_views,
    biome_for_node,
    compute_position,
    scroll_extent,
)
from src.quest.models import default_state
from src.quest.progression import apply_correct_answer
from src.quest.question_bank import Tier


class TestComputePosition:
    def test_lanes_zig_zag(self):
        xs = [compute_position(i, 30).x_percent for i in range(6)]
        assert xs == [30, 70, 50, 30, 70, 50]

    def test_vertical_offset(self):
        assert compute_position(0, 30).y_px == 120
        assert compute_position(1, 30).y_px == 240
        assert compute_position(29, 30).y_px == 120 + 29 * 120

    def test_y_strictly_increasing(self):
        ys = [compute_position(i, 30).y_px for i in range(30)]
        assert all(a < b for a, b in zip(ys, ys[1:]))

    def test_deterministic(self):
        assert compute_position(17, 30) == compute_position(17, 30)

    def test_custom_layout(self):
        layout = MapLayout(base_offset=10, vertical_gap=50)
        assert compute_position(3, 5, layout).y_px == 160


class TestScrollExtent:
    def test_default_extent(self):
        assert scroll_extent(30) == 120 + 29 * 120 + 300

    def test_extent_covers_last_node(self):
        assert scroll_extent(30) > compute_position(29, 30).y_px

    def test_single_node(self):
        assert scroll_extent(1) == 420


class TestBiomes:
    def test_day_then_night(self):
        assert biome_for_node(0) is Biome.DAY
        assert biome_for_node(14) is Biome.DAY
        assert biome_for_node(15) is Biome.NIGHT


class TestNodeViews:
    def test_views_reflect_progress(self, rules):
        state = default_state(rules.node_count)
        for _ in range(4):
            apply_correct_answer(state, 0, rules)
        apply_correct_answer(state, 1, rules)

        views = build_node_views(state.nodes, rules)

        assert views[0].status == "completed"
        assert views[0].title == "Completed"
        assert views[1].status == "unlocked"
        assert views[1].title == "Node 2: click to practice"
        assert views[1].xp_badge == "25/125 XP"
        assert views[2].status == "locked"
        assert views[2].title == "Locked"

    def test_views_carry_tier_and_position(self, rules):
        views = build_node_views(default_state(rules.node_count).nodes, rules)

        assert len(views) == 30
        assert views[8].tier is Tier.MEDIUM
        assert views[29].tier is Tier.EXPERT
        assert views[4].position == compute_position(4, 30)
        assert views[4].number == 5
