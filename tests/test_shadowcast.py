"""Tests for recursive shadowcasting field of view."""

import time
import pytest
from delve.core.coord import Coord
from delve.visibility.shadowcast import OCTANTS, ShadowCaster, Stance, compute_fov


def ring(x, y):
    return {Coord(x + dx, y + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)}


class TestOctants:
    """Test the octant transform table."""

    def test_eight_distinct_transforms(self):
        assert len(OCTANTS) == 8
        assert len(set(OCTANTS)) == 8

    def test_octants_cover_every_direction(self, carved_grid):
        """An open grid is fully visible within the radius."""
        grid = carved_grid(11, 11)
        visible = ShadowCaster(grid).compute((5, 5), radius=5)
        expected = {cell.position for cell in grid
                    if (cell.position.x - 5) ** 2 + (cell.position.y - 5) ** 2 <= 25}
        assert visible == expected


class TestAlwaysVisibleRing:
    """Test the unconditional 3x3 neighbourhood."""

    @pytest.mark.parametrize("origin", [(5, 5), (1, 1), (8, 3)])
    def test_ring_on_open_grid(self, carved_grid, origin):
        grid = carved_grid(10, 10)
        visible = ShadowCaster(grid).compute(origin, radius=1)
        assert ring(*origin) <= visible

    def test_zero_radius_sees_ring_only(self, carved_grid):
        grid = carved_grid(10, 10)
        assert ShadowCaster(grid).compute((5, 5), radius=0) == ring(5, 5)

    def test_ring_includes_walls(self, carved_grid):
        """Adjacent walls are seen even when fully enclosed."""
        walls = ring(5, 5) - {Coord(5, 5)}
        grid = carved_grid(10, 10, walls=walls)
        assert ShadowCaster(grid).compute((5, 5), radius=8) == ring(5, 5)

    def test_ring_clipped_at_edge(self, carved_grid):
        grid = carved_grid(4, 4)
        visible = ShadowCaster(grid).compute((0, 0), radius=0)
        assert visible == {Coord(0, 0), Coord(1, 0), Coord(0, 1), Coord(1, 1)}

    def test_ring_ignores_cone(self, carved_grid):
        grid = carved_grid(10, 10)
        visible = ShadowCaster(grid).compute((5, 5), radius=3, angle=0.0, span=10.0)
        assert ring(5, 5) <= visible


class TestOcclusion:
    """Test that opaque cells cast shadows."""

    def test_wall_blocks_cardinal_target(self, carved_grid):
        grid = carved_grid(11, 11, walls=[(7, 5)])
        visible = ShadowCaster(grid).compute((5, 5), radius=5)
        assert Coord(6, 5) in visible
        assert Coord(7, 5) in visible
        assert Coord(8, 5) not in visible
        assert Coord(9, 5) not in visible

    @pytest.mark.parametrize("wall,target", [
        ((3, 5), (1, 5)),
        ((5, 7), (5, 9)),
        ((5, 3), (5, 1)),
    ])
    def test_wall_blocks_every_direction(self, carved_grid, wall, target):
        grid = carved_grid(11, 11, walls=[wall])
        visible = ShadowCaster(grid).compute((5, 5), radius=5)
        assert Coord(*wall) in visible
        assert Coord(*target) not in visible

    def test_obstacle_that_is_see_through(self, carved_grid):
        """Solidity alone does not block sight."""
        grid = carved_grid(11, 11, walls=[(7, 5)])
        grid.lookup((7, 5)).opaque = False
        visible = ShadowCaster(grid).compute((5, 5), radius=5)
        assert Coord(9, 5) in visible

    def test_radius_limits_sight(self, carved_grid):
        grid = carved_grid(21, 21)
        visible = ShadowCaster(grid).compute((10, 10), radius=4)
        assert Coord(14, 10) in visible
        assert Coord(15, 10) not in visible
        assert Coord(14, 14) not in visible

    def test_pure_query(self, carved_grid):
        """Computing the field of view leaves fog of war untouched."""
        grid = carved_grid(11, 11)
        ShadowCaster(grid).compute((5, 5), radius=5)
        assert not any(cell.seen or cell.explored for cell in grid)


class TestVisionCone:
    """Test facing angle and span restrictions."""

    def test_zero_span_sees_ray(self, carved_grid):
        grid = carved_grid(11, 11)
        visible = ShadowCaster(grid).compute((5, 5), radius=4, angle=0.0, span=0.0)
        ray = {Coord(x, 5) for x in range(6, 10)}
        assert visible == ring(5, 5) | ray

    def test_full_span_equals_omnidirectional(self, carved_grid):
        grid = carved_grid(15, 15, walls=[(9, 7), (6, 4), (7, 10), (10, 10)])
        caster = ShadowCaster(grid)
        omni = caster.compute((7, 7), radius=6)
        assert caster.compute((7, 7), radius=6, angle=123.0, span=360.0) == omni
        assert caster.compute((7, 7), radius=6, angle=0.0, span=720.0) == omni

    def test_half_cone_faces_down(self, carved_grid):
        """A 180 degree cone facing +y keeps the lower half."""
        grid = carved_grid(11, 11)
        visible = ShadowCaster(grid).compute((5, 5), radius=4, angle=90.0, span=180.0)
        assert Coord(5, 9) in visible
        assert Coord(1, 5) in visible
        assert Coord(5, 1) not in visible
        assert all(c.y >= 4 for c in visible)

    def test_in_cone(self):
        assert ShadowCaster.in_cone((0, 0), (5, 1), 0.0, 30.0)
        assert not ShadowCaster.in_cone((0, 0), (0, 5), 0.0, 30.0)
        assert ShadowCaster.in_cone((0, 0), (5, -1), 350.0, 30.0)
        assert ShadowCaster.in_cone((0, 0), (0, 0), 0.0, 0.0)

    def test_negative_arguments(self, carved_grid):
        caster = ShadowCaster(carved_grid(5, 5))
        with pytest.raises(ValueError, match="radius"):
            caster.compute((2, 2), radius=-1)
        with pytest.raises(ValueError, match="span"):
            caster.compute((2, 2), radius=2, angle=0.0, span=-5.0)


class TestNudge:
    """Test stance-based vantage shifts."""

    def test_nudged_origin(self, carved_grid):
        caster = ShadowCaster(carved_grid(11, 11))
        assert caster.nudged_origin((5, 5), 0.0, 1.0) == Coord(6, 5)
        assert caster.nudged_origin((5, 5), 90.0, 1.0) == Coord(5, 6)
        assert caster.nudged_origin((5, 5), 180.0, -1.0) == Coord(6, 5)

    def test_nudge_blocked_by_wall(self, carved_grid):
        caster = ShadowCaster(carved_grid(11, 11, walls=[(6, 5)]))
        assert caster.nudged_origin((5, 5), 0.0, 1.0) == Coord(5, 5)

    def test_nudge_off_grid(self, carved_grid):
        caster = ShadowCaster(carved_grid(11, 11))
        assert caster.nudged_origin((10, 5), 0.0, 1.0) == Coord(10, 5)

    def test_erect_sees_past_corner(self, carved_grid):
        """Standing tall shifts the vantage forward around a blocker."""
        grid = carved_grid(15, 15, walls=[(8, 7)])
        caster = ShadowCaster(grid)
        crouched = caster.compute((7, 7), radius=6, angle=90.0, span=360.0,
                                  nudge=Stance.CROUCH.nudge)
        erect = caster.compute((7, 7), radius=6, angle=90.0, span=360.0,
                               nudge=Stance.ERECT.nudge)
        assert Coord(10, 7) not in crouched
        assert Coord(10, 7) in erect

    def test_stance_values(self):
        assert Stance.ERECT.nudge > Stance.CROUCH.nudge > Stance.PRONE.nudge


class TestGridEdges:
    """Test scans that reach or start beyond the grid edge."""

    def test_huge_radius_on_small_grid(self, carved_grid):
        """Scanning stops at the grid edge, not at the radius."""
        grid = carved_grid(10, 10)
        start = time.perf_counter()
        visible = ShadowCaster(grid).compute((5, 5), radius=1500)
        elapsed = time.perf_counter() - start

        assert visible == {cell.position for cell in grid}
        assert elapsed < 1.0, f"Field of view took {elapsed:.2f}s on a 10x10 grid"

    def test_huge_radius_matches_covering_radius(self, carved_grid):
        """Clamping rows to the grid does not change the shadows."""
        grid = carved_grid(12, 9, walls=[(6, 4), (3, 2), (9, 7), (2, 6)])
        caster = ShadowCaster(grid)
        assert caster.compute((4, 4), radius=10000) == caster.compute((4, 4), radius=20)
        assert caster.compute((0, 8), radius=10000) == caster.compute((0, 8), radius=20)

    @pytest.mark.parametrize("origin", [(-3, -3), (10, 4), (4, 10), (-1, 5)])
    def test_off_grid_origin_sees_nothing(self, carved_grid, origin):
        grid = carved_grid(10, 10)
        caster = ShadowCaster(grid)
        assert caster.compute(origin, radius=8) == set()
        assert caster.last_visible_count == 0
        assert not caster.can_see(origin, (0, 0), radius=8)


class TestHelpers:
    """Test convenience wrappers and stats."""

    def test_compute_fov_matches_caster(self, carved_grid):
        grid = carved_grid(9, 9, walls=[(6, 4)])
        assert compute_fov(grid, (4, 4), 4) == ShadowCaster(grid).compute((4, 4), 4)

    def test_can_see(self, carved_grid):
        grid = carved_grid(11, 11, walls=[(7, 5)])
        caster = ShadowCaster(grid)
        assert caster.can_see((5, 5), (6, 5), radius=5)
        assert not caster.can_see((5, 5), (9, 5), radius=5)
        assert not caster.can_see((5, 5), (50, 5), radius=5)

    def test_stats(self, carved_grid):
        caster = ShadowCaster(carved_grid(5, 5))
        caster.compute((2, 2), radius=0)
        assert caster.casts == 1
        assert caster.last_visible_count == 9
