"""
Hex Topology Validation

Validates the axial hexagonal neighborhood used by the crystal automaton:
- Direction table and neighbor coordinates
- Bounds checks and in-bounds neighbor counts
- Vectorized neighbor sums, adjacency masks and shifts
- Lattice symmetries (60 degree rotation, transposition)
"""

import pytest
import numpy as np
from src.core.hex_topology import HexTopology, HEX_DIRECTIONS, HEX_KERNEL, hex_distance, rotate_60


class TestNeighbors:
    """Test neighbor coordinate generation."""

    def test_six_directions(self):
        """Direction table has six distinct, opposite-paired vectors."""
        assert len(HEX_DIRECTIONS) == 6
        assert len(set(HEX_DIRECTIONS)) == 6
        for dx, dy in HEX_DIRECTIONS:
            assert (-dx, -dy) in HEX_DIRECTIONS

    def test_neighbors_of_interior_cell(self):
        """Neighbors follow the 0..300 degree direction order."""
        topology = HexTopology(10)
        assert topology.neighbors(5, 5) == [(6, 5), (6, 4), (5, 4), (4, 5), (4, 6), (5, 6)]

    def test_neighbors_not_clipped(self):
        """neighbors() returns all six even at the edge."""
        topology = HexTopology(10)
        assert len(topology.neighbors(0, 0)) == 6
        assert topology.in_bounds_neighbors(0, 0) == [(1, 0), (0, 1)]

    def test_adjacency_is_symmetric(self):
        """If b is a neighbor of a then a is a neighbor of b."""
        topology = HexTopology(8)
        for y in range(8):
            for x in range(8):
                for nx, ny in topology.in_bounds_neighbors(x, y):
                    assert (x, y) in topology.neighbors(nx, ny)


class TestBounds:
    """Test bounds checks and neighbor counts."""

    @pytest.mark.parametrize("x,y,expected", [
        (0, 0, True),
        (9, 9, True),
        (-1, 0, False),
        (0, -1, False),
        (10, 0, False),
        (0, 10, False),
    ])
    def test_in_bounds(self, x, y, expected):
        """in_bounds is true iff 0 <= x, y < N."""
        assert HexTopology(10).in_bounds(x, y) is expected

    def test_invalid_size(self):
        """Non-positive sizes are rejected."""
        with pytest.raises(ValueError, match="must be positive"):
            HexTopology(0)

    def test_neighbor_counts_match_in_bounds_neighbors(self):
        """Vectorized counts agree with the per-cell neighbor lists."""
        topology = HexTopology(8)
        for y in range(8):
            for x in range(8):
                assert topology.neighbor_counts[y, x] == len(topology.in_bounds_neighbors(x, y))

    def test_neighbor_counts_values(self):
        """Six neighbors inside, fewer on edges and corners."""
        topology = HexTopology(8)
        assert topology.neighbor_counts[4, 4] == 6
        assert topology.neighbor_counts[0, 0] == 2
        assert topology.neighbor_counts[7, 7] == 2
        assert topology.neighbor_counts[0, 7] == 3
        assert topology.neighbor_counts[7, 0] == 3
        assert topology.neighbor_counts[4, 0] == 4
        assert np.all(topology.neighbor_counts > 0)


class TestVectorizedQueries:
    """Test whole-grid neighbor operations."""

    def test_neighbor_sum_of_point(self):
        """A single unit value spreads to exactly its six neighbors."""
        topology = HexTopology(8)
        values = np.zeros((8, 8))
        values[3, 3] = 1.0

        sums = topology.neighbor_sum(values)

        expected = np.zeros((8, 8))
        for nx, ny in topology.neighbors(3, 3):
            expected[ny, nx] = 1.0
        assert np.array_equal(sums, expected)

    def test_neighbor_sum_does_not_modify_input(self):
        """neighbor_sum writes a new array."""
        topology = HexTopology(8)
        values = np.random.random((8, 8))
        original = values.copy()
        topology.neighbor_sum(values)
        assert np.array_equal(values, original)

    def test_neighbor_average_of_constant_field(self):
        """Averages divide by the in-bounds count, so a constant stays constant."""
        topology = HexTopology(8)
        values = np.full((8, 8), 0.5)
        assert np.allclose(topology.neighbor_average(values), 0.5)

    def test_touches(self):
        """touches marks the six neighbors of a set cell, not the cell itself."""
        topology = HexTopology(8)
        mask = np.zeros((8, 8), dtype=bool)
        mask[4, 4] = True

        touched = topology.touches(mask)

        assert np.count_nonzero(touched) == 6
        assert not touched[4, 4]
        assert not touched[3, 3]  # (-1, -1) is not a hex direction
        assert not touched[5, 5]

    @pytest.mark.parametrize("direction", HEX_DIRECTIONS)
    def test_shifted(self, direction):
        """shifted moves a cell by exactly one direction vector."""
        dx, dy = direction
        topology = HexTopology(8)
        mask = np.zeros((8, 8), dtype=bool)
        mask[4, 4] = True

        moved = topology.shifted(mask, dx, dy)

        assert np.count_nonzero(moved) == 1
        assert moved[4 + dy, 4 + dx]

    def test_shifted_drops_cells_at_edge(self):
        """Cells shifted past the edge disappear."""
        topology = HexTopology(8)
        mask = np.zeros((8, 8), dtype=bool)
        mask[0, 7] = True
        assert not topology.shifted(mask, 1, 0).any()

    def test_kernel_transpose_symmetric(self):
        """The hex kernel is invariant under transposition and point reflection."""
        assert np.array_equal(HEX_KERNEL, HEX_KERNEL.T)
        assert np.array_equal(HEX_KERNEL, HEX_KERNEL[::-1, ::-1])


class TestLatticeGeometry:
    """Test hex distance and rotation helpers."""

    def test_hex_distance_to_neighbors(self):
        """All six neighbors are at distance 1."""
        for dx, dy in HEX_DIRECTIONS:
            assert hex_distance((5, 5), (5 + dx, 5 + dy)) == 1

    def test_hex_distance_non_neighbor_diagonal(self):
        """The (1, 1) diagonal is two steps away."""
        assert hex_distance((0, 0), (1, 1)) == 2
        assert hex_distance((0, 0), (3, -3)) == 3

    def test_rotation_permutes_directions(self):
        """Rotating a neighbor of the center gives another neighbor."""
        center = (5, 5)
        rotated = {rotate_60(5 + dx, 5 + dy, center) for dx, dy in HEX_DIRECTIONS}
        assert rotated == {(5 + dx, 5 + dy) for dx, dy in HEX_DIRECTIONS}

    def test_six_rotations_are_identity(self):
        """Six 60 degree rotations return to the start."""
        point = (7, 2)
        center = (5, 5)
        for _ in range(6):
            point = rotate_60(point[0], point[1], center)
        assert point == (7, 2)

    def test_rotation_preserves_distance(self):
        """Rotation about the center keeps hex distance to the center."""
        center = (10, 10)
        for x, y in [(12, 9), (14, 10), (8, 13), (10, 4)]:
            assert hex_distance(center, rotate_60(x, y, center)) == hex_distance(center, (x, y))
