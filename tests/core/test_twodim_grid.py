"""Tests for the TwodimGrid class."""

from dataclasses import dataclass, replace

import pytest
from cellengine.core.config import EdgePolicy, GridConfig
from cellengine.core.coord import Coordinate, GridCoord
from cellengine.core.grid import TwodimGrid
from cellengine.core.nhood import MooreNhood, VonNeumannNhood
from cellengine.core.traits import Cell, EmptyState, EvolutionState


@dataclass
class CountCell(Cell):
    """Becomes the number of neighbors whose value is 1."""

    coord: GridCoord
    value: int = 1

    @classmethod
    def with_coord(cls, coord):
        return cls(coord)

    def update(self, neighbors, state):
        return replace(self, value=sum(1 for n in neighbors if n is not None and n.value == 1))


class Ticks(EvolutionState):
    def __init__(self):
        self.ticks = 0

    def update(self):
        self.ticks += 1


@dataclass
class StampCell(Cell):
    """Copies the global tick count seen during its update."""

    coord: GridCoord
    seen: int = -1

    @classmethod
    def with_coord(cls, coord):
        return cls(coord)

    def update(self, neighbors, state):
        return replace(self, seen=state.ticks)


@dataclass
class NoneCell(Cell):
    coord: GridCoord

    @classmethod
    def with_coord(cls, coord):
        return cls(coord)

    def update(self, neighbors, state):
        return None


class ShortNhood(MooreNhood):
    """Declares eight neighbors but returns seven."""

    def neighbors(self, coord):
        return super().neighbors(coord)[:7]


def coords_of(cells):
    return [None if c is None else c.coord.as_tuple() for c in cells]


class TestTwodimGrid:
    """Test cases for the TwodimGrid class."""

    def test_initialization(self):
        """Test grid initialization."""
        grid = TwodimGrid(4, 5, MooreNhood(), EmptyState(), CountCell)

        assert grid.rows == 4
        assert grid.cols == 5
        assert len(grid) == 20
        assert grid.generation == 0
        assert grid.edge_policy is EdgePolicy.BOUNDED
        assert isinstance(grid.state(), EmptyState)

    def test_dimensions_without_update(self):
        """Test dimensions are available right after construction."""
        grid = TwodimGrid(4, 5, MooreNhood(), EmptyState(), CountCell)

        dims = grid.dimensions()
        assert dims == Coordinate.from_2d(4, 5)
        assert (dims.x, dims.y) == (4, 5)

    def test_cells_initialized_with_coords(self):
        """Test each slot holds a default cell bound to its coordinate."""
        grid = TwodimGrid(3, 4, MooreNhood(), EmptyState(), CountCell)
        cells = grid.cells()

        assert len(cells) == 12
        for offset, cell in enumerate(cells):
            assert cell.coord == GridCoord.from_offset(offset, 3, 4)
            assert cell.value == 1

    def test_invalid_extents(self):
        """Test non-positive extents are rejected."""
        with pytest.raises(ValueError):
            TwodimGrid(0, 5, MooreNhood(), EmptyState(), CountCell)

        with pytest.raises(ValueError):
            TwodimGrid(5, -1, MooreNhood(), EmptyState(), CountCell)

    def test_invalid_workers(self):
        """Test a worker count below one is rejected."""
        with pytest.raises(ValueError):
            TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell, workers=0)

    def test_neighbor_count_mismatch(self):
        """Test a neighborhood breaking its declared count fails construction."""
        with pytest.raises(ValueError, match="expected 8"):
            TwodimGrid(3, 3, ShortNhood(), EmptyState(), CountCell)

    def test_from_config(self):
        """Test creating a grid from a GridConfig."""
        config = GridConfig(rows=2, cols=6, edge_policy=EdgePolicy.TOROIDAL, workers=2)
        grid = TwodimGrid.from_config(config, VonNeumannNhood(), EmptyState(), CountCell)

        assert (grid.rows, grid.cols) == (2, 6)
        assert grid.edge_policy is EdgePolicy.TOROIDAL

    def test_step_isolation(self):
        """Test updates only ever read the previous generation."""
        grid = TwodimGrid(5, 5, MooreNhood(), EmptyState(), CountCell)
        grid.update()

        # Interior cells all saw eight 1-valued neighbors
        for y in range(1, 4):
            for x in range(1, 4):
                assert grid.cell_at(x, y).value == 8

        # Borders see fewer neighbors but never updated values
        assert grid.cell_at(0, 0).value == 3
        assert grid.cell_at(4, 4).value == 3
        assert grid.cell_at(2, 0).value == 5
        assert grid.cell_at(0, 2).value == 5

    def test_second_step_reads_first_generation(self):
        """Test the swapped buffer becomes the input of the next step."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        grid.update()
        grid.update()

        # No cell held value 1 after the first step
        assert all(c.value == 0 for c in grid.cells())
        assert grid.generation == 2

    def test_state_updates_after_cell_pass(self):
        """Test every cell of a step sees the same state value."""
        grid = TwodimGrid(3, 3, MooreNhood(), Ticks(), StampCell)

        grid.update()
        assert {c.seen for c in grid.cells()} == {0}
        assert grid.state().ticks == 1

        grid.update()
        assert {c.seen for c in grid.cells()} == {1}
        assert grid.state().ticks == 2

    def test_update_must_return_cell(self):
        """Test a cell update returning None fails loudly."""
        grid = TwodimGrid(2, 2, MooreNhood(), EmptyState(), NoneCell)
        with pytest.raises(TypeError):
            grid.update()

    def test_cells_is_snapshot(self):
        """Test a returned snapshot is not changed by later steps."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        before = grid.cells()

        grid.update()
        grid.update()

        assert isinstance(before, tuple)
        assert all(c.value == 1 for c in before)

    def test_set_cells_partial(self):
        """Test set_cells replaces only the given slots."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        grid.set_cells([CountCell(GridCoord(1, 2), value=7), CountCell(GridCoord(0, 0), value=9)])

        assert grid.cell_at(1, 2).value == 7
        assert grid.cell_at(0, 0).value == 9
        assert grid.cell_at(2, 2).value == 1

    def test_set_cells_wholesale(self):
        """Test passing a full generation replaces every cell."""
        grid = TwodimGrid(2, 3, MooreNhood(), EmptyState(), CountCell)
        new_cells = [CountCell(GridCoord.from_offset(i, 2, 3), value=i) for i in range(6)]

        grid.set_cells(reversed(new_cells))

        assert list(grid.cells()) == new_cells

    def test_set_cells_visible_to_next_update(self):
        """Test injected cells are the input of the next step."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        grid.update()
        grid.set_cells([CountCell(GridCoord(0, 0), value=1)])
        grid.update()

        # Only (0, 0) held 1, so its neighbors count one
        assert grid.cell_at(1, 1).value == 1
        assert grid.cell_at(2, 2).value == 0
        assert grid.cell_at(0, 0).value == 0

    def test_set_cells_out_of_bounds(self):
        """Test cells with off-grid coordinates are rejected."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)

        with pytest.raises(IndexError):
            grid.set_cells([CountCell(GridCoord(3, 0))])

        with pytest.raises(IndexError):
            grid.set_cells([CountCell(GridCoord(0, -1))])

    def test_set_cells_rejected_batch_changes_nothing(self):
        """Test a batch with one off-grid cell leaves every slot untouched."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        before = grid.cells()

        with pytest.raises(IndexError):
            grid.set_cells([CountCell(GridCoord(1, 1), value=7), CountCell(GridCoord(9, 9), value=7)])

        assert grid.cell_at(1, 1).value == 1
        assert grid.cells() == before

    def test_cell_at_out_of_bounds(self):
        """Test cell_at rejects off-grid positions."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        with pytest.raises(IndexError):
            grid.cell_at(3, 0)

    def test_neighbors_of_out_of_bounds(self):
        """Test neighbors_of rejects off-grid positions."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)

        with pytest.raises(IndexError):
            grid.neighbors_of(3, 0)

        with pytest.raises(IndexError):
            grid.neighbors_of(0, -1)

    def test_parallel_pass_matches_sequential(self):
        """Test splitting the cell pass across threads changes nothing."""
        serial = TwodimGrid(7, 9, MooreNhood(), EmptyState(), CountCell)
        threaded = TwodimGrid(7, 9, MooreNhood(), EmptyState(), CountCell, workers=4)

        seed = [CountCell(GridCoord(x, y), value=(x * y) % 2) for y in range(7) for x in range(9)]
        serial.set_cells(seed)
        threaded.set_cells(seed)

        for _ in range(3):
            serial.update()
            threaded.update()
            assert serial.cells() == threaded.cells()

    def test_single_worker_has_no_pool(self):
        """Test a single-worker grid starts no threads."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        assert grid._pool is None
        grid.close()
        assert grid._pool is None

    def test_pool_reused_across_steps(self):
        """Test a threaded grid keeps one pool for all its steps."""
        grid = TwodimGrid(6, 6, MooreNhood(), EmptyState(), CountCell, workers=3)
        pool = grid._pool
        assert pool is not None

        grid.update()
        grid.update()

        assert grid._pool is pool
        grid.close()

    def test_close_falls_back_to_calling_thread(self):
        """Test updates after close still match a single-worker grid."""
        serial = TwodimGrid(5, 5, MooreNhood(), EmptyState(), CountCell)
        threaded = TwodimGrid(5, 5, MooreNhood(), EmptyState(), CountCell, workers=2)

        threaded.update()
        serial.update()
        threaded.close()
        assert threaded._pool is None

        threaded.update()
        serial.update()
        assert serial.cells() == threaded.cells()

    def test_context_manager_closes_pool(self):
        """Test leaving a with block shuts the pool down."""
        with TwodimGrid(4, 4, MooreNhood(), EmptyState(), CountCell, workers=2) as grid:
            grid.update()
            assert grid._pool is not None

        assert grid._pool is None
        assert grid.generation == 1


class TestEdgePolicy:
    """Test cases for neighbor resolution at grid borders."""

    def test_bounded_corner(self):
        """Test off-grid neighbors are None placeholders."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell)
        neighbors = grid.neighbors_of(0, 0)

        assert len(neighbors) == 8
        assert coords_of(neighbors) == [None, None, None, None, (1, 0), None, (0, 1), (1, 1)]

    def test_toroidal_corner(self):
        """Test off-grid neighbors wrap around."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell, edge_policy=EdgePolicy.TOROIDAL)
        neighbors = grid.neighbors_of(0, 0)

        assert coords_of(neighbors) == [(2, 2), (0, 2), (1, 2), (2, 0), (1, 0), (2, 1), (0, 1), (1, 1)]

    def test_clamp_corner(self):
        """Test off-grid neighbors clamp to the nearest edge cell."""
        grid = TwodimGrid(3, 3, MooreNhood(), EmptyState(), CountCell, edge_policy=EdgePolicy.CLAMP)
        neighbors = grid.neighbors_of(0, 0)

        assert coords_of(neighbors) == [(0, 0), (0, 0), (1, 0), (0, 0), (1, 0), (0, 1), (0, 1), (1, 1)]

    def test_policy_from_string(self):
        """Test the policy can be given by value."""
        grid = TwodimGrid(2, 2, VonNeumannNhood(), EmptyState(), CountCell, edge_policy="toroidal")
        assert grid.edge_policy is EdgePolicy.TOROIDAL

    def test_toroidal_uniform_counts(self):
        """Test every cell of a torus sees eight neighbors."""
        grid = TwodimGrid(4, 4, MooreNhood(), EmptyState(), CountCell, edge_policy=EdgePolicy.TOROIDAL)
        grid.update()
        assert {c.value for c in grid.cells()} == {8}

    def test_rectangular_bounded(self):
        """Test border handling on a grid with more columns than rows."""
        grid = TwodimGrid(2, 5, VonNeumannNhood(), EmptyState(), CountCell)
        grid.update()

        # Top-right corner: only left and down exist
        assert grid.cell_at(4, 0).value == 2
        # Bottom middle: up, left, right
        assert grid.cell_at(2, 1).value == 3
