"""
Wire growth: a randomized self-avoiding walk over the grid.

A wire starts at one claimed cell and extends one 8-connected step at a
time. Each step either follows the painted flow field (weighted by the
strength of the channel matching every candidate turn) or picks among
straight / left / right with a power-curve bias controlled by
``straightness``. Candidate cells must be interior, unclaimed, and must
not cut diagonally between two claimed cells.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

from .alea_prng import AleaPRNG
from .directions import N_DIRECTIONS, channel_of, is_diagonal, offset_of
from .flow_field import FlowField
from .grid_occupancy import Cell, GridOccupancy


MAX_STEP_ATTEMPTS = 50

# Each turn offset t has flow weight index t + 4.
FLOW_TURN_OFFSETS = tuple(range(-4, 4))


@dataclass
class Wire:
    """Cells of one wire in growth order, plus the current heading index."""

    cells: List[Cell]
    last: int = 0
    halted: bool = field(default=False, compare=False)

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def head(self) -> Cell:
        return self.cells[-1]

    def positions(self):
        return [cell.position for cell in self.cells]


@dataclass
class WireOptions:
    """Growth parameters shared by every wire of a field."""

    wire_length: int = 14
    straightness: float = 7.0
    flow_influence: float = 1.0


class WireGenerator:
    """Seeds and grows wires against a shared grid and flow field."""

    def __init__(
        self,
        grid: GridOccupancy,
        flow: FlowField,
        prng: AleaPRNG,
        options: Optional[WireOptions] = None,
    ):
        if grid.width < 1 or grid.height < 1:
            raise ValueError("Cannot grow wires on an empty grid")
        self.grid = grid
        self.flow = flow
        self.prng = prng
        self.options = options or WireOptions()

    def seed(self, start: Cell) -> Wire:
        """Create a wire on an already-claimed start cell and pick its heading."""
        return Wire(cells=[start], last=self._random_open_direction(start))

    def grow(self, wire: Wire) -> Wire:
        """Extend ``wire`` until it reaches the target length or gets blocked."""
        while len(wire.cells) < self.options.wire_length:
            if not self._step(wire):
                wire.halted = True
                break
        return wire

    def generate(self, start: Cell) -> Wire:
        return self.grow(self.seed(start))

    def _random_open_direction(self, start: Cell) -> int:
        """First direction, in random order, that leads to an open interior cell."""
        remaining = list(range(N_DIRECTIONS))
        while remaining:
            direction = remaining.pop(self.prng.random_int(len(remaining)))
            dx, dy = offset_of(direction)
            if self.grid.is_interior_and_available(start.x + dx, start.y + dy):
                return direction
        return 0

    def _flow_biases(self, cell: Cell, last: int) -> List[int]:
        return [
            self.flow.get(cell.x, cell.y, channel_of((last + i + 4) % N_DIRECTIONS))
            for i in range(N_DIRECTIONS)
        ]

    def _flow_turn(self, biases: List[int], attempted: Set[int]) -> Optional[int]:
        """
        Weighted pick among turn offsets not tried yet this step.

        Returns None when no untried offset has any weight.
        """
        candidates = [
            (offset, biases[offset + 4])
            for offset in FLOW_TURN_OFFSETS
            if offset not in attempted
        ]
        total = sum(weight for _, weight in candidates)
        if total == 0:
            return None

        pick = self.prng.random_int(total)
        cumulative = 0
        for offset, weight in candidates:
            cumulative += weight
            if pick < cumulative:
                attempted.add(offset)
                return offset
        return None

    def _straightness_turn(self, modifiers: List[int]) -> int:
        """Remove and return a modifier, strongly favouring index 0 (straight)."""
        index = int(pow(self.prng.random(), self.options.straightness) * len(modifiers))
        # straightness 0 makes the power term exactly 1
        return modifiers.pop(min(index, len(modifiers) - 1))

    def _step(self, wire: Wire) -> bool:
        current = wire.head
        modifiers = [0, 1, -1] if self.prng.random() > 0.5 else [0, -1, 1]

        biases = self._flow_biases(current, wire.last)
        total_flow_bias = sum(biases)
        attempted: Set[int] = set()

        attempts = 0
        while modifiers and attempts < MAX_STEP_ATTEMPTS:
            attempts += 1

            turn = None
            if total_flow_bias > 0 and self.prng.random() < self.options.flow_influence:
                turn = self._flow_turn(biases, attempted)
            if turn is None:
                turn = self._straightness_turn(modifiers)

            direction = (wire.last + 4 + turn) % N_DIRECTIONS
            dx, dy = offset_of(direction)
            nx, ny = current.x + dx, current.y + dy

            if not self.grid.is_interior_and_available(nx, ny):
                continue
            if not self._is_valid_diagonal(direction, nx, ny):
                continue

            next_cell = self.grid.cell(nx, ny)
            self.grid.claim(next_cell)
            wire.cells.append(next_cell)
            wire.last = (wire.last + turn) % N_DIRECTIONS
            return True

        return False

    def _is_valid_diagonal(self, direction: int, x: int, y: int) -> bool:
        """
        A diagonal step into (x, y) must leave one of the two cells it
        passes between unclaimed, otherwise it would cross another wire.
        """
        if not is_diagonal(direction):
            return True
        dx, dy = offset_of(direction)
        return self.grid.is_available(x - dx, y) or self.grid.is_available(x, y - dy)
