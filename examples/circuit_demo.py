#!/usr/bin/env python3
"""
Demo script: generate a field, paint a diagonal band of flow, regenerate
and compare how the wires change.
"""

from collections import Counter

from circuit_field.config import FieldParams, configure_logging, settings
from circuit_field.core import FlowChannel
from circuit_field.core.field_generator import FieldGenerator, PaintCommand, RegenerateCommand
from circuit_field.render import render_field


def direction_histogram(state):
    """Count steps per (dx, dy) over all wires."""
    steps = Counter()
    for wire in state.wires:
        for a, b in zip(wire.cells, wire.cells[1:]):
            steps[(b.x - a.x, b.y - a.y)] += 1
    return steps


def main():
    configure_logging(settings)

    print("Circuit Field Demo")
    print("=" * 40)

    params = FieldParams(viewport_width=400, viewport_height=300, cell_size=10, seed=7, flow_influence=0.0)
    session = FieldGenerator(params)
    state = session.generate()

    lengths = [len(w) for w in state.wires]
    print(f"Grid: {state.grid.width}x{state.grid.height}")
    print(f"Wires: {len(state.wires)} (drawn: {len(session.render_wires())})")
    print(f"Longest wire: {max(lengths)} cells")
    print(f"Steps by direction: {dict(direction_histogram(state))}")
    render_field(state, path="circuit_plain.png")

    # Paint a NW-SE band and let the wires follow it
    for i in range(0, min(state.grid.width, state.grid.height), 2):
        session.dispatch(PaintCommand(center_x=i + 0.5, center_y=i + 0.5, channel=FlowChannel.DIAGONAL_NW_SE, radius=4, opacity=1.0))

    state = session.dispatch(RegenerateCommand(params=params.model_copy(update={"flow_influence": 1.0})))
    print("\nAfter painting a diagonal band:")
    print(f"Wires: {len(state.wires)} (drawn: {len(session.render_wires())})")
    print(f"Steps by direction: {dict(direction_histogram(state))}")
    render_field(state, path="circuit_flow.png")
    print("\nWrote circuit_plain.png and circuit_flow.png")


if __name__ == "__main__":
    main()
