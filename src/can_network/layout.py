"""
Layout engine for CAN network diagrams.

Buses are drawn as horizontal rows stacked top to bottom.  ECUs sit in one
of two bands: above the first bus row or below the last one.

    y=100   ┌ECU┐        ┌ECU┐          ← above band (fixed)
            │   │        │   │
    y=250   ══════════════════════      ← bus 0
    y=310   ══════════════════════      ← bus 1
            ...                         ← base + spacing * (n - 1)
            ┌ECU┐                       ← below band = last bus + gap

Only the vertical coordinate of an ECU is ever computed here.  Horizontal
placement is set once by derivation and is free to drag afterwards.

The band helpers in this module are the single source of band geometry.
Derivation defaults, ``calculate_layout`` and the position toggle all call
them with the current bus count.

Spacing constants:
  - Bus rows: start at y=250, 60px apart, inset 100px from each side
  - Above band: y=100
  - Below band: 80px under the last bus row
  - Default ECU x: 100px, then every 200px
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Bus, EcuNode, LayoutResult, PlacedBus, Position


# --- Geometry constants ---

BUS_BASE_Y = 250
BUS_VERTICAL_SPACING = 60
BUS_HORIZONTAL_INSET = 100

ABOVE_BAND_Y = 100
BELOW_BAND_GAP = 80

ECU_START_X = 100
ECU_HORIZONTAL_STEP = 200


@dataclass
class LayoutOptions:
    """Geometry used by the layout engine and everything that snaps to it."""
    bus_base_y: float = BUS_BASE_Y
    bus_vertical_spacing: float = BUS_VERTICAL_SPACING
    bus_horizontal_inset: float = BUS_HORIZONTAL_INSET
    above_band_y: float = ABOVE_BAND_Y
    below_band_gap: float = BELOW_BAND_GAP
    ecu_start_x: float = ECU_START_X
    ecu_horizontal_step: float = ECU_HORIZONTAL_STEP


DEFAULT_OPTIONS = LayoutOptions()


# ---------------------------------------------------------------------------
# Band geometry
# ---------------------------------------------------------------------------

def bus_row_y(index: int, options: Optional[LayoutOptions] = None) -> float:
    """Y coordinate of the bus row at ``index``."""
    opts = options or DEFAULT_OPTIONS
    return opts.bus_base_y + index * opts.bus_vertical_spacing


def above_band_y(options: Optional[LayoutOptions] = None) -> float:
    """Y coordinate of the band above the buses.  Independent of bus count."""
    opts = options or DEFAULT_OPTIONS
    return opts.above_band_y


def below_band_y(bus_count: int, options: Optional[LayoutOptions] = None) -> float:
    """Y coordinate of the band below the last bus row.

    With no buses the "last row" sits one spacing above the base, so the
    band still lands below where the first bus would be drawn.
    """
    opts = options or DEFAULT_OPTIONS
    return bus_row_y(bus_count - 1, opts) + opts.below_band_gap


def band_y(
    is_above_bus: bool,
    bus_count: int,
    options: Optional[LayoutOptions] = None,
) -> float:
    """Y coordinate for an ECU in the given band."""
    if is_above_bus:
        return above_band_y(options)
    return below_band_y(bus_count, options)


def default_ecu_x(index: int, options: Optional[LayoutOptions] = None) -> float:
    """Initial x coordinate for the ECU at ``index`` in document order."""
    opts = options or DEFAULT_OPTIONS
    return opts.ecu_start_x + index * opts.ecu_horizontal_step


def check_canvas_width(canvas_width: float) -> None:
    """Raise ``ValueError`` unless ``canvas_width`` is a positive measurement."""
    if canvas_width <= 0:
        raise ValueError(f"Canvas width must be positive, got {canvas_width}")


def bus_width(canvas_width: float, options: Optional[LayoutOptions] = None) -> float:
    """Rendered width of every bus row, inset symmetrically from both edges."""
    opts = options or DEFAULT_OPTIONS
    return canvas_width - 2 * opts.bus_horizontal_inset


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def place_buses(
    buses: list[Bus],
    canvas_width: float,
    options: Optional[LayoutOptions] = None,
) -> list[PlacedBus]:
    """Stack buses vertically in derivation order, spanning the canvas."""
    opts = options or DEFAULT_OPTIONS
    width = bus_width(canvas_width, opts)
    return [
        PlacedBus(
            id=bus.id,
            name=bus.name,
            position=Position(x=opts.bus_horizontal_inset, y=bus_row_y(index, opts)),
            width=width,
        )
        for index, bus in enumerate(buses)
    ]


def snap_to_band(
    ecu: EcuNode,
    bus_count: int,
    options: Optional[LayoutOptions] = None,
) -> EcuNode:
    """Return a copy of ``ecu`` with y set to its current band."""
    y = band_y(ecu.is_above_bus, bus_count, options)
    return ecu.model_copy(update={"position": Position(x=ecu.position.x, y=y)})


def calculate_layout(
    buses: list[Bus],
    ecu_nodes: list[EcuNode],
    canvas_width: float,
    options: Optional[LayoutOptions] = None,
) -> LayoutResult:
    """
    Compute bus rows and normalize ECU bands.

    Buses get absolute positions and a width of
    ``canvas_width - 2 * inset``.  Every ECU's y is overwritten with the y of
    its band for the current bus count; x is left alone.

    Calling this again on its own output with the same arguments yields the
    same coordinates.  Inputs are not modified.

    Raises:
        ValueError: If ``canvas_width`` is not positive.
    """
    check_canvas_width(canvas_width)
    bus_count = len(buses)
    return LayoutResult(
        buses=place_buses(buses, canvas_width, options),
        ecu_nodes=[snap_to_band(ecu, bus_count, options) for ecu in ecu_nodes],
    )
