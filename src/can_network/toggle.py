"""Move an ECU between the bands above and below the bus rows."""

from __future__ import annotations

import logging
from typing import Optional

from .layout import LayoutOptions, band_y
from .models import EcuNode, Position

logger = logging.getLogger(__name__)


def toggle_ecu_position(
    ecu_nodes: list[EcuNode],
    ecu_id: str,
    bus_count: int,
    options: Optional[LayoutOptions] = None,
) -> list[EcuNode]:
    """Flip the band of the ECU with ``ecu_id``.

    The matching node gets ``is_above_bus`` inverted and its y snapped to the
    new band for ``bus_count`` buses; x and every other field are kept.
    All other nodes are returned as they are.  An unknown id returns an
    equal list.
    """
    toggled = []
    found = False
    for ecu in ecu_nodes:
        if ecu.id != ecu_id:
            toggled.append(ecu)
            continue
        found = True
        is_above = not ecu.is_above_bus
        toggled.append(ecu.model_copy(update={
            "is_above_bus": is_above,
            "position": Position(x=ecu.position.x, y=band_y(is_above, bus_count, options)),
        }))

    if not found:
        logger.debug(f"Toggle ignored, no ECU with id {ecu_id}")
    return toggled
