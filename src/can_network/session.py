"""
Network session: the state an interactive canvas works against.

The session owns the loaded document, the derived network and the current
ECU placements.  The shell calls into it on user events and re-renders from
``diagram()``:

    load(data)          → derive + layout
    drag_stop(id, x, y) → move, or toggle when the drag crossed the buses
    toggle(id)          → flip above/below
    resize(width)       → re-layout bus widths and bands
    save_layout()       → source document + layout overlay

A session is not thread-safe.  The shell must not process a drag while a
load is running.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from .config import DEFAULT_CANVAS_WIDTH, DRAG_THRESHOLD_OFFSET
from .derive import derive_document
from .diagram import Diagram, build_diagram
from .layout import LayoutOptions, band_y, calculate_layout, check_canvas_width
from .models import DerivedNetwork, EcuNode, LayoutResult, PlacedBus, Position
from .parser import document_with_layout, load_document
from .toggle import toggle_ecu_position

logger = logging.getLogger(__name__)


class NoDocumentLoaded(RuntimeError):
    """An operation needs a loaded document and there is none."""


class NetworkSession:
    """Holds the current network and applies user interactions to it."""

    def __init__(
        self,
        canvas_width: float = DEFAULT_CANVAS_WIDTH,
        options: Optional[LayoutOptions] = None,
        drag_threshold: float = DRAG_THRESHOLD_OFFSET,
    ):
        check_canvas_width(canvas_width)
        self.canvas_width = canvas_width
        self.options = options or LayoutOptions()
        self.drag_threshold = drag_threshold
        self._source: Optional[dict[str, Any]] = None
        self._network: Optional[DerivedNetwork] = None
        self._layout = LayoutResult()

    # --- State ---

    @property
    def is_loaded(self) -> bool:
        return self._source is not None

    @property
    def network(self) -> Optional[DerivedNetwork]:
        return self._network

    @property
    def buses(self) -> list[PlacedBus]:
        return list(self._layout.buses)

    @property
    def ecu_nodes(self) -> list[EcuNode]:
        return list(self._layout.ecu_nodes)

    def get_ecu(self, ecu_id: str) -> Optional[EcuNode]:
        return next((ecu for ecu in self._layout.ecu_nodes if ecu.id == ecu_id), None)

    # --- Operations ---

    def load(self, data: dict[str, Any]) -> Diagram:
        """Load a decoded document, replacing the current one.

        Raises:
            InvalidNetworkFormat: If ``data`` is not a valid network
                document.  The previous state is kept.
        """
        document = load_document(data)
        network = derive_document(document, self.options)
        layout = calculate_layout(
            network.buses, network.ecu_nodes, self.canvas_width, self.options
        )

        self._source = copy.deepcopy(data)
        self._network = network
        self._layout = layout
        return self.diagram()

    def diagram(self) -> Diagram:
        """Diagram nodes and edges for the current state."""
        if self._network is None:
            return Diagram()
        return build_diagram(self._network, self._layout)

    def toggle(self, ecu_id: str) -> Optional[EcuNode]:
        """Flip an ECU between the above and below bands.

        Returns the updated ECU, or ``None`` if no ECU has that id.
        """
        self._set_ecu_nodes(toggle_ecu_position(
            self._layout.ecu_nodes, ecu_id, len(self._layout.buses), self.options
        ))
        return self.get_ecu(ecu_id)

    def drag_stop(self, ecu_id: str, x: float, y: float) -> Optional[EcuNode]:
        """Apply the end of a drag.

        The ECU keeps the dropped x.  Its y snaps back to its band, or to
        the other band when the drop crossed the threshold above the first
        bus, in which case the ECU is toggled.
        """
        ecu = self.get_ecu(ecu_id)
        if ecu is None:
            logger.debug(f"Drag ignored, no ECU with id {ecu_id}")
            return None

        bus_count = len(self._layout.buses)
        moved = ecu.model_copy(update={
            "position": Position(x=x, y=band_y(ecu.is_above_bus, bus_count, self.options)),
        })
        self._set_ecu_nodes([
            moved if node.id == ecu_id else node for node in self._layout.ecu_nodes
        ])

        if self._layout.buses:
            threshold = self._layout.buses[0].position.y - self.drag_threshold
            if ecu.is_above_bus != (y < threshold):
                return self.toggle(ecu_id)
        return moved

    def resize(self, canvas_width: float) -> Diagram:
        """Re-layout for a new canvas width."""
        check_canvas_width(canvas_width)
        self.canvas_width = canvas_width
        if self._network is not None:
            self._layout = calculate_layout(
                self._network.buses, self._layout.ecu_nodes, canvas_width, self.options
            )
        return self.diagram()

    def save_layout(self) -> dict[str, Any]:
        """The loaded document with the current placements as its layout.

        Raises:
            NoDocumentLoaded: If nothing has been loaded yet.
        """
        if self._source is None:
            raise NoDocumentLoaded("No data loaded to save layout")
        return document_with_layout(self._source, self._layout.ecu_nodes)

    # --- Helpers ---

    def _set_ecu_nodes(self, ecu_nodes: list[EcuNode]) -> None:
        self._layout = self._layout.model_copy(update={"ecu_nodes": ecu_nodes})
