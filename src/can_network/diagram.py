"""
Diagram builder: the plain-data handoff to a rendering canvas.

The renderer draws three kinds of things:

    ecuNode         a draggable ECU box with one port per channel
    canBus          a fixed horizontal bus row
    canConnector    a vertical line from an ECU port down (or up) to a bus

Ports are addressed on the ECU side by a handle named ``port-<bus name>``,
so bus names double as edge routing keys.

Edges are best effort: a connection whose port, bus or owning ECU cannot be
found is left out rather than failing the whole diagram.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import DerivedNetwork, LayoutResult, Position

logger = logging.getLogger(__name__)

ECU_NODE_TYPE = "ecuNode"
BUS_NODE_TYPE = "canBus"
CONNECTOR_EDGE_TYPE = "canConnector"


class DiagramNode(BaseModel):
    id: str
    type: str
    position: Position
    data: dict[str, Any] = Field(default_factory=dict)
    draggable: bool = True


class DiagramEdge(BaseModel):
    """A connector from an ECU port handle to a bus.

    Dumped with ``by_alias=True`` the handle is written as ``sourceHandle``,
    the key the renderer reads.  ``data`` carries ``busName`` for coloring.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    target: str
    source_handle: str = Field(alias="sourceHandle")
    type: str = CONNECTOR_EDGE_TYPE
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def bus_name(self) -> Optional[str]:
        return self.data.get("busName")


class Diagram(BaseModel):
    nodes: list[DiagramNode] = Field(default_factory=list)
    edges: list[DiagramEdge] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[DiagramNode]:
        return next((node for node in self.nodes if node.id == node_id), None)

    def to_dict(self) -> dict[str, Any]:
        """Plain data with the renderer's camelCase keys."""
        return self.model_dump(by_alias=True)


def port_handle(bus_name: str) -> str:
    """Name of the ECU-side handle a connector to ``bus_name`` starts from."""
    return f"port-{bus_name}"


def build_edges(network: DerivedNetwork) -> list[DiagramEdge]:
    """One edge per connection whose port, bus and ECU all resolve."""
    edges = []
    for connection in network.connections:
        port = network.get_port(connection.port_id)
        bus = network.get_bus(connection.bus_id)
        ecu = network.get_ecu(port.ecu_id) if port else None
        if not (port and bus and ecu):
            logger.debug(f"Skipping unresolved connection {connection.id}")
            continue
        edges.append(DiagramEdge(
            id=connection.id,
            source=ecu.id,
            target=bus.id,
            source_handle=port_handle(bus.name),
            data={"busName": bus.name},
        ))
    return edges


def build_diagram(network: DerivedNetwork, layout: LayoutResult) -> Diagram:
    """Combine a derived network and its layout into diagram nodes and edges.

    ECU nodes come from ``layout`` so they carry the current positions;
    edges come from ``network`` since connections never change after
    derivation.
    """
    nodes = [
        DiagramNode(
            id=ecu.id,
            type=ECU_NODE_TYPE,
            position=ecu.position,
            data={
                "name": ecu.name,
                "channels": list(ecu.channels),
                "isAboveBus": ecu.is_above_bus,
            },
            draggable=True,
        )
        for ecu in layout.ecu_nodes
    ]
    nodes.extend(
        DiagramNode(
            id=bus.id,
            type=BUS_NODE_TYPE,
            position=bus.position,
            data={"name": bus.name, "width": bus.width},
            draggable=False,
        )
        for bus in layout.buses
    )
    return Diagram(nodes=nodes, edges=build_edges(network))
