"""
Data models for the CAN network, the shared vocabulary.

A network document is a flat list of ECUs, each naming the channels it
exposes.  Derivation turns that list into a small graph:

    DerivedNetwork
    ├── Bus           a channel shared by more than one ECU
    ├── EcuNode       one per channel descriptor
    ├── Port          one per (ECU, channel) pair
    └── Connection    one per port that reaches a real bus

Input-facing models (``ChannelDescriptor``, ``LayoutPosition``,
``LayoutOverlay``, ``NetworkDocument``) accept the camelCase keys used by
saved documents (``isAboveBus``, ``nodeId``) as well as the snake_case
attribute names.

Ids on derived entities are generated fresh on every derivation; the only
identity that survives a save/reload is the ECU *name*.
"""

from __future__ import annotations
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Input document
# ---------------------------------------------------------------------------

class ChannelDescriptor(BaseModel):
    """One ECU's declaration in the input document.

    Attributes:
        node:         ECU name, used as the identity key within a document.
        channels:     Ordered channel names.  Order sets port spacing.
                      Documents may spell this key ``channel_names``.
        x, y:         Optional legacy inline placement.
        is_above_bus: Optional legacy inline band (``isAboveBus``).
    """
    model_config = ConfigDict(populate_by_name=True)

    node: str = Field(min_length=1)
    channels: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("channels", "channel_names"),
    )
    x: Optional[float] = None
    y: Optional[float] = None
    is_above_bus: Optional[bool] = Field(default=None, alias="isAboveBus")


class LayoutPosition(BaseModel):
    """A saved placement for one ECU, keyed by ECU name."""
    model_config = ConfigDict(populate_by_name=True)

    node_id: str = Field(alias="nodeId")
    x: float
    y: float
    is_above_bus: bool = Field(alias="isAboveBus")


class LayoutOverlay(BaseModel):
    """Saved placements that override defaults during derivation."""
    positions: list[LayoutPosition] = Field(default_factory=list)

    def find(self, name: str) -> Optional[LayoutPosition]:
        """Return the first position saved for ``name``, if any."""
        for position in self.positions:
            if position.node_id == name:
                return position
        return None


class NetworkDocument(BaseModel):
    """A validated network document.

    The channel list is read from ``can_channels``; ``channels`` is accepted
    as a fallback key.
    """
    can_channels: list[ChannelDescriptor] = Field(
        validation_alias=AliasChoices("can_channels", "channels"),
    )
    layout: Optional[LayoutOverlay] = None


# ---------------------------------------------------------------------------
# Derived graph
# ---------------------------------------------------------------------------

class Position(BaseModel):
    x: float
    y: float


class Bus(BaseModel):
    """A channel shared by two or more ECUs.  Names are unique per network."""
    id: str
    name: str


class EcuNode(BaseModel):
    """One visual node per channel descriptor.

    ``channels`` is fixed at derivation time.  Only ``position`` and
    ``is_above_bus`` change afterwards, and only through new copies.
    """
    id: str
    name: str
    position: Position
    channels: list[str] = Field(default_factory=list)
    is_above_bus: bool = True


class Port(BaseModel):
    """One port per (ECU, channel) pair.

    ``bus_id`` is the id of the matching bus, or ``None`` when no other ECU
    exposes the channel.  ``channel`` always carries the raw channel name.
    """
    id: str
    ecu_id: str
    channel: str
    bus_id: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.bus_id is not None


class Connection(BaseModel):
    """Links a connected port to its bus."""
    id: str
    port_id: str
    bus_id: str


class DerivedNetwork(BaseModel):
    """Everything derivation produces from one document."""
    buses: list[Bus] = Field(default_factory=list)
    ecu_nodes: list[EcuNode] = Field(default_factory=list)
    ports: list[Port] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)

    def get_bus(self, bus_id: str) -> Optional[Bus]:
        return next((bus for bus in self.buses if bus.id == bus_id), None)

    def get_ecu(self, ecu_id: str) -> Optional[EcuNode]:
        return next((ecu for ecu in self.ecu_nodes if ecu.id == ecu_id), None)

    def get_port(self, port_id: str) -> Optional[Port]:
        return next((port for port in self.ports if port.id == port_id), None)

    def ports_for(self, ecu_id: str) -> list[Port]:
        """Ports owned by ``ecu_id``, in channel order."""
        return [port for port in self.ports if port.ecu_id == ecu_id]


# ---------------------------------------------------------------------------
# Layout output
# ---------------------------------------------------------------------------

class PlacedBus(Bus):
    """A bus with its absolute position and rendered width."""
    position: Position
    width: float


class LayoutResult(BaseModel):
    buses: list[PlacedBus] = Field(default_factory=list)
    ecu_nodes: list[EcuNode] = Field(default_factory=list)
