"""
Network derivation: from channel descriptors to a bus/port graph.

A channel becomes a bus only when more than one (ECU, channel) pair names
it.  A channel named by a single ECU stays a dangling port: point-to-point
wiring is kept visually distinct from shared buses.

Steps:
1. Count every (ECU, channel) pair by channel name
2. One bus per name counted more than once, in order of first appearance
3. One ECU node per descriptor, placed by ``resolve``:
   alternating default < inline descriptor fields < layout overlay
4. One port per channel of each ECU, in channel order
5. One connection per port that found a bus

Duplicate ECU names are not merged.  Each descriptor produces its own node,
and the overlay entry for that name (the first one saved) applies to all of
them.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from typing import Optional, TypeVar

from .layout import LayoutOptions, band_y, default_ecu_x
from .models import (
    Bus,
    ChannelDescriptor,
    Connection,
    DerivedNetwork,
    EcuNode,
    LayoutOverlay,
    NetworkDocument,
    Port,
    Position,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


def resolve(default: T, inline: Optional[T] = None, overlay: Optional[T] = None) -> T:
    """Pick a placement value by precedence: overlay, then inline, then default."""
    if overlay is not None:
        return overlay
    if inline is not None:
        return inline
    return default


def count_channels(channels: list[ChannelDescriptor]) -> Counter:
    """Occurrences of each channel name over all (ECU, channel) pairs."""
    counts: Counter = Counter()
    for descriptor in channels:
        counts.update(descriptor.channels)
    return counts


def derive_buses(channels: list[ChannelDescriptor]) -> list[Bus]:
    """One bus per channel name shared by more than one ECU channel entry."""
    return [
        Bus(id=_new_id("bus"), name=name)
        for name, count in count_channels(channels).items()
        if count > 1
    ]


def _place_ecu(
    index: int,
    descriptor: ChannelDescriptor,
    layout: Optional[LayoutOverlay],
    bus_count: int,
    options: Optional[LayoutOptions],
) -> EcuNode:
    default_above = index % 2 == 0
    saved = layout.find(descriptor.node) if layout else None

    is_above = resolve(
        default_above,
        descriptor.is_above_bus,
        saved.is_above_bus if saved else None,
    )
    x = resolve(
        default_ecu_x(index, options),
        descriptor.x,
        saved.x if saved else None,
    )
    # Default y follows the default band; an inline band alone does not move it.
    y = resolve(
        band_y(default_above, bus_count, options),
        descriptor.y,
        saved.y if saved else None,
    )

    return EcuNode(
        id=_new_id("ecu"),
        name=descriptor.node,
        position=Position(x=x, y=y),
        channels=list(descriptor.channels),
        is_above_bus=is_above,
    )


def derive_network(
    channels: list[ChannelDescriptor],
    layout: Optional[LayoutOverlay] = None,
    options: Optional[LayoutOptions] = None,
) -> DerivedNetwork:
    """
    Build buses, ECU nodes, ports and connections from channel descriptors.

    Args:
        channels: Descriptors in document order.
        layout:   Optional overlay of saved placements keyed by ECU name.
        options:  Geometry for default placement.

    Returns:
        DerivedNetwork with freshly generated ids.
    """
    buses = derive_buses(channels)
    bus_by_name = {bus.name: bus for bus in buses}

    ecu_nodes = [
        _place_ecu(index, descriptor, layout, len(buses), options)
        for index, descriptor in enumerate(channels)
    ]

    ports: list[Port] = []
    connections: list[Connection] = []
    for ecu in ecu_nodes:
        for channel in ecu.channels:
            bus = bus_by_name.get(channel)
            port = Port(
                id=_new_id("port"),
                ecu_id=ecu.id,
                channel=channel,
                bus_id=bus.id if bus else None,
            )
            ports.append(port)
            if bus:
                connections.append(Connection(
                    id=_new_id("connection"),
                    port_id=port.id,
                    bus_id=bus.id,
                ))

    _report(channels, layout)
    logger.info(
        f"Derived {len(ecu_nodes)} ECUs, {len(buses)} buses, "
        f"{len(ports)} ports, {len(connections)} connections"
    )
    return DerivedNetwork(
        buses=buses,
        ecu_nodes=ecu_nodes,
        ports=ports,
        connections=connections,
    )


def derive_document(
    document: NetworkDocument,
    options: Optional[LayoutOptions] = None,
) -> DerivedNetwork:
    """Derive the network for a validated document, applying its overlay."""
    return derive_network(document.can_channels, document.layout, options)


def _report(channels: list[ChannelDescriptor], layout: Optional[LayoutOverlay]) -> None:
    """Log duplicate ECU names and overlay entries that match nothing."""
    names = Counter(descriptor.node for descriptor in channels)
    duplicates = sorted(name for name, count in names.items() if count > 1)
    if duplicates:
        logger.warning(f"Duplicate ECU names are not merged: {', '.join(duplicates)}")

    if layout:
        for position in layout.positions:
            if position.node_id not in names:
                logger.debug(f"Ignoring saved layout for unknown ECU {position.node_id}")
