"""CAN network diagrams from ECU channel lists."""

__version__ = "0.1.0"

from .derive import derive_document, derive_network
from .diagram import Diagram, build_diagram
from .layout import LayoutOptions, band_y, calculate_layout
from .models import (
    Bus,
    ChannelDescriptor,
    Connection,
    DerivedNetwork,
    EcuNode,
    LayoutOverlay,
    LayoutPosition,
    LayoutResult,
    NetworkDocument,
    PlacedBus,
    Port,
    Position,
)
from .parser import InvalidNetworkFormat, document_with_layout, load_document, parse_file
from .session import NetworkSession, NoDocumentLoaded
from .toggle import toggle_ecu_position

__all__ = [
    "__version__",
    "Bus",
    "ChannelDescriptor",
    "Connection",
    "DerivedNetwork",
    "Diagram",
    "EcuNode",
    "InvalidNetworkFormat",
    "LayoutOptions",
    "LayoutOverlay",
    "LayoutPosition",
    "LayoutResult",
    "NetworkDocument",
    "NetworkSession",
    "NoDocumentLoaded",
    "PlacedBus",
    "Port",
    "Position",
    "band_y",
    "build_diagram",
    "calculate_layout",
    "derive_document",
    "derive_network",
    "document_with_layout",
    "load_document",
    "parse_file",
    "toggle_ecu_position",
]
