"""Network document loading and saving.

Documents are JSON (or YAML) objects with a ``can_channels`` array and an
optional ``layout`` overlay:

    {
      "can_channels": [
        {"node": "ECU1", "channels": ["Red", "Blue", "Yellow"]},
        {"node": "ECU2", "channels": ["Blue", "Green"]}
      ],
      "layout": {
        "positions": [
          {"nodeId": "ECU1", "x": 100, "y": 100, "isAboveBus": true}
        ]
      }
    }

Loading validates the shape and raises ``InvalidNetworkFormat`` on anything
the engine cannot take.  Saving returns the source document with its
``layout`` replaced by the current ECU placements, keyed by ECU name.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import EcuNode, NetworkDocument

CHANNEL_LIST_KEYS = ("can_channels", "channels")

SAMPLE_DOCUMENT: dict[str, Any] = {
    "can_channels": [
        {"node": "ECU1", "channels": ["Red", "Blue", "Yellow"]},
        {"node": "ECU2", "channels": ["Blue", "Green"]},
        {"node": "ECU3", "channels": ["Red", "Blue"]},
    ]
}


class InvalidNetworkFormat(ValueError):
    """The document cannot be turned into a network."""


def load_document(data: Any) -> NetworkDocument:
    """Validate already-decoded document data."""
    if not isinstance(data, dict):
        raise InvalidNetworkFormat("Invalid format. The document must be an object.")

    channel_list = next((data[key] for key in CHANNEL_LIST_KEYS if key in data), None)
    if not isinstance(channel_list, list):
        raise InvalidNetworkFormat(
            'Invalid format. The document must contain a "can_channels" array.'
        )

    try:
        return NetworkDocument.model_validate(data)
    except ValidationError as e:
        raise InvalidNetworkFormat(f"Invalid format. {e}") from e


def parse_json(json_str: str) -> NetworkDocument:
    """Parse a JSON string into a NetworkDocument."""
    return load_document(decode_json(json_str))


def parse_yaml(yaml_str: str) -> NetworkDocument:
    """Parse a YAML string into a NetworkDocument."""
    return load_document(decode_yaml(yaml_str))


def decode_json(json_str: str) -> Any:
    if not json_str.strip():
        raise InvalidNetworkFormat("Empty JSON input")
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise InvalidNetworkFormat(f"Error parsing JSON: {e}") from e


def decode_yaml(yaml_str: str) -> Any:
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise InvalidNetworkFormat(f"Error parsing YAML: {e}") from e
    if not data:
        raise InvalidNetworkFormat("Empty YAML input")
    return data


def read_file(path: str) -> dict[str, Any]:
    """Decode a document file without validating it.

    ``.yaml`` and ``.yml`` files are read as YAML, everything else as JSON.
    """
    file_path = Path(path)
    content = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() in (".yaml", ".yml"):
        return decode_yaml(content)
    return decode_json(content)


def parse_file(path: str) -> NetworkDocument:
    """Parse a JSON or YAML file into a NetworkDocument."""
    return load_document(read_file(path))


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------

def layout_positions(ecu_nodes: list[EcuNode]) -> list[dict[str, Any]]:
    """One saved placement per ECU, keyed by name rather than session id."""
    return [
        {
            "nodeId": ecu.name,
            "x": ecu.position.x,
            "y": ecu.position.y,
            "isAboveBus": ecu.is_above_bus,
        }
        for ecu in ecu_nodes
    ]


def document_with_layout(source: dict[str, Any], ecu_nodes: list[EcuNode]) -> dict[str, Any]:
    """Return a copy of ``source`` carrying the current placements."""
    data = copy.deepcopy(source)
    data["layout"] = {"positions": layout_positions(ecu_nodes)}
    return data


def document_to_json(data: dict[str, Any], indent: int = 2) -> str:
    return json.dumps(data, indent=indent)


def document_to_yaml(data: dict[str, Any]) -> str:
    return yaml.dump(data, default_flow_style=False, sort_keys=False)
