"""Tests for document loading and saving."""

import json

import pytest

from can_network.derive import derive_document
from can_network.parser import (
    InvalidNetworkFormat,
    document_to_json,
    document_to_yaml,
    document_with_layout,
    layout_positions,
    load_document,
    parse_file,
    parse_json,
    parse_yaml,
)


class TestLoadDocument:
    """Tests for validation of decoded documents."""

    def test_sample_document(self, sample_document):
        document = load_document(sample_document)
        assert [d.node for d in document.can_channels] == ["ECU1", "ECU2", "ECU3"]
        assert document.can_channels[0].channels == ["Red", "Blue", "Yellow"]
        assert document.layout is None

    def test_channel_names_alias(self):
        document = load_document({"can_channels": [{"node": "A", "channel_names": ["X", "Y"]}]})
        assert document.can_channels[0].channels == ["X", "Y"]

    def test_channels_top_level_key(self):
        document = load_document({"channels": [{"node": "A", "channels": ["X"]}]})
        assert document.can_channels[0].node == "A"

    def test_inline_placement(self):
        document = load_document({
            "can_channels": [{"node": "A", "channels": [], "x": 10, "y": 20, "isAboveBus": False}],
        })
        descriptor = document.can_channels[0]
        assert (descriptor.x, descriptor.y, descriptor.is_above_bus) == (10, 20, False)

    def test_layout_overlay(self):
        document = load_document({
            "can_channels": [{"node": "A", "channels": []}],
            "layout": {"positions": [{"nodeId": "A", "x": 1, "y": 2, "isAboveBus": True}]},
        })
        assert document.layout.find("A").x == 1
        assert document.layout.find("B") is None

    @pytest.mark.parametrize("data", [
        {},
        {"can_channels": None},
        {"can_channels": "ECU1"},
        {"can_channels": {"node": "A"}},
        {"nodes": []},
    ])
    def test_missing_or_invalid_channel_list(self, data):
        with pytest.raises(InvalidNetworkFormat, match='"can_channels" array'):
            load_document(data)

    def test_not_an_object(self):
        with pytest.raises(InvalidNetworkFormat):
            load_document([{"node": "A", "channels": []}])

    def test_bad_entry_reported(self):
        with pytest.raises(InvalidNetworkFormat):
            load_document({"can_channels": [{"channels": ["X"]}]})

    def test_empty_node_name_rejected(self):
        with pytest.raises(InvalidNetworkFormat):
            load_document({"can_channels": [{"node": "", "channels": ["X"]}]})

    def test_incomplete_layout_entry_rejected(self):
        with pytest.raises(InvalidNetworkFormat):
            load_document({
                "can_channels": [{"node": "A", "channels": []}],
                "layout": {"positions": [{"nodeId": "A", "x": 1}]},
            })

    def test_invalid_format_is_value_error(self):
        with pytest.raises(ValueError):
            load_document({})


class TestParseText:
    """Tests for JSON and YAML text parsing."""

    def test_parse_json(self, sample_document):
        document = parse_json(json.dumps(sample_document))
        assert len(document.can_channels) == 3

    def test_parse_json_syntax_error(self):
        with pytest.raises(InvalidNetworkFormat, match="Error parsing JSON"):
            parse_json('{"can_channels": [')

    def test_parse_json_empty(self):
        with pytest.raises(InvalidNetworkFormat):
            parse_json("   ")

    def test_parse_yaml(self):
        document = parse_yaml(
            "can_channels:\n"
            "  - node: ECU1\n"
            "    channels: [Red, Blue]\n"
            "  - node: ECU2\n"
            "    channels: [Blue]\n"
        )
        assert [d.node for d in document.can_channels] == ["ECU1", "ECU2"]

    def test_parse_yaml_empty(self):
        with pytest.raises(InvalidNetworkFormat, match="Empty YAML input"):
            parse_yaml("")

    def test_parse_file_json(self, tmp_path, sample_document):
        path = tmp_path / "network.json"
        path.write_text(json.dumps(sample_document), encoding="utf-8")
        assert len(parse_file(str(path)).can_channels) == 3

    def test_parse_file_yaml(self, tmp_path, sample_document):
        path = tmp_path / "network.yaml"
        path.write_text(document_to_yaml(sample_document), encoding="utf-8")
        assert len(parse_file(str(path)).can_channels) == 3


class TestSaving:
    """Tests for writing the layout overlay back."""

    def test_layout_positions_keyed_by_name(self, sample_document):
        network = derive_document(load_document(sample_document))
        positions = layout_positions(network.ecu_nodes)

        assert [p["nodeId"] for p in positions] == ["ECU1", "ECU2", "ECU3"]
        assert positions[1] == {"nodeId": "ECU2", "x": 300, "y": 390, "isAboveBus": False}

    def test_document_with_layout_keeps_source(self, sample_document):
        sample_document["comment"] = "kept"
        network = derive_document(load_document(sample_document))

        saved = document_with_layout(sample_document, network.ecu_nodes)

        assert saved["comment"] == "kept"
        assert saved["can_channels"] == sample_document["can_channels"]
        assert len(saved["layout"]["positions"]) == 3
        assert "layout" not in sample_document

    def test_existing_layout_replaced(self, sample_document):
        sample_document["layout"] = {"positions": [
            {"nodeId": "Old", "x": 0, "y": 0, "isAboveBus": True},
        ]}
        network = derive_document(load_document(sample_document))
        saved = document_with_layout(sample_document, network.ecu_nodes)
        assert [p["nodeId"] for p in saved["layout"]["positions"]] == ["ECU1", "ECU2", "ECU3"]

    def test_round_trip(self, sample_document):
        sample_document["can_channels"][0].update({"x": 640, "y": 480, "isAboveBus": False})
        first = derive_document(load_document(sample_document))

        saved = parse_json(document_to_json(document_with_layout(sample_document, first.ecu_nodes)))
        second = derive_document(saved)

        before = {e.name: (e.position.x, e.position.y, e.is_above_bus) for e in first.ecu_nodes}
        after = {e.name: (e.position.x, e.position.y, e.is_above_bus) for e in second.ecu_nodes}
        assert before == after
        assert before["ECU1"] == (640, 480, False)
