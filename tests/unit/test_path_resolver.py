"""
Unit tests for path expression resolution.
"""

import pytest

from payload_encryption.errors import PathSyntaxError
from payload_encryption.utils.path_resolver import (
    bind_wildcards,
    count_wildcards,
    format_path,
    lookup,
    pair_resolutions,
    parse_path,
    resolve,
    to_segments,
)


class TestParsePath:
    """Test cases for parse_path."""

    def test_segments(self):
        """Test splitting on dots."""
        assert parse_path("elem1.encryptedData") == ["elem1", "encryptedData"]
        assert parse_path("*.items.0") == ["*", "items", "0"]
        assert parse_path("$") == ["$"]

    @pytest.mark.parametrize("expr", ["", "a..b", ".a", "a.", "$.a", "a.$"])
    def test_malformed(self, expr):
        """Test malformed expressions raise PathSyntaxError."""
        with pytest.raises(PathSyntaxError) as exc_info:
            parse_path(expr)

        assert exc_info.value.path == expr

    def test_count_wildcards(self):
        """Test wildcard counting."""
        assert count_wildcards("*.a.*") == 2
        assert count_wildcards("a.b") == 0

    def test_to_segments(self):
        """Test expressions and segment lists normalise to concrete segments."""
        assert to_segments("a.b") == ["a", "b"]
        assert to_segments("$") == []
        assert to_segments(["user@example.com", ""]) == ["user@example.com", ""]

    def test_format_path(self):
        """Test display rendering of segments."""
        assert format_path(["a", "b"]) == "a.b"
        assert format_path([]) == "$"


class TestLookup:
    """Test cases for lookup."""

    def test_dict_key(self):
        """Test object keys."""
        assert lookup({"a": 1}, "a") == (True, 1)
        assert lookup({"a": 1}, "b") == (False, None)

    def test_list_index(self):
        """Test array indexes."""
        assert lookup(["x", "y"], "1") == (True, "y")
        assert lookup(["x", "y"], "2") == (False, None)
        assert lookup(["x", "y"], "first") == (False, None)

    def test_scalar(self):
        """Test scalars have no children."""
        assert lookup("text", "0") == (False, None)


class TestResolve:
    """Test cases for resolve."""

    def test_root(self):
        """Test '$' resolves to the document itself."""
        doc = [1, 2]

        resolutions = resolve("$", doc)

        assert len(resolutions) == 1
        assert resolutions[0].path == "$"
        assert resolutions[0].segments == []
        assert resolutions[0].node is doc
        assert resolutions[0].parent is None

    def test_nested_key(self):
        """Test a plain path resolves to its node and parent."""
        doc = {"elem1": {"encryptedData": {"accountNumber": "5123"}}}

        resolutions = resolve("elem1.encryptedData", doc)

        assert len(resolutions) == 1
        assert resolutions[0].path == "elem1.encryptedData"
        assert resolutions[0].segments == ["elem1", "encryptedData"]
        assert resolutions[0].node == {"accountNumber": "5123"}
        assert resolutions[0].parent is doc["elem1"]
        assert resolutions[0].bindings == []

    def test_missing_path(self):
        """Test missing keys produce no resolution."""
        assert resolve("elem1.missing", {"elem1": {}}) == []
        assert resolve("a.b", {"a": "scalar"}) == []
        assert resolve("a", None) == []

    def test_null_node_dropped(self):
        """Test a node holding null is treated as missing."""
        assert resolve("a", {"a": None}) == []

    def test_wildcard_over_array(self):
        """Test '*' fans out over array elements in index order."""
        doc = [{"elem1": "a"}, {"other": "b"}, {"elem1": "c"}]

        resolutions = resolve("*.elem1", doc)

        assert [r.path for r in resolutions] == ["0.elem1", "2.elem1"]
        assert [r.node for r in resolutions] == ["a", "c"]
        assert [r.bindings for r in resolutions] == [["0"], ["2"]]

    def test_wildcard_over_object(self):
        """Test '*' fans out over object members in insertion order."""
        doc = {"first": {"v": 1}, "second": {"v": 2}}

        resolutions = resolve("*.v", doc)

        assert [r.path for r in resolutions] == ["first.v", "second.v"]
        assert [r.bindings for r in resolutions] == [["first"], ["second"]]

    def test_two_wildcards(self):
        """Test bindings are recorded for every wildcard."""
        doc = {"groups": [{"items": [{"id": 1}, {"id": 2}]}, {"items": [{"id": 3}]}]}

        resolutions = resolve("groups.*.items.*", doc)

        assert [r.bindings for r in resolutions] == [["0", "0"], ["0", "1"], ["1", "0"]]
        assert [r.node for r in resolutions] == [{"id": 1}, {"id": 2}, {"id": 3}]

    def test_wildcard_over_scalar(self):
        """Test '*' over a scalar yields nothing."""
        assert resolve("*", "text") == []

    def test_wildcard_keys_kept_whole(self):
        """Test keys with dots or path symbols stay single segments."""
        doc = {"alice@example.com": {"pan": "5123"}, "": {"pan": "4111"}, "$": {"pan": "3782"}}

        resolutions = resolve("*.pan", doc)

        assert [r.segments for r in resolutions] == [["alice@example.com", "pan"], ["", "pan"], ["$", "pan"]]
        assert [r.bindings for r in resolutions] == [["alice@example.com"], [""], ["$"]]

    def test_malformed_raises(self):
        """Test malformed expressions raise."""
        with pytest.raises(PathSyntaxError):
            resolve("a..b", {})


class TestPairResolutions:
    """Test cases for lockstep expansion."""

    def test_bind_wildcards(self):
        """Test the Nth wildcard takes the Nth binding."""
        assert bind_wildcards("*.out.*", ["1", "k"]) == ["1", "out", "k"]
        assert bind_wildcards("target", []) == ["target"]
        assert bind_wildcards("$", []) == []

    def test_bind_wildcards_count_mismatch(self):
        """Test a binding count mismatch raises."""
        with pytest.raises(PathSyntaxError):
            bind_wildcards("*.a", [])

    def test_lockstep_destinations(self):
        """Test each source is paired with the destination for the same element."""
        doc = [{"elem1": {"a": 1}, "elem2": "x"}, {"elem1": {"a": 2}, "elem2": "y"}]

        pairs = pair_resolutions("*.elem1", "*", doc)

        assert [(source.segments, destination) for source, destination in pairs] == [
            (["0", "elem1"], ["0"]),
            (["1", "elem1"], ["1"]),
        ]

    def test_no_wildcards(self):
        """Test plain paths are paired as-is."""
        pairs = pair_resolutions("elem1.encryptedData", "elem1", {"elem1": {"encryptedData": 1}})

        assert [(source.segments, destination) for source, destination in pairs] == [
            (["elem1", "encryptedData"], ["elem1"])
        ]

    def test_destination_keys_kept_whole(self):
        """Test bound destinations keep dotted and empty keys as single segments."""
        doc = {"alice@example.com": {"pan": "5123"}, "": {"pan": "4111"}}

        pairs = pair_resolutions("*.pan", "*", doc)

        assert [destination for _, destination in pairs] == [["alice@example.com"], [""]]

    def test_wildcard_count_mismatch(self):
        """Test source and destination must carry the same number of wildcards."""
        with pytest.raises(PathSyntaxError):
            pair_resolutions("*.elem1", "elem1", [{"elem1": 1}])

    def test_nothing_resolved(self):
        """Test no pairs when the source is missing."""
        assert pair_resolutions("missing", "$", {"a": 1}) == []
