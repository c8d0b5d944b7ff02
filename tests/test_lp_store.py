"""LP tracker file: load / append / withdraw marking."""

import json

import pytest

from lp_store import LpStore, is_active, new_lp_record


def _record(token_id, chain="gnosis"):
    return new_lp_record(token_id, chain, "swaprv3", "0xpool", "0xa", "0xb", 0.2, 0.8,
                         market="0xmarket", market_name="Will it rain?", outcome_name="Yes")


class TestRecord:
    def test_shape(self):
        record = _record(123)
        assert record["tokenId"] == "123"
        assert record["withdrawnAt"] is None
        assert record["createdAt"].endswith("Z")
        assert (record["probLow"], record["probHigh"]) == (0.2, 0.8)
        assert is_active(record)


class TestLpStore:
    def test_missing_file_is_empty(self, store):
        assert store.load() == {"positions": []}
        assert store.positions() == []

    def test_append_creates_parent_dirs(self, store):
        store.append(_record(1))
        with open(store.path) as f:
            saved = json.load(f)
        assert [p["tokenId"] for p in saved["positions"]] == ["1"]

    def test_filters_by_chain_and_activity(self, store):
        store.append(_record(1))
        store.append(_record(2, chain="base"))
        store.append(_record(3))
        assert store.mark_withdrawn(3, "gnosis")
        assert [p["tokenId"] for p in store.positions()] == ["1", "2"]
        assert [p["tokenId"] for p in store.positions("gnosis")] == ["1"]
        assert len(store.positions(include_withdrawn=True)) == 3

    def test_mark_withdrawn_needs_matching_chain(self, store):
        store.append(_record(5, chain="base"))
        assert not store.mark_withdrawn(5, "gnosis")
        assert store.positions("base")[0]["withdrawnAt"] is None

    def test_mark_withdrawn_only_once(self, store):
        store.append(_record(5))
        assert store.mark_withdrawn("5", "gnosis")
        assert not store.mark_withdrawn("5", "gnosis")

    def test_mark_field(self, store):
        store.append(_record(8))
        assert store.mark_field(8, "gnosis", "farming", True)
        assert store.positions()[0]["farming"] is True

    def test_corrupt_file_raises(self, store):
        store.save({"positions": []})
        with open(store.path, "w") as f:
            f.write("{not json")
        with pytest.raises(ValueError):
            store.load()

    @pytest.mark.parametrize("content", [[], {"positions": {}}])
    def test_wrong_shape_raises(self, store, content):
        store.save(content)
        with pytest.raises(ValueError, match="positions"):
            store.load()

    def test_default_path_from_config(self, tmp_path):
        assert LpStore().path == str(tmp_path / "lp-positions.json")
