"""Fixture naming tests"""

import pytest

from fixture_replay.replay import ReplayConfig
from fixture_replay.replay.naming import (
    build_base_name,
    key_blob_name,
    parse_ordinals,
    value_blob_name,
)


@pytest.fixture
def config():
    return ReplayConfig()


class TestBuildBaseName:
    def test_default_padding(self, config):
        assert build_base_name(config, 3, 12) == "e2e-00003-000012"

    def test_blob_names(self, config):
        base = build_base_name(config, 1, 1)
        assert key_blob_name(config, base) == "e2e-00001-000001-key.json"
        assert value_blob_name(config, base) == "e2e-00001-000001-val.json"

    def test_wider_than_pad(self):
        config = ReplayConfig(key_ordinal_pad=1, value_ordinal_pad=1)
        assert build_base_name(config, 12, 345) == "e2e-12-345"

    @pytest.mark.parametrize("key_ordinal,value_ordinal", [(0, 1), (1, 0)])
    def test_zero_is_never_generated(self, config, key_ordinal, value_ordinal):
        with pytest.raises(ValueError):
            build_base_name(config, key_ordinal, value_ordinal)

    def test_names_sort_in_recording_order(self, config):
        names = [
            key_blob_name(config, build_base_name(config, k, v))
            for k in (1, 2, 10)
            for v in (1, 9, 10, 100)
        ]
        assert sorted(names) == names


class TestParseOrdinals:
    @pytest.mark.parametrize("name,expected", [
        ("e2e-00001-000002-key.json", (1, 2)),
        ("e2e-00003-000004-val.json", (3, 4)),
        ("e2e-00000-000000-key.json", (0, 0)),
        ("e2e--echo-key.json", None),
        ("other-00001-000001-key.json", None),
        ("e2e-00001-000001-key.js", None),
        ("e2e-00001-000001.json", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, config, name, expected):
        assert parse_ordinals(config, name) == expected

    def test_custom_config(self):
        config = ReplayConfig(prefix="api.v1", key_suffix="_k", value_suffix="_v", extension="txt")
        assert parse_ordinals(config, "api.v1-7-8_k.txt") == (7, 8)
        assert parse_ordinals(config, "apixv1-7-8_k.txt") is None

    def test_round_trip(self, config):
        base = build_base_name(config, 42, 7)
        assert parse_ordinals(config, key_blob_name(config, base)) == (42, 7)
