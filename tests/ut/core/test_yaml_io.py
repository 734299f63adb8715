"""YAML 读写工具测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from chartlock.utils import yaml_io
from chartlock.utils.yaml_io import StrScalarLoader, dump_yaml, load_yaml, read_yaml, save_yaml


class TestLoadYaml:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_yaml(tmp_path / "none.yaml") == {}

    def test_empty_and_non_mapping(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.yaml"
        empty.write_text("", encoding="utf-8")
        listing = tmp_path / "list.yaml"
        listing.write_text("- a\n- b\n", encoding="utf-8")
        assert load_yaml(empty) == {}
        assert load_yaml(listing) == {}
        assert read_yaml(listing) == ["a", "b"]

    def test_malformed_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_yaml(bad)

    def test_size_limit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        big = tmp_path / "big.yaml"
        big.write_text("key: " + "x" * 64 + "\n", encoding="utf-8")
        monkeypatch.setattr(yaml_io, "MAX_YAML_SIZE", 16)
        with pytest.raises(ValueError, match="过大"):
            read_yaml(big)


class TestSaveYaml:
    def test_creates_parent_and_keeps_order(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "Chart.lock"
        save_yaml(target, {"digest": "sha256:abc", "dependencies": [{"name": "é"}]})
        text = target.read_text(encoding="utf-8")
        assert text == dump_yaml({"digest": "sha256:abc", "dependencies": [{"name": "é"}]})
        assert text.index("digest") < text.index("dependencies")
        assert "é" in text
        assert not list(target.parent.glob("*.tmp"))


class TestStrScalarLoader:
    def test_numeric_scalars_kept_as_text(self, tmp_path: Path) -> None:
        path = tmp_path / "index.yaml"
        path.write_text("a: 0.10\nb: 1\nc: true\nd: ~\ne: '2.0'\n", encoding="utf-8")
        assert read_yaml(path, StrScalarLoader) == {
            "a": "0.10", "b": "1", "c": True, "d": None, "e": "2.0",
        }
        assert read_yaml(path) == {"a": 0.1, "b": 1, "c": True, "d": None, "e": "2.0"}
