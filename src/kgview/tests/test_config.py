import pytest
from pydantic import ValidationError

from kgview.config import ConfigLoader, KGViewConfig, LayoutConfig, load_config


def test_defaults():
    config = load_config()
    assert config.mode == "er"
    assert config.fallback == "empty"
    assert config.layout.strategy == "force"
    assert config.layout.iterations == 300
    assert config.layout.seed == 0


def test_cwd_file_overrides_home(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    (home / "kgview.yaml").write_text("mode: full\nlayout:\n  iterations: 50\n  width: 1000\n")
    (tmp_path / "kgview.yml").write_text("layout:\n  iterations: 80\n")

    config = load_config()
    assert config.mode == "full"
    # nested sections merge key by key
    assert config.layout.iterations == 80
    assert config.layout.width == 1000


def test_explicit_file(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("fallback: placeholder\nlayout:\n  direction: DOWN\n")

    config = load_config(path)
    assert config.fallback == "placeholder"
    assert config.layout.direction == "DOWN"


def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_env_overrides(monkeypatch, tmp_path):
    (tmp_path / "kgview.yaml").write_text("mode: full\n")
    monkeypatch.setenv("KGVIEW_CONFIG", "layout:\n  strategy: hierarchical\n")
    monkeypatch.setenv("KGVIEW_MODE", "er")

    config = load_config()
    assert config.mode == "er"
    assert config.layout.strategy == "hierarchical"


def test_env_nested_section(monkeypatch):
    monkeypatch.setenv("KGVIEW_LAYOUT", "{seed: 42, iterations: 10}")
    config = load_config()
    assert config.layout.seed == 42
    assert config.layout.iterations == 10


def test_invalid_env_yaml(monkeypatch):
    monkeypatch.setenv("KGVIEW_CONFIG", "layout: [unclosed")
    with pytest.raises(ValueError):
        load_config()


def test_validation():
    with pytest.raises(ValidationError):
        LayoutConfig(width=0)
    with pytest.raises(ValidationError):
        LayoutConfig(iterations=-1)
    with pytest.raises(ValidationError):
        KGViewConfig(mode="tree")


def test_loader_with_explicit_home(tmp_path):
    home = tmp_path / "elsewhere"
    home.mkdir()
    (home / "kgview.yaml").write_text("id_strategy: hashed\n")
    config = ConfigLoader("kgview", home_dir=home).load_config(KGViewConfig)
    assert config.id_strategy == "hashed"
