import pytest

from hexcrawl.config import DEFAULTS, _deep_merge, env_overrides, load_configs, resolve

def test_deep_merge_simple():
    a = {"exploration": {"sight_distance": 2, "max_sight": 10}, "grid": {"hex_size": 30.0}}
    b = {"exploration": {"sight_distance": 4}, "grid": {"origin": "top-left"}}
    c = _deep_merge(a, b)
    assert c["exploration"]["sight_distance"] == 4 and c["exploration"]["max_sight"] == 10
    assert c["grid"]["hex_size"] == 30.0 and c["grid"]["origin"] == "top-left"

def test_env_overrides_parsing(monkeypatch):
    monkeypatch.setenv("HEXCRAWL__EXPLORATION__SIGHT_DISTANCE", "3")
    monkeypatch.setenv("HEXCRAWL__SERVER__RELOAD", "true")
    monkeypatch.setenv("HEXCRAWL__GRID__HEX_SIZE", "24.5")
    d = env_overrides()
    assert d["exploration"]["sight_distance"] == 3
    assert d["server"]["reload"] is True
    assert d["grid"]["hex_size"] == 24.5

def test_yaml_then_json_layering(tmp_path):
    first = tmp_path / "base.yaml"
    first.write_text("flood_fill:\n  large_threshold: 50\n  preview_limit: 200\n", encoding="utf-8")
    second = tmp_path / "local.json"
    second.write_text('{"flood_fill": {"preview_limit": 75}}', encoding="utf-8")
    cfg = load_configs([str(first), str(second)])
    assert cfg == {"flood_fill": {"large_threshold": 50, "preview_limit": 75}}

def test_resolve_order(tmp_path, monkeypatch):
    path = tmp_path / "cfg.yaml"
    path.write_text("server:\n  port: 9000\n  host: 0.0.0.0\n", encoding="utf-8")
    monkeypatch.setenv("HEXCRAWL__SERVER__PORT", "9100")
    cfg = resolve([str(path)])
    assert cfg["server"]["port"] == 9100
    assert cfg["server"]["host"] == "0.0.0.0"
    assert cfg["exploration"] == DEFAULTS["exploration"]

def test_resolve_does_not_mutate_defaults(monkeypatch):
    monkeypatch.setenv("HEXCRAWL__GRID__HEX_SIZE", "12")
    resolve()
    assert DEFAULTS["grid"]["hex_size"] == 30.0

def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_configs([str(path)])

def test_empty_file_is_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_configs([str(path)]) == {}

def test_public_names_only():
    import hexcrawl.config as config
    assert all(not name.startswith("_") for name in config.__all__)
