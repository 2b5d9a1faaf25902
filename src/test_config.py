import pytest

from tlschecker import config
from tlschecker.exceptions import ConfigurationError


def test_base_config():
    conf = config.combine_configs({}, {})
    assert conf["defaults"]["port"] == 443
    assert conf["defaults"]["timeout"] == 10
    assert conf["defaults"]["use_sni"] is True
    assert conf["defaults"]["parallel_probes"] is False
    assert conf["defaults"]["versions"] == ["TLSv1", "TLSv1.1", "TLSv1.2", "TLSv1.3"]
    assert conf["outputs"] == [{"type": "console", "use_icons": False}]


def test_custom_overrides_user():
    conf = config.combine_configs(
        {"defaults": {"port": 8443, "timeout": 3}},
        {"defaults": {"timeout": 5}},
    )
    assert conf["defaults"]["port"] == 8443
    assert conf["defaults"]["timeout"] == 5


def test_outputs_merge():
    conf = config.combine_configs(
        {"outputs": [{"type": "json", "path": "user.json"}, {"type": "console"}]},
        {"outputs": [{"type": "json", "path": "custom.json"}]},
    )
    assert conf["outputs"] == [
        {"type": "json", "path": "custom.json"},
        {"type": "console"},
    ]


def test_port_coercion():
    assert config.combine_configs({}, {"defaults": {"port": "8443"}})["defaults"][
        "port"
    ] == 8443
    assert config.combine_configs({}, {"defaults": {"port": None}})["defaults"][
        "port"
    ] == 443


@pytest.mark.parametrize("port", [70000, -1, "https", True])
def test_invalid_port(port):
    with pytest.raises(ConfigurationError):
        config.combine_configs({}, {"defaults": {"port": port}})


@pytest.mark.parametrize("timeout", [0, -5, "ten", False])
def test_invalid_timeout(timeout):
    with pytest.raises(ConfigurationError):
        config.combine_configs({}, {"defaults": {"timeout": timeout}})


def test_versions_are_ordered_and_deduplicated():
    conf = config.combine_configs(
        {}, {"defaults": {"versions": ["TLSv1.3", "TLSv1", "TLSv1.3"]}}
    )
    assert conf["defaults"]["versions"] == ["TLSv1", "TLSv1.3"]


def test_invalid_version():
    with pytest.raises(ConfigurationError):
        config.combine_configs({}, {"defaults": {"versions": ["SSLv3"]}})


def test_load_config(tmp_path):
    conf_file = tmp_path / "tlschecker.yaml"
    conf_file.write_text("defaults:\n  port: 8443\n  use_sni: false\n")
    loaded = config.load_config(str(conf_file))
    assert loaded == {"defaults": {"port": 8443, "use_sni": False}}
    assert config.combine_configs({}, loaded)["defaults"]["use_sni"] is False


def test_load_missing_and_empty(tmp_path):
    assert config.load_config(str(tmp_path / "missing.yaml")) == {}
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert config.load_config(str(empty)) == {}


def test_load_invalid_yaml(tmp_path):
    conf_file = tmp_path / "broken.yaml"
    conf_file.write_text("defaults: [port: 443\n")
    with pytest.raises(ConfigurationError):
        config.load_config(str(conf_file))


def test_get_config_reads_user_config(tmp_path, monkeypatch):
    (tmp_path / config.DEFAULT_CONFIG).write_text("defaults:\n  timeout: 7\n")
    monkeypatch.setattr(config, "CONFIG_PATH", str(tmp_path))
    assert config.get_config()["defaults"]["timeout"] == 7
    assert config.get_config({"defaults": {"timeout": 2}})["defaults"]["timeout"] == 2
