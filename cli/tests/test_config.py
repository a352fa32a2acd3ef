from __future__ import annotations

import pytest

from e37_cli import config
from e37_client import ConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch) -> None:
    for name in (
        config.ENV_URL,
        config.ENV_USERNAME,
        config.ENV_PASSWORD,
        config.ENV_CONCURRENCY,
        config.ENV_TIMEOUT,
        config.ENV_INSECURE,
    ):
        monkeypatch.delenv(name, raising=False)


def _use_tmp_config_dir(monkeypatch, tmp_path) -> None:
    def _config_dir(_: str) -> str:
        return str(tmp_path)

    monkeypatch.setattr(config, "user_config_dir", _config_dir)


def test_load_config_defaults_without_file(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(monkeypatch, tmp_path)
    cfg = config.load_config()

    assert cfg.url == "https://172.38.30.2:8443"
    assert cfg.username == "admin"
    assert cfg.password == "admin"
    assert cfg.concurrency == 10
    assert cfg.timeout_s == pytest.approx(1.6)
    assert cfg.insecure is True


def test_load_config_reads_toml(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(monkeypatch, tmp_path)
    tmp_path.joinpath("config.toml").write_text(
        "\n".join(
            [
                'url = "https://e37.example.test:8443"',
                'username = "monitor"',
                "concurrency = 4",
                'timeout = "2500ms"',
                "insecure = false",
                "",
            ]
        ),
        encoding="utf-8",
    )

    cfg = config.load_config()

    assert cfg.url == "https://e37.example.test:8443"
    assert cfg.username == "monitor"
    assert cfg.password == "admin"
    assert cfg.concurrency == 4
    assert cfg.timeout_s == pytest.approx(2.5)
    assert cfg.insecure is False


def test_env_overrides_file(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(monkeypatch, tmp_path)
    tmp_path.joinpath("config.toml").write_text('url = "http://file.test"\n', encoding="utf-8")
    monkeypatch.setenv(config.ENV_URL, "http://env.test:8443")
    monkeypatch.setenv(config.ENV_INSECURE, "no")
    monkeypatch.setenv(config.ENV_TIMEOUT, "3s")

    cfg = config.load_config()

    assert cfg.url == "http://env.test:8443"
    assert cfg.insecure is False
    assert cfg.timeout_s == pytest.approx(3.0)


def test_save_config_round_trips_and_restricts_mode(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(monkeypatch, tmp_path)
    cfg = config.default_config()
    cfg.username = "monitor"
    cfg.timeout_s = 0.5

    path = config.save_config(cfg)

    assert path.endswith("config.toml")
    assert (tmp_path.joinpath("config.toml").stat().st_mode & 0o777) == 0o600
    loaded = config.load_config()
    assert loaded.username == "monitor"
    assert loaded.timeout_s == pytest.approx(0.5)


@pytest.mark.parametrize(
    "raw, expected",
    [(2, 2.0), (1.6, 1.6), ("1600ms", 1.6), ("1.5s", 1.5), ("2m", 120.0), ("7", 7.0)],
)
def test_parse_duration(raw, expected) -> None:
    assert config.parse_duration(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["fast", "1h", "-1s", True])
def test_parse_duration_rejects(raw) -> None:
    with pytest.raises(ConfigError):
        config.parse_duration(raw)


def test_set_value_rejects_unknown_key() -> None:
    cfg = config.default_config()
    with pytest.raises(ConfigError, match="unknown setting"):
        config.set_value(cfg, "token", "abc")


def test_set_value_rejects_bad_bool() -> None:
    cfg = config.default_config()
    with pytest.raises(ConfigError):
        config.set_value(cfg, "insecure", "maybe")


def test_to_options_applies_url_override() -> None:
    cfg = config.default_config()
    opts = config.to_options(cfg, url_override="http://other:8443")

    assert opts.url == "http://other:8443"
    assert opts.username == cfg.username
    assert opts.timeout_s == cfg.timeout_s


def test_set_value_normalizes_url() -> None:
    cfg = config.default_config()
    config.set_value(cfg, "url", "e37.example.test:8443/")
    assert cfg.url == "http://e37.example.test:8443"


@pytest.mark.parametrize(
    "key, raw",
    [("url", "ftp://nope"), ("url", ""), ("concurrency", "0"), ("concurrency", "-3"), ("timeout", 0), ("timeout", "0s")],
)
def test_set_value_rejects_out_of_range(key, raw) -> None:
    cfg = config.default_config()
    with pytest.raises(ConfigError):
        config.set_value(cfg, key, raw)
    assert cfg == config.default_config()


def test_load_config_rejects_malformed_toml(tmp_path, monkeypatch) -> None:
    _use_tmp_config_dir(monkeypatch, tmp_path)
    tmp_path.joinpath("config.toml").write_text("url = \n", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid config file"):
        config.load_config()
