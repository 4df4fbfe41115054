import json

import pytest

from stress_test_tools.core.stress_test_config import (
    ConfigError,
    StressTestConfig,
    format_duration,
    load_config,
    parse_duration,
    validate_config,
)


@pytest.mark.parametrize("text, expected", [
    ("30s", 30.0),
    ("5m", 300.0),
    ("1h30m", 5400.0),
    ("1.5s", 1.5),
    ("300ms", 0.3),
    ("2h45m10s", 9910.0),
    ("-1.5h", -5400.0),
    ("+10s", 10.0),
    ("0", 0.0),
    ("0s", 0.0),
    (0, 0.0),
    ("100us", 0.0001),
    ("100µs", 0.0001),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "30", "abc", "1x", "1s2", "-", ".s", None, 1.5])
def test_parse_duration_rejects_invalid(text):
    with pytest.raises(ConfigError):
        parse_duration(text)


@pytest.mark.parametrize("seconds, expected", [
    (0, "0s"),
    (30, "30s"),
    (90, "1m30s"),
    (3600, "1h0m0s"),
    (1.5, "1.5s"),
    (0.5, "500ms"),
    (0.0015, "1.5ms"),
    (-2, "-2s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_load_yaml_config(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(
        'url: "http://127.0.0.1:8080/submit"\n'
        'concurrency: 4\n'
        'duration: "30s"\n'
        'data: \'{"a": 1}\'\n'
        'cookie: "session=abc123"\n',
        encoding='utf-8'
    )

    config = load_config(str(path))

    assert config == {
        'url': 'http://127.0.0.1:8080/submit',
        'concurrency': 4,
        'duration': '30s',
        'data': '{"a": 1}',
        'cookie': 'session=abc123',
    }


def test_load_json_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'url': 'http://x', 'concurrency': 1, 'duration': '1s'}), encoding='utf-8')

    assert load_config(str(path))['concurrency'] == 1


def test_load_empty_config(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("", encoding='utf-8')

    assert load_config(str(path)) == {}


def test_load_missing_config(tmp_path):
    with pytest.raises(ConfigError, match="Error reading config file"):
        load_config(str(tmp_path / "config.yml"))


@pytest.mark.parametrize("content", ["url: [unclosed", "- just\n- a list\n"])
def test_load_unparseable_config(tmp_path, content):
    path = tmp_path / "config.yml"
    path.write_text(content, encoding='utf-8')

    with pytest.raises(ConfigError, match="Error parsing config file"):
        load_config(str(path))


def test_validate_config():
    config = validate_config({
        'url': 'http://127.0.0.1:8080/submit',
        'concurrency': 10,
        'duration': '1m30s',
        'data': 'hello',
        'cookie': 'session=abc123',
    })

    assert isinstance(config, StressTestConfig)
    assert config.concurrency == 10
    assert config.duration == 90.0
    assert config.duration_text == '1m30s'
    assert config.data == b'hello'
    assert config.cookie == 'session=abc123'
    assert config.timeout is None
    assert config.output_dir is None
    assert config.save_json is False


def test_validate_config_defaults_body_and_cookie():
    config = validate_config({'url': 'http://x', 'concurrency': 1, 'duration': 0})

    assert config.data == b''
    assert config.cookie == ''
    assert config.duration == 0.0


def test_config_is_immutable():
    config = validate_config({'url': 'http://x', 'concurrency': 1, 'duration': '1s'})

    with pytest.raises(AttributeError):
        config.concurrency = 2


@pytest.mark.parametrize("override", [
    {'url': None},
    {'concurrency': None},
    {'duration': None},
    {'concurrency': 0},
    {'concurrency': -3},
    {'concurrency': '5'},
    {'concurrency': True},
    {'duration': 'soon'},
    {'duration': '-1s'},
    {'url': 123},
    {'data': 5},
    {'timeout': 0},
    {'data': 0},
    {'data': False},
    {'cookie': 0},
    {'output_dir': 123},
])
def test_validate_config_rejects(override):
    raw = {'url': 'http://x', 'concurrency': 2, 'duration': '1s'}
    raw.update(override)
    raw = {k: v for k, v in raw.items() if v is not None}

    with pytest.raises(ConfigError):
        validate_config(raw)
