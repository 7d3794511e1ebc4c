import json

import pytest

from services.config_manager import DEFAULT_COMMENT_BODY, ConfigManager, ReviewConfig


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.json"


def test_defaults_without_sources(config_file):
    config = ConfigManager(config_file, environ={}).load()

    assert config == ReviewConfig()
    assert config.label == "route-change"
    assert config.root_path == "service"
    assert config.excluded_segments == ("lambda",)


def test_file_then_environment_precedence(config_file):
    config_file.write_text(json.dumps({"label": "api-review", "root_path": "apps", "unknown_key": 1}))
    environ = {
        "GITHUB_TOKEN": "ghs_secret",
        "GITHUB_REPOSITORY": "acme/api",
        "ROUTE_REVIEW_ROOT_PATH": "services",
        "ROUTE_REVIEW_REQUEST_DELAY_SECONDS": "0.25",
        "ROUTE_REVIEW_CHECK_REMOVED_ROUTES": "true",
        "ROUTE_REVIEW_EXCLUDED_SEGMENTS": "lambda, legacy",
    }

    config = ConfigManager(config_file, environ=environ).load()

    assert config.label == "api-review"
    assert config.root_path == "services"
    assert config.github_token == "ghs_secret"
    assert config.repository == "acme/api"
    assert config.request_delay_seconds == 0.25
    assert config.check_removed_routes is True
    assert config.excluded_segments == ("lambda", "legacy")


def test_pull_number_from_event_payload(tmp_path, config_file):
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"pull_request": {"number": 42}}))

    config = ConfigManager(config_file, environ={"GITHUB_EVENT_PATH": str(event)}).load()

    assert config.pull_number == 42


def test_explicit_override_wins(tmp_path, config_file):
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"pull_request": {"number": 42}}))

    config = ConfigManager(config_file, environ={"GITHUB_EVENT_PATH": str(event)}).load(pull_number=9)

    assert config.pull_number == 9


def test_invalid_file_falls_back_to_defaults(config_file, capsys):
    config_file.write_text("{not json")

    config = ConfigManager(config_file, environ={}).load()

    assert config == ReviewConfig()
    assert "Error loading" in capsys.readouterr().err


def test_invalid_value_raises(config_file):
    with pytest.raises(ValueError):
        ConfigManager(config_file, environ={"ROUTE_REVIEW_REQUEST_DELAY_SECONDS": "soon"}).load()


def test_config_path_from_environment(tmp_path):
    path = tmp_path / "custom.json"

    manager = ConfigManager(environ={"ROUTE_REVIEW_CONFIG": str(path)})

    assert manager.config_file == path


def test_save_config_round_trip(tmp_path):
    config_file = tmp_path / "nested" / "config.json"
    manager = ConfigManager(config_file, environ={})

    manager.save_config({"label": "routes"})
    manager.save_config({"fail_fast": True})

    assert json.loads(config_file.read_text()) == {"label": "routes", "fail_fast": True}
    assert manager.load().fail_fast is True


def test_save_config_rejects_unknown_keys(config_file):
    with pytest.raises(ValueError):
        ConfigManager(config_file, environ={}).save_config({"colour": "red"})


def test_comment_body_fallback(tmp_path):
    missing = ReviewConfig(comment_body_path=str(tmp_path / "missing.md"))
    empty_file = tmp_path / "empty.md"
    empty_file.write_text("  \n")

    assert missing.comment_body() == DEFAULT_COMMENT_BODY
    assert ReviewConfig(comment_body_path=str(empty_file)).comment_body() == DEFAULT_COMMENT_BODY
    assert ReviewConfig().comment_body() == DEFAULT_COMMENT_BODY
