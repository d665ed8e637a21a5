from dingrobot.config import load_config


def test_defaults_when_environment_is_empty(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("", encoding="utf-8")

    config = load_config(env_file)

    assert config.webhook_url is None
    assert config.request_timeout_seconds == 30.0
    assert config.rate_limit_max_calls == 20
    assert config.rate_limit_window_seconds == 60.0


def test_values_loaded_from_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DINGROBOT_WEBHOOK_URL=https://oapi.dingtalk.com/robot/send?access_token=abc\n"
        "REQUEST_TIMEOUT_SECONDS=7.5\n"
        "RATE_LIMIT_MAX_CALLS=10\n"
        "RATE_LIMIT_WINDOW_SECONDS=30\n",
        encoding="utf-8",
    )

    config = load_config(env_file)

    assert config.webhook_url == "https://oapi.dingtalk.com/robot/send?access_token=abc"
    assert config.request_timeout_seconds == 7.5
    assert config.rate_limit_max_calls == 10
    assert config.rate_limit_window_seconds == 30.0


def test_process_environment_wins_over_env_file(clean_env, tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("DINGROBOT_WEBHOOK_URL=https://from-file\n", encoding="utf-8")
    monkeypatch.setenv("DINGROBOT_WEBHOOK_URL", "https://from-env")

    assert load_config(env_file).webhook_url == "https://from-env"


def test_malformed_numbers_fall_back_to_defaults(clean_env, tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("", encoding="utf-8")
    monkeypatch.setenv("RATE_LIMIT_MAX_CALLS", "twenty")
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "soon")

    config = load_config(env_file)

    assert config.rate_limit_max_calls == 20
    assert config.request_timeout_seconds == 30.0
