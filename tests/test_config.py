import logging
import os

import pytest

from apple_pickup_watcher.config import Config

ENV_NAMES = ("LOG_LEVEL", "POLL_DELAY", "EMAIL_TO")


@pytest.fixture
def restore_config():
    root = logging.getLogger()
    level = root.level
    saved_env = {name: os.environ.pop(name, None) for name in ENV_NAMES}
    saved = {name: value for name, value in vars(Config).items() if name.isupper()}
    yield
    root.setLevel(level)
    for name, value in saved.items():
        setattr(Config, name, value)
    for name, value in saved_env.items():
        os.environ.pop(name, None)
        if value is not None:
            os.environ[name] = value


def test_reload_applies_env_file_settings(tmp_path, restore_config: None) -> None:
    env_file = tmp_path / "credentials.env"
    env_file.write_text("LOG_LEVEL=warning\nPOLL_DELAY=12\nEMAIL_TO=me@example.com\n", encoding="utf-8")

    Config.reload(str(env_file))

    assert Config.POLL_DELAY == 12.0
    assert Config.EMAIL_TO == "me@example.com"
    assert logging.getLogger().level == logging.WARNING
