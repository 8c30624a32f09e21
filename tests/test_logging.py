import logging

from modeleval.utils.logging import LEVEL_ENV_VAR, configure_logging, level_from_verbosity


def test_verbosity_levels(monkeypatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    assert level_from_verbosity(0) == logging.WARNING
    assert level_from_verbosity(1) == logging.INFO
    assert level_from_verbosity(3) == logging.DEBUG


def test_env_var_applies_without_flags(monkeypatch):
    monkeypatch.setenv(LEVEL_ENV_VAR, "debug")
    assert level_from_verbosity(0) == logging.DEBUG
    assert level_from_verbosity(1) == logging.INFO
    monkeypatch.setenv(LEVEL_ENV_VAR, "chatty")
    assert level_from_verbosity(0) == logging.WARNING


def test_configure_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_path = tmp_path / "logs" / "run.log"
    try:
        configure_logging(log_path, level=logging.INFO)
        assert root.level == logging.INFO
        logging.getLogger("modeleval.test").info("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "hello file" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
