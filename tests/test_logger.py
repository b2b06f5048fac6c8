import logging

from spacemichael.core import logger as logger_module
from spacemichael.core.logger import APP_LOGGER, TRACE, AppLogSink, ListSink, configure_file_logging, set_verbosity


def test_file_logging(tmp_path):
    log_path = tmp_path / "app.log"
    configure_file_logging(log_path)
    try:
        APP_LOGGER.error("relay stuck")
        for handler in APP_LOGGER.handlers:
            handler.flush()
        assert "relay stuck" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in list(APP_LOGGER.handlers):
            if isinstance(handler, logging.FileHandler):
                APP_LOGGER.removeHandler(handler)
                handler.close()


def test_app_sink_renders_context(caplog):
    set_verbosity(1)
    try:
        with caplog.at_level(logging.DEBUG, logger="spacemichael"):
            AppLogSink().record("debug", {"step": 2}, "apply")
            AppLogSink().record("trace", {"step": 3}, "hidden")
    finally:
        set_verbosity(0)
    assert "apply step=2" in caplog.text
    assert "hidden" not in caplog.text


def test_verbosity_levels():
    set_verbosity(2)
    assert APP_LOGGER.level == TRACE
    set_verbosity(0)
    assert APP_LOGGER.level == logging.INFO
    assert logger_module.LEVELS["error"] == logging.ERROR


def test_list_sink():
    sink = ListSink()
    sink.record("debug", {"a": 1}, "one")
    sink.record("error", {}, "two")
    assert sink.messages() == ["one", "two"]
    assert sink.messages("error") == ["two"]
