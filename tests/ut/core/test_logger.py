"""日志配置测试"""

from __future__ import annotations

import json
import logging

from gpm.utils.logger import JSONFormatter, reset_logging, setup_logging


def test_setup_replaces_handlers() -> None:
    setup_logging("DEBUG")
    setup_logging("WARNING")
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.WARNING
    reset_logging()
    assert root.handlers == []


def test_unknown_level_falls_back_to_info() -> None:
    setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO


def test_json_formatter() -> None:
    record = logging.LogRecord("gpm.core.pinner", logging.INFO, __file__, 1, "拉取: %s", ("x",), None)
    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "拉取: x"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "gpm.core.pinner"
    assert "thread" in entry
