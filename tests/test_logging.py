# tests/test_logging.py
"""Tests for session logging helpers."""

import logging

import pytest


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger("schemata")
    saved = (root.handlers[:], root.filters[:], root.level, root.propagate)
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for f in root.filters[:]:
        root.removeFilter(f)
    handlers, filters, level, propagate = saved
    for handler in handlers:
        root.addHandler(handler)
    for f in filters:
        root.addFilter(f)
    root.setLevel(level)
    root.propagate = propagate


class TestSetupLogging:

    def test_creates_session_file(self, tmp_path, restore_root_logger):
        from schemata.utils.logging import get_current_log_file, get_session_id, is_initialised, setup_logging

        log_file = setup_logging(level="DEBUG", log_dir=tmp_path)

        assert log_file.parent == tmp_path
        assert log_file.name.startswith("schemata_")
        assert get_session_id() in log_file.name
        assert get_current_log_file() == log_file
        assert is_initialised()
        assert restore_root_logger.level == logging.DEBUG

    def test_records_carry_session_id(self, tmp_path, restore_root_logger):
        from schemata.utils.logging import get_logger, get_session_id, setup_logging

        log_file = setup_logging(level="INFO", log_dir=tmp_path)
        get_logger("registry").info("hello from the registry")
        for handler in restore_root_logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "hello from the registry" in content
        assert f"| {get_session_id()} |" in content
        assert "schemata.registry" in content

    def test_latest_symlink(self, tmp_path, restore_root_logger):
        from schemata.utils.logging import setup_logging

        log_file = setup_logging(log_dir=tmp_path)
        link = tmp_path / "schemata.log"
        if link.is_symlink():
            assert link.resolve() == log_file.resolve()

    def test_env_log_dir(self, tmp_path, monkeypatch):
        from schemata.utils.logging import get_log_directory

        monkeypatch.setenv("SCHEMATA_LOG_DIR", str(tmp_path))
        assert get_log_directory() == tmp_path


class TestGetLogger:

    def test_namespaces_under_schemata(self):
        from schemata.utils.logging import get_logger

        assert get_logger("cli").name == "schemata.cli"
        assert get_logger("schemata.registry").name == "schemata.registry"
        assert get_logger("schemata").name == "schemata"


class TestStructuredHelpers:

    def test_build_lines(self, caplog):
        from schemata.utils.logging import log_build_complete, log_build_failure, log_build_start

        logger = logging.getLogger("schemata.test")
        with caplog.at_level(logging.INFO, logger="schemata"):
            log_build_start(logger, "Shop", "v1")
            log_build_complete(logger, "Shop", paths=2, definitions=5, duration_seconds=0.25)
            log_build_failure(logger, "Shop", ValueError("bad"))

        messages = [r.getMessage() for r in caplog.records]
        assert messages == [
            "BUILD START | Shop v1",
            "BUILD COMPLETE | Shop | 2 paths, 5 definitions (0.250s)",
            "BUILD FAILED | Shop | ValueError: bad",
        ]

    def test_registration_is_debug(self, caplog):
        from schemata.utils.logging import log_registration

        logger = logging.getLogger("schemata.test")
        with caplog.at_level(logging.DEBUG, logger="schemata"):
            log_registration(logger, "shop.Order", "Order")

        assert caplog.records[-1].levelno == logging.DEBUG
        assert caplog.records[-1].getMessage() == "Registered 'shop.Order' as 'Order'"


class TestCliLogFlag:

    def test_log_flag_writes_session_file(self, tmp_path, monkeypatch, restore_root_logger):
        from click.testing import CliRunner

        from schemata.cli import cli
        from schemata.config import get_config

        monkeypatch.setenv("SCHEMATA_HOME_DIR", str(tmp_path))
        get_config.cache_clear()
        try:
            result = CliRunner().invoke(cli, ["--log", "compile", "sample_types:Widget"])
        finally:
            get_config.cache_clear()

        assert result.exit_code == 0, result.output
        assert list((tmp_path / "logs").glob("schemata_*.log"))
