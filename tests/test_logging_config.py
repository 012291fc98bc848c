"""Tests for logging setup"""
import logging

import pytest

from git_dep_keeper.logging_config import get_logger, setup_logging


@pytest.fixture
def root_logger():
    """Restore the root logger after setup_logging replaced its handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger('git').setLevel(logging.NOTSET)


class TestSetupLogging:
    """Test log levels chosen from the command-line flags."""

    def test_warnings_by_default(self, root_logger):
        setup_logging()
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert logging.getLogger('git').level == logging.WARNING

    def test_verbose_shows_info(self, root_logger):
        setup_logging(verbose=True)
        assert root_logger.level == logging.INFO

    def test_debug_writes_log_file(self, root_logger, temp_dir, monkeypatch):
        monkeypatch.setattr('git_dep_keeper.logging_config.LOG_DIR', temp_dir / 'logs')

        setup_logging(debug=True)
        get_logger('git_dep_keeper.core').debug("loaded")
        for handler in root_logger.handlers:
            handler.flush()

        assert root_logger.level == logging.DEBUG
        assert logging.getLogger('git').level == logging.DEBUG
        assert "core - DEBUG - loaded" in (temp_dir / 'logs' / 'git-dep-keeper.log').read_text()
        for handler in root_logger.handlers:
            handler.close()

    def test_repeated_setup_does_not_stack_handlers(self, root_logger):
        setup_logging()
        setup_logging(verbose=True)
        assert len(root_logger.handlers) == 1


class TestGetLogger:
    """Test logger naming."""

    def test_package_prefix_is_stripped(self):
        assert get_logger('git_dep_keeper.services.status_service').name == 'status_service'
        assert get_logger('git_dep_keeper.core').name == 'core'
        assert get_logger('other.module').name == 'other.module'
