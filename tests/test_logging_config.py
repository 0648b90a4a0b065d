"""
Tests for logging setup
"""
import logging
import logging.handlers
import pytest

from logging_config import setup_logging, get_logger


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging"""

    def test_installs_console_and_rotating_file_handlers(self, tmp_path, restore_root_logger):
        """Test that setup installs a console and a rotating file handler"""
        class LogConfig:
            LOG_LEVEL = 'WARNING'
            LOG_FORMAT = '%(levelname)s %(message)s'
            LOG_FILE = 'test.log'
            LOG_DIR = str(tmp_path / 'logs')

        root = setup_logging(LogConfig)

        assert root.level == logging.WARNING
        kinds = {type(h) for h in root.handlers}
        assert logging.StreamHandler in kinds
        assert logging.handlers.RotatingFileHandler in kinds
        assert (tmp_path / 'logs').is_dir()

    def test_quiets_sqlalchemy_engine(self, tmp_path, restore_root_logger):
        """Test that SQL statement logging is kept at WARNING"""
        class LogConfig:
            LOG_LEVEL = 'DEBUG'
            LOG_FORMAT = '%(message)s'
            LOG_FILE = 'test.log'
            LOG_DIR = str(tmp_path)

        setup_logging(LogConfig)
        assert logging.getLogger('sqlalchemy.engine').level == logging.WARNING

    def test_get_logger_returns_named_logger(self):
        """Test that get_logger returns the named logger"""
        assert get_logger('services.quotes_repository').name == 'services.quotes_repository'
