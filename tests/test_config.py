"""
Tests for configuration system
"""
import os
import pytest
from config import (
    Config,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config
)


@pytest.mark.unit
class TestBaseConfig:
    """Tests for base configuration"""

    def test_base_config_has_database_url(self):
        """Test that base config has a database URL"""
        config = Config()
        assert config.DATABASE_URL

    def test_base_config_has_report_windows(self):
        """Test that base config has the report windows"""
        config = Config()
        assert config.ALERT_WINDOW_DAYS == 7
        assert config.WEEKLY_WINDOW_DAYS == 7
        assert config.TOP_PRODUCTS_LIMIT == 5

    def test_base_config_has_quote_defaults(self):
        """Test that base config has quote editor defaults"""
        config = Config()
        assert config.DEFAULT_QUOTE_VALIDITY_DAYS == 7
        assert config.DEFAULT_SHIPPING_RATE_PER_KM == 5.0
        assert config.DEFAULT_OBSERVATIONS.startswith('Orçamento válido por 7 dias')

    def test_base_config_has_logging_settings(self):
        """Test that base config has logging settings"""
        config = Config()
        assert config.LOG_FILE
        assert '%(levelname)s' in config.LOG_FORMAT


@pytest.mark.unit
class TestEnvironmentConfigs:
    """Tests for environment-specific configuration"""

    def test_development_config_has_debug_log_level(self):
        """Test that development config has DEBUG log level"""
        config = DevelopmentConfig()
        assert config.DEBUG is True
        assert config.LOG_LEVEL == 'DEBUG'

    def test_production_config_has_debug_disabled(self):
        """Test that production config has debug disabled"""
        config = ProductionConfig()
        assert config.DEBUG is False
        assert config.TESTING is False

    def test_testing_config_uses_in_memory_database(self):
        """Test that testing config uses an in-memory database"""
        config = TestingConfig()
        assert config.TESTING is True
        assert config.DATABASE_URL == 'sqlite://'


@pytest.mark.unit
class TestGetConfig:
    """Tests for configuration selector"""

    def test_get_config_returns_development_by_default(self, test_env_vars):
        """Test that get_config returns development config by default"""
        del os.environ['APP_ENV']
        assert get_config() == DevelopmentConfig

    def test_get_config_returns_production_when_set(self, test_env_vars):
        """Test that get_config returns production config when env is production"""
        os.environ['APP_ENV'] = 'production'
        assert get_config() == ProductionConfig

    def test_get_config_returns_testing_when_set(self, test_env_vars):
        """Test that get_config returns testing config when env is testing"""
        assert get_config() == TestingConfig

    def test_get_config_falls_back_on_unknown_env(self, test_env_vars):
        """Test that an unknown environment falls back to development"""
        os.environ['APP_ENV'] = 'staging'
        assert get_config() == DevelopmentConfig
