import os
import configparser
from pathlib import Path

from scheme_engine.exceptions import ConfigError

class Config:
    """Configuration manager for the Scheme Engine."""

    _instance = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return

        self._config_dir = Path(os.getenv('SCHEME_ENGINE_CONFIG_DIR', 'config'))
        self._config_path = self._config_dir / 'settings.ini'
        self._config = configparser.ConfigParser(interpolation=None)

        # Create config directory if it doesn't exist
        if not self._config_dir.exists():
            self._config_dir.mkdir(parents=True)

        # Load config or create default
        if self._config_path.exists():
            self._config.read(self._config_path)
        else:
            self._create_default_config()

        self._initialized = True

    def _create_default_config(self):
        """Create default configuration file."""
        self._config['DATABASE'] = {
            'engine': 'sqlite',
            'database': 'schemes.db',
            'echo': 'False'
        }

        self._config['LOGGING'] = {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'directory': 'logs',
            'max_size_mb': '10',
            'backup_count': '5',
            'console_output': 'True'
        }

        self._config['SCHEME_RULES'] = {
            'ceiling_order_factor': '2',   # ladder covers at least 2x the order
            'ceiling_base_multiple': '10',  # and at least 10 base rungs
            'percent_decimals': '2',
            'virtual_scheme_id': 'virtual'
        }

        self._save_config()

    def _save_config(self):
        """Save configuration to file."""
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)

    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_db_url(self):
        """Generate SQLAlchemy database URL."""
        engine = self.get('DATABASE', 'engine', 'sqlite')
        database = self.get('DATABASE', 'database', 'schemes.db')

        if engine == 'sqlite':
            return f"sqlite:///{database}"

        username = self.get('DATABASE', 'username', 'postgres')
        password = self.get('DATABASE', 'password', '')
        host = self.get('DATABASE', 'host', 'localhost')
        port = self.get('DATABASE', 'port', '5432')

        return f"{engine}://{username}:{password}@{host}:{port}/{database}"

    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True)
        }

    @property
    def scheme_rules(self):
        """Get scheme calculation rules.

        Raises:
            ConfigError: If a ladder ceiling factor is not positive
        """
        rules = {
            'ceiling_order_factor': self.get_int('SCHEME_RULES', 'ceiling_order_factor', 2),
            'ceiling_base_multiple': self.get_int('SCHEME_RULES', 'ceiling_base_multiple', 10),
            'percent_decimals': self.get_int('SCHEME_RULES', 'percent_decimals', 2),
            'virtual_scheme_id': self.get('SCHEME_RULES', 'virtual_scheme_id', 'virtual')
        }

        for key in ('ceiling_order_factor', 'ceiling_base_multiple'):
            if rules[key] <= 0:
                raise ConfigError(
                    f"SCHEME_RULES.{key} must be positive",
                    code='SCHEME_RULES',
                    details={key: rules[key]}
                )

        return rules

# Global config instance
config = Config()
