import os
from dataclasses import dataclass

from dotenv import load_dotenv

from course_core import ConfigurationError

# Load .env file if it exists
load_dotenv()


class Config:
    """
    Centralized configuration management.
    All sensitive values are loaded from environment variables.
    """
    # File Paths
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    COURSE_DATA_PATH = os.environ.get("COURSE_DATA_PATH", os.path.join(BASE_DIR, 'courses.csv'))
    REQUIREMENTS_PATH = os.environ.get("REQUIREMENTS_PATH", os.path.join(BASE_DIR, 'degree_requirements.json'))

    # Parsing defaults
    DEFAULT_CREDITS = 4
    DEFAULT_CAPACITY = 30

    # Recommendation Parameters
    MAX_RECOMMENDATIONS = 5
    MAX_SEMANTIC_CANDIDATES = int(os.environ.get("MAX_SEMANTIC_CANDIDATES", "200"))

    # AI Configuration - API key loaded from environment
    DEEPSEEK_API_URL = os.environ.get("DEEPSEEK_API_URL", "https://api.deepseek.com/v1/chat/completions")
    DEEPSEEK_MODEL = os.environ.get("DEEPSEEK_MODEL", "deepseek-chat")
    DEEPSEEK_TEMPERATURE = float(os.environ.get("DEEPSEEK_TEMPERATURE", "0.7"))
    DEEPSEEK_TIMEOUT = float(os.environ.get("DEEPSEEK_TIMEOUT", "5"))

    @classmethod
    def get_api_key(cls):
        """Get the DeepSeek API key from the environment (None when unset or blank)."""
        key = os.environ.get("DEEPSEEK_API_KEY", "").strip()
        return key or None

    DEEPSEEK_API_KEY = None  # Will be populated at runtime

    # Session Configuration
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev_key_change_in_production")

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    DEBUG = False
    LOG_LEVEL = "WARNING"


class TestConfig(Config):
    DEBUG = True
    TESTING = True
    DEEPSEEK_TIMEOUT = 1.0
    # No data files during tests; the planner starts empty
    COURSE_DATA_PATH = os.path.join(Config.BASE_DIR, 'test_data', 'courses.csv')
    REQUIREMENTS_PATH = os.path.join(Config.BASE_DIR, 'test_data', 'degree_requirements.json')


def get_config():
    """Get configuration based on environment."""
    env = os.environ.get('FLASK_ENV', 'development')

    config_map = {
        'production': ProductionConfig,
        'development': DevelopmentConfig,
        'testing': TestConfig
    }

    config = config_map.get(env, DevelopmentConfig)

    # Load API key at runtime
    config.DEEPSEEK_API_KEY = config.get_api_key()

    return config


def validate_config(config=None):
    """Validate that required configuration is present."""
    config = config or get_config()
    issues = []

    if not config.DEEPSEEK_API_KEY:
        issues.append("No DeepSeek API key found. Set DEEPSEEK_API_KEY environment variable.")

    if config.SECRET_KEY == "dev_key_change_in_production" and os.environ.get('FLASK_ENV') == 'production':
        issues.append("Using default SECRET_KEY in production. Set SECRET_KEY environment variable.")

    return issues


@dataclass(frozen=True)
class DeepSeekSettings:
    """
    Connection settings for the chat-completion service.

    Built once at startup from a Config class and handed to whoever talks to
    the service. Immutable afterwards.
    """
    api_key: str = None
    api_url: str = Config.DEEPSEEK_API_URL
    model: str = Config.DEEPSEEK_MODEL
    temperature: float = Config.DEEPSEEK_TEMPERATURE
    timeout: float = Config.DEEPSEEK_TIMEOUT

    @classmethod
    def from_config(cls, config) -> 'DeepSeekSettings':
        return cls(
            api_key=getattr(config, 'DEEPSEEK_API_KEY', None),
            api_url=config.DEEPSEEK_API_URL,
            model=config.DEEPSEEK_MODEL,
            temperature=config.DEEPSEEK_TEMPERATURE,
            timeout=config.DEEPSEEK_TIMEOUT,
        )

    def validate(self):
        """Raise ConfigurationError unless the settings can authenticate a request."""
        if not self.api_key:
            raise ConfigurationError("DEEPSEEK_API_KEY environment variable not set.")
        if not self.api_url:
            raise ConfigurationError("DEEPSEEK_API_URL is empty.")
