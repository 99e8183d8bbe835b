import os


def _flag(name, default="0"):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL")

    # Rate limits
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    LOGIN_LIMIT_PER_IP = os.getenv("LOGIN_LIMIT_PER_IP", "10 per 30 minutes")
    CHECKOUT_LIMIT_PER_IP = os.getenv("CHECKOUT_LIMIT_PER_IP", "20 per hour")
    SUBMISSION_LIMIT_PER_IP = os.getenv("SUBMISSION_LIMIT_PER_IP", "10 per hour")

    # Admin auth
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-insecure-jwt-key")
    ACCESS_TOKEN_LIFETIME_MIN = int(os.getenv("ACCESS_TOKEN_LIFETIME_MIN", 60))
    REFRESH_TOKEN_LIFETIME_DAYS = int(os.getenv("REFRESH_TOKEN_LIFETIME_DAYS", 30))

    # Drop scheduler
    SCHEDULER_AUTOSTART = _flag("SCHEDULER_AUTOSTART", "1")
    SCHEDULER_DISPLAY_INTERVAL = float(os.getenv("SCHEDULER_DISPLAY_INTERVAL", 1))
    SCHEDULER_SWEEP_INTERVAL = float(os.getenv("SCHEDULER_SWEEP_INTERVAL", 30))

    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")

    # Stripe
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_PUBLISHABLE_KEY = os.getenv("STRIPE_PUBLISHABLE_KEY")
    STRIPE_CURRENCY = os.getenv("STRIPE_CURRENCY", "usd")

    # Shippo
    SHIPPO_API_KEY = os.getenv("SHIPPO_API_KEY")
    SHIPPO_DEFAULT_SERVICE = os.getenv("SHIPPO_DEFAULT_SERVICE", "usps_first")
    SHIPPO_PARCEL_LENGTH = os.getenv("SHIPPO_PARCEL_LENGTH", "12")
    SHIPPO_PARCEL_WIDTH = os.getenv("SHIPPO_PARCEL_WIDTH", "10")
    SHIPPO_PARCEL_HEIGHT = os.getenv("SHIPPO_PARCEL_HEIGHT", "3")
    SHIPPO_PARCEL_WEIGHT = os.getenv("SHIPPO_PARCEL_WEIGHT", "1")
    SHIP_FROM_NAME = os.getenv("SHIP_FROM_NAME", "Hokies Thrift")
    SHIP_FROM_STREET = os.getenv("SHIP_FROM_STREET")
    SHIP_FROM_CITY = os.getenv("SHIP_FROM_CITY")
    SHIP_FROM_STATE = os.getenv("SHIP_FROM_STATE")
    SHIP_FROM_ZIP = os.getenv("SHIP_FROM_ZIP")
    SHIP_FROM_EMAIL = os.getenv("SHIP_FROM_EMAIL")
    SHIP_FROM_PHONE = os.getenv("SHIP_FROM_PHONE")

    # eBay
    EBAY_APP_ID = os.getenv("EBAY_APP_ID")
    EBAY_CERT_ID = os.getenv("EBAY_CERT_ID")
    EBAY_SELLER = os.getenv("EBAY_SELLER")
    EBAY_SEARCH_QUERY = os.getenv("EBAY_SEARCH_QUERY", "Virginia Tech")
    EBAY_LIMIT = int(os.getenv("EBAY_LIMIT", 200))

    # Google Places (address autocomplete on checkout)
    GOOGLE_PLACES_API_KEY = os.getenv("GOOGLE_PLACES_API_KEY")
    GOOGLE_PLACES_ENABLED = _flag("GOOGLE_PLACES_ENABLED", "1")

    # Tracing
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "hokies-thrift")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
    OTEL_EXPORTER = os.getenv("OTEL_EXPORTER", "otlp")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "hokies-admin")
    OTEL_EXPORTER = os.getenv("OTEL_EXPORTER", "console")


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    RATELIMIT_ENABLED = False
    SCHEDULER_AUTOSTART = False
    ADMIN_PASSWORD = "test-admin-password"
    JWT_SECRET = "test-jwt-secret"
    PUBLIC_BASE_URL = "https://thrift.example.com"
    OTEL_EXPORTER = "none"


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")

    REQUIRED_ENV = ("SECRET_KEY", "DATABASE_URL", "JWT_SECRET", "ADMIN_PASSWORD")

    @staticmethod
    def validate():
        missing = [key for key in ProductionConfig.REQUIRED_ENV if not os.getenv(key)]
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )


def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
