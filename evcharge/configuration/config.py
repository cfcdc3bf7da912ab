import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing or invalid"""


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Persistence store (any SQLAlchemy URL)
    DATABASE_URL = os.getenv("DATABASE_URL")
    DATABASE_TIMEOUT_SECONDS = float(os.getenv("DATABASE_TIMEOUT_SECONDS", "10"))
    DATABASE_ECHO = _env_flag("DATABASE_ECHO")

    # Auth provider tokens (Supabase signs with a shared secret, JWKS for asymmetric keys)
    JWT_SECRET_KEY = os.getenv("AUTH_SECRET_KEY")
    JWT_ALGORITHM = os.getenv("AUTH_ALGORITHM", "HS256")
    JWT_AUDIENCE = os.getenv("AUTH_AUDIENCE", "authenticated")
    JWT_JWKS_URL = os.getenv("AUTH_JWKS_URL")
    # Comma separated; defaults to AUTH_ALGORITHM alone
    JWT_ALLOWED_ALGORITHMS = os.getenv("AUTH_ALLOWED_ALGORITHMS")

    # Calendar days and slots are interpreted in this timezone
    LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE", "UTC")

    # Off by default: any authenticated caller holding a booking id may cancel it
    CANCEL_REQUIRES_OWNERSHIP = _env_flag("CANCEL_REQUIRES_OWNERSHIP")

    # OpenTelemetry
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "evchargebackend")

    @classmethod
    def allowed_algorithms(cls) -> list:
        """Signing algorithms a token header may name"""
        if cls.JWT_ALLOWED_ALGORITHMS:
            return [alg.strip().upper() for alg in cls.JWT_ALLOWED_ALGORITHMS.split(",") if alg.strip()]
        return [cls.JWT_ALGORITHM.upper()]

    @classmethod
    def validate(cls):
        """Check the settings the service cannot run without"""
        missing = []
        if not cls.DATABASE_URL:
            missing.append("DATABASE_URL")
        algorithms = cls.allowed_algorithms()
        if any(alg.startswith("HS") for alg in algorithms) and not cls.JWT_SECRET_KEY:
            missing.append("AUTH_SECRET_KEY")
        if any(not alg.startswith("HS") for alg in algorithms) and not cls.JWT_JWKS_URL:
            missing.append("AUTH_JWKS_URL")
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )
        if cls.DATABASE_TIMEOUT_SECONDS <= 0:
            raise ConfigurationError("DATABASE_TIMEOUT_SECONDS must be positive")
