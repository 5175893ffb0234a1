from functools import lru_cache

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

# Origins the mobile/web clients are served from
PRODUCTION_ORIGINS = (
    "https://mymacro.ai",
    "https://www.mymacro.ai",
)

# Expo / Metro dev servers (only allowed when ENVIRONMENT=development)
DEVELOPMENT_ORIGINS = (
    "exp://localhost:19000",
    "exp://127.0.0.1:19000",
    "http://localhost:8081",
    "http://localhost:19006",
    "http://127.0.0.1:8081",
)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-2.5-flash"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # "development" enables the dev origin allow-list
    environment: str = "production"
    log_level: str = "INFO"

    # Database - can use either DATABASE_URL or separate params
    database_url: str | None = None

    # Separate DB params (for passwords with special characters)
    db_host: str | None = None
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str | None = None
    db_name: str = "postgres"

    # Supabase Auth (the service-role DB connection goes through db_* above)
    supabase_url: str | None = None
    supabase_jwt_secret: str | None = None

    # Upstream AI provider
    gemini_api_key: str | None = None
    gemini_model: str = GEMINI_MODEL
    gemini_base_url: str = GEMINI_BASE_URL
    upstream_timeout_seconds: float = 30.0

    # Daily request budgets
    free_daily_requests: int = 20
    pro_daily_requests: int = 500

    @property
    def is_development(self) -> bool:
        """Check if running against the development origin allow-list."""
        return self.environment.lower() == "development"


class GatewayPolicy(BaseModel):
    """
    Immutable per-deployment rules for the AI proxy.

    Holds the tier budget table and the CORS origin allow-lists. A budget of
    None means the tier is unlimited and is never counted.
    """

    model_config = ConfigDict(frozen=True)

    tier_budgets: dict[str, int | None] = {
        "free": 20,
        "pro": 500,
        "founder": None,
    }
    default_tier: str = "free"
    upgrade_tier: str = "pro"
    production_origins: tuple[str, ...] = PRODUCTION_ORIGINS
    development_origins: tuple[str, ...] = DEVELOPMENT_ORIGINS
    allow_development_origins: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayPolicy":
        return cls(
            tier_budgets={
                "free": settings.free_daily_requests,
                "pro": settings.pro_daily_requests,
                "founder": None,
            },
            allow_development_origins=settings.is_development,
        )

    def budget_for(self, tier: str) -> int | None:
        """Daily budget for a tier; unknown tiers get the default tier's budget."""
        if tier in self.tier_budgets:
            return self.tier_budgets[tier]
        return self.tier_budgets[self.default_tier]

    def is_unlimited(self, tier: str) -> bool:
        return self.budget_for(tier) is None

    @property
    def allowed_origins(self) -> tuple[str, ...]:
        if self.allow_development_origins:
            return self.production_origins + self.development_origins
        return self.production_origins

    def cors_origin_for(self, origin: str | None) -> str:
        """Echo an allow-listed origin, otherwise fall back to the primary production origin."""
        if origin and origin in self.allowed_origins:
            return origin
        return self.production_origins[0]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
