"""
Pydantic Settings — centralized configuration loaded from environment variables.

Values are read once when the service wires its collaborators (API
dependencies, scripts).  Mapping components receive them as explicit
constructor arguments and never consult `settings` while mapping.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Generation endpoint (Ollama) ──────────
    OLLAMA_HOST: str = "http://ollama:11434"
    OLLAMA_MODEL: str = "mistral"
    LLM_TEMPERATURE: float = 0.3
    LLM_TIMEOUT_SECONDS: float = 120.0

    # ── Mapper behaviour ──────────────────────
    # Re-parse string values that look like quoted JSON objects/arrays.
    # Disable for target schemas with free-form text fields.
    MAPPER_UNSTRINGIFY_NESTED: bool = True
    # 1 = rows are mapped strictly one after another.
    BATCH_MAX_WORKERS: int = 1

    # ── LangSmith Tracing ────────────────────
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_ENDPOINT: str = "https://api.smith.langchain.com"
    LANGSMITH_PROJECT: str = "ai-integration-mapper"
    LANGSMITH_TRACING: bool = False

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origin_list(self) -> list[str]:
        """CORS_ORIGINS is a comma-separated list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
