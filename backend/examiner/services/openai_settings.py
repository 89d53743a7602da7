from dataclasses import dataclass
from examiner.core.config import Settings, get_settings

DEFAULT_BASE_URL = "https://api.openai.com/v1"


@dataclass(frozen=True)
class AIClientConfig:
    """Immutable AI endpoint configuration, built once and handed to the client."""

    api_key: str
    base_url: str
    model: str
    max_tokens: int
    timeout_seconds: float
    max_concurrency: int = 1

    def __repr__(self) -> str:
        return (
            f"AIClientConfig(base_url={self.base_url!r}, model={self.model!r}, "
            f"max_tokens={self.max_tokens}, timeout_seconds={self.timeout_seconds}, "
            f"max_concurrency={self.max_concurrency})"
        )


def normalize_base_url(base_url: str | None) -> str:
    base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
    if not base_url.endswith("/v1") and "/v1/" not in base_url:
        base_url = f"{base_url}/v1"
    return base_url


def get_ai_client_config(settings: Settings | None = None) -> AIClientConfig:
    """Resolve the AI endpoint configuration from application settings."""
    settings = settings or get_settings()
    return AIClientConfig(
        api_key=settings.openai_api_key or "",
        base_url=normalize_base_url(settings.openai_base_url),
        model=settings.openai_model,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=settings.ai_timeout_seconds,
        max_concurrency=settings.analysis_max_concurrency,
    )
