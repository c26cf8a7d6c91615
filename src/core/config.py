from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.schemas.inbox import DraftTone


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase edge functions (inbox-fetch, inbox-analyze, draft-email-reply, send-email)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_access_token: str = ""
    functions_timeout: float = 30.0

    @property
    def functions_base_url(self) -> str:
        """Return the edge functions root, e.g. https://<ref>.supabase.co/functions/v1."""
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/functions/v1"

    # Chat rendering
    fyi_preview_limit: int = 5
    default_draft_tone: DraftTone = "professional"

    # Chat sessions idle longer than this (seconds) are dropped
    session_idle_ttl: int = 3600

    # Langfuse
    langfuse_secret_key: str = ""
    langfuse_public_key: str = ""
    langfuse_host: str = "http://localhost:3000"

    # App
    app_env: str = "development"
    log_level: str = "INFO"


settings = Settings()
