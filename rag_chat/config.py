"""Application configuration loaded from environment variables.

Two layers live here:

* ``Settings`` -- process-level settings for the panel server, loaded by
  pydantic-settings from the environment (prefix ``RAG_CHAT_``) and ``.env``.
* ``ChatOptions`` -- the ``ragChat`` option bag a host hands to the send
  pipeline.  Field aliases use the editor-style camelCase names
  (``webhookUrl``, ``validateSSL`` ...), while Python code uses snake_case.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_NAMESPACE = "ragChat"


class ChatOptions(BaseModel):
    """Typed view of the ``ragChat`` configuration namespace."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    webhook_url: str = ""
    collection: str = ""
    timeout: int = Field(default=30000, ge=1, description="Request timeout in milliseconds")
    validate_ssl: bool = Field(default=True, alias="validateSSL")
    include_context: bool = True
    additional_params: dict[str, JsonValue] = Field(default_factory=dict)
    require_collection: bool = False


class Settings(BaseSettings):
    """Application settings with environment variable loading and sensible defaults."""

    model_config = SettingsConfigDict(
        env_prefix="RAG_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "rag-chat"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8765

    # Workspace the citations resolve against; None means "no workspace open"
    workspace_root: Path | None = None

    # Defaults for the ragChat option bag
    webhook_url: str = ""
    collection: str = ""
    timeout_ms: int = Field(default=30000, ge=1)
    validate_ssl: bool = True
    include_context: bool = True
    additional_params: dict[str, JsonValue] = Field(default_factory=dict)
    require_collection: bool = False

    def chat_options(self) -> ChatOptions:
        """Build the ``ragChat`` option bag from these settings."""
        return ChatOptions(
            webhook_url=self.webhook_url,
            collection=self.collection,
            timeout=self.timeout_ms,
            validate_ssl=self.validate_ssl,
            include_context=self.include_context,
            additional_params=dict(self.additional_params),
            require_collection=self.require_collection,
        )


settings = Settings()
