"""
Configuration for NoteStream.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Chat and image model used when a provider is chosen without naming them
PROVIDER_MODELS: dict[str, tuple[str, str | None]] = {
    "gemini": ("gemini-2.5-flash", "imagen-4.0-generate-001"),
    "openai": ("gpt-4o-mini", "dall-e-3"),
    "ollama": ("llava", None),
}


class LLMConfig(BaseModel):
    """Generative backend configuration."""

    provider: str = "gemini"  # gemini, openai, ollama
    model: str | None = None
    image_model: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: float = 120.0

    @model_validator(mode="after")
    def fill_provider_models(self) -> "LLMConfig":
        """Fill unset model names with the provider's defaults."""
        default_model, default_image_model = PROVIDER_MODELS.get(self.provider, (None, None))
        if self.model is None:
            self.model = default_model
        if self.image_model is None:
            self.image_model = default_image_model
        return self


class NotesConfig(BaseModel):
    """Note assistant configuration."""

    default_title: str = "Untitled note"
    answer_separator: str = "\n\n"
    voice_note_heading: str = "Voice note summary:\n"
    default_image_prompt: str = "What is in this picture?"


class StatusConfig(BaseModel):
    """Status line configuration."""

    idle_label: str = "Ready"
    default_duration_ms: int = 3000
    saved_duration_ms: int = 2000
    billing_duration_ms: int = 5000


class ChatConfig(BaseModel):
    """Simulated chat configuration."""

    storage_dir: str = ".notestream"
    storage_key: str = "chats"
    typing_delay_min: float = 1.0
    typing_delay_max: float = 3.0
    reply_delay_min: float = 2.0
    reply_delay_max: float = 4.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    notes: NotesConfig = Field(default_factory=NotesConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            NOTESTREAM_LLM_PROVIDER: Backend provider (gemini, openai, ollama)
            NOTESTREAM_LLM_MODEL: Text model name
            NOTESTREAM_LLM_IMAGE_MODEL: Image generation model name
            NOTESTREAM_LLM_BASE_URL: Backend base URL
            NOTESTREAM_LLM_API_KEY: Backend API key (falls back to API_KEY)
            NOTESTREAM_NOTES_DEFAULT_TITLE: Title given to new notes
            NOTESTREAM_STATUS_IDLE_LABEL: Status shown when nothing is happening
            NOTESTREAM_CHAT_STORAGE_DIR: Directory holding persisted chats
            NOTESTREAM_LOG_LEVEL: Log level
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            # Convert boolean strings
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            # Convert numeric strings
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            llm=LLMConfig(
                provider=get_env("NOTESTREAM_LLM_PROVIDER", "gemini"),
                model=get_env("NOTESTREAM_LLM_MODEL"),
                image_model=get_env("NOTESTREAM_LLM_IMAGE_MODEL"),
                base_url=get_env("NOTESTREAM_LLM_BASE_URL"),
                api_key=get_env("NOTESTREAM_LLM_API_KEY") or get_env("API_KEY"),
                temperature=get_env("NOTESTREAM_LLM_TEMPERATURE", 0.7),
                max_tokens=get_env("NOTESTREAM_LLM_MAX_TOKENS", 2000),
                timeout=get_env("NOTESTREAM_LLM_TIMEOUT", 120.0),
            ),
            notes=NotesConfig(
                default_title=get_env("NOTESTREAM_NOTES_DEFAULT_TITLE", "Untitled note"),
            ),
            status=StatusConfig(
                idle_label=get_env("NOTESTREAM_STATUS_IDLE_LABEL", "Ready"),
                default_duration_ms=get_env("NOTESTREAM_STATUS_DURATION_MS", 3000),
            ),
            chat=ChatConfig(
                storage_dir=get_env("NOTESTREAM_CHAT_STORAGE_DIR", ".notestream"),
                storage_key=get_env("NOTESTREAM_CHAT_STORAGE_KEY", "chats"),
            ),
            logging=LoggingConfig(
                level=get_env("NOTESTREAM_LOG_LEVEL", "INFO"),
                log_to_file=get_env("NOTESTREAM_LOG_TO_FILE", False),
                log_dir=get_env("NOTESTREAM_LOG_DIR", "logs"),
                file_rotation=get_env("NOTESTREAM_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("NOTESTREAM_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("NOTESTREAM_LOG_COMPRESSION", "zip"),
                serialize=get_env("NOTESTREAM_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Env sections that differ from defaults override YAML
        final_dict = {**config_dict}
        default = cls()
        for section in ("llm", "notes", "status", "chat", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
