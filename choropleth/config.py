"""Configuration management for the choropleth binding pipeline."""

from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load environment variables from .env file in ops folder
env_path = Path(__file__).parent.parent / "ops" / ".env"
load_dotenv(dotenv_path=env_path)


def _split_csv_setting(value: str) -> List[str]:
    """Split a comma-separated setting into trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


class UploadConfig(BaseSettings):
    """Limits applied to uploaded tables and geometry documents."""

    max_upload_bytes: int = Field(default=20 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    table_extensions: str = Field(default=".csv", alias="ALLOWED_TABLE_EXTENSIONS")
    geometry_extensions: str = Field(default=".svg", alias="ALLOWED_GEOMETRY_EXTENSIONS")

    class Config:
        env_file = "ops/.env"
        case_sensitive = False
        extra = "ignore"

    @property
    def allowed_table_extensions(self) -> List[str]:
        return [ext.lower() for ext in _split_csv_setting(self.table_extensions)]

    @property
    def allowed_geometry_extensions(self) -> List[str]:
        return [ext.lower() for ext in _split_csv_setting(self.geometry_extensions)]


class MatchingConfig(BaseSettings):
    """Fuzzy region matching configuration."""

    threshold: float = Field(default=0.6, alias="MATCH_THRESHOLD")
    max_suggestions: int = Field(default=3, alias="MAX_SUGGESTIONS")
    alias_confidence: float = Field(default=0.95, alias="ALIAS_CONFIDENCE")
    score_cutoff: float = Field(default=0.0, alias="FUZZY_SCORE_CUTOFF")
    """Scores below this cutoff (0-100 scale) are dropped before ranking."""

    class Config:
        env_file = "ops/.env"
        case_sensitive = False
        extra = "ignore"


class ExtractionConfig(BaseSettings):
    """Region extraction heuristics."""

    reserved_prefixes: str = Field(
        default=(
            "defs,metadata,namedview,clip,linearGradient,radialGradient,"
            "pattern,mask,filter,marker,symbol"
        ),
        alias="RESERVED_ID_PREFIXES",
    )
    style_marker: str = Field(default="style", alias="CLASS_STYLE_MARKER")
    min_class_token_length: int = Field(default=3, alias="MIN_CLASS_TOKEN_LENGTH")

    class Config:
        env_file = "ops/.env"
        case_sensitive = False
        extra = "ignore"

    @property
    def reserved_id_prefixes(self) -> List[str]:
        return _split_csv_setting(self.reserved_prefixes)


class AppConfig(BaseSettings):
    """Main application configuration."""

    # Application settings
    app_name: str = Field(default="choropleth-binding", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Styling defaults
    default_scheme_id: str = Field(default="buenos-aries", alias="DEFAULT_SCHEME_ID")
    default_buckets: int = Field(default=5, alias="DEFAULT_BUCKETS")
    default_method: str = Field(default="equalInterval", alias="DEFAULT_METHOD")
    neutral_color: str = Field(default="#e5e5e5", alias="NEUTRAL_COLOR")
    schemes_path: Optional[Path] = Field(default=None, alias="CUSTOM_SCHEMES_PATH")
    """Optional YAML file with additional color schemes."""
    natural_breaks_sample_size: int = Field(default=300, alias="NATURAL_BREAKS_SAMPLE_SIZE")
    """Larger value sets are reduced to this many quantiles before Fisher-Jenks."""

    # API settings
    max_sessions: int = Field(default=256, alias="MAX_SESSIONS")
    cors_origins: str = Field(default="", alias="CORS_ORIGINS")

    # Nested settings
    upload: UploadConfig = Field(default_factory=UploadConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)

    class Config:
        env_file = "ops/.env"
        case_sensitive = False
        extra = "ignore"


# Global configuration instance
config = AppConfig()


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    return config


def reload_config() -> AppConfig:
    """Reload configuration from environment variables."""
    global config
    config = AppConfig()
    return config
