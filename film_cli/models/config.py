"""
Pydantic model for application configuration.
Provides validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_CHUNK_SIZE = 65536  # 64 KB
MIN_CHUNK_SIZE = 4096  # 4 KB
MAX_CHUNK_SIZE = 4194304  # 4 MB


class AppConfig(BaseModel):
    """A validated configuration model for the application."""

    # Catalog source; both empty means the built-in sample catalog
    catalog_url: str = ""
    catalog_file: str = ""

    # Download settings
    chunk_size: int = DEFAULT_CHUNK_SIZE
    connect_timeout: float = 15.0

    # Storage
    database_name: str = "films.sqlite"

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("catalog_url")
    @classmethod
    def validate_catalog_url(cls, v: str) -> str:
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("Catalog URL must start with http:// or https://.")
        return v

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Keeps the read size within a sensible range."""
        if v < MIN_CHUNK_SIZE or v > MAX_CHUNK_SIZE:
            raise ValueError(
                f"Chunk size must be between {MIN_CHUNK_SIZE} and {MAX_CHUNK_SIZE} "
                "bytes."
            )
        return v

    @field_validator("connect_timeout")
    @classmethod
    def validate_connect_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Connect timeout must be a positive number of seconds.")
        return v

    @field_validator("database_name")
    @classmethod
    def validate_database_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Database name cannot be empty.")
        if "/" in v or "\\" in v or ".." in v:
            raise ValueError("Database name must be a plain file name.")
        return v

    @model_validator(mode="after")
    def validate_catalog_source(self) -> "AppConfig":
        """Checks for conflicting catalog sources."""
        if self.catalog_url and self.catalog_file:
            raise ValueError(
                "Configure either 'catalog_url' or 'catalog_file', not both."
            )
        return self

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
