"""Configuration models for inbound message normalization."""

import codecs
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AdapterConfig(BaseModel):
    """Settings applied to every MessageAdapter."""

    use_conversation_guid_only: bool = False
    html_body_encoding: Optional[str] = None
    default_save_filename: str = "OriginalMessage.eml"
    save_directory: Optional[str] = None

    @field_validator("html_body_encoding")
    def validate_encoding(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v

    @field_validator("default_save_filename")
    def validate_filename(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError("default_save_filename must be a bare file name")
        return v

    def get_default_save_path(self) -> Path:
        """Get the file used by save_to_file() when no path is given."""
        directory = Path(self.save_directory).expanduser() if self.save_directory else Path(tempfile.gettempdir())
        return directory / self.default_save_filename


class HtmlConversionConfig(BaseModel):
    """Options for the html2text converter."""

    body_width: int = 0
    ignore_links: bool = False
    ignore_images: bool = True

    @field_validator("body_width")
    def validate_body_width(cls, v: int) -> int:
        if v < 0:
            raise ValueError("body_width must not be negative")
        return v


class StorageConfig(BaseModel):
    """Storage configuration."""

    audit_log_path: str = "~/.mail2ticket/logs/audit.log"
    trash_path: Optional[str] = None
    outbox_path: Optional[str] = None

    def get_audit_log_path(self) -> Path:
        """Get expanded audit log path."""
        return Path(self.audit_log_path).expanduser()

    def get_trash_path(self) -> Optional[Path]:
        """Get expanded trash directory, if configured."""
        return Path(self.trash_path).expanduser() if self.trash_path else None

    def get_outbox_path(self) -> Optional[Path]:
        """Get expanded outbox directory, if configured."""
        return Path(self.outbox_path).expanduser() if self.outbox_path else None


class AppConfig(BaseModel):
    """Main application configuration."""

    schema_version: str = "1.0"
    adapter: AdapterConfig = Field(default_factory=AdapterConfig)
    html_conversion: HtmlConversionConfig = Field(default_factory=HtmlConversionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("schema_version")
    def validate_schema_version(cls, v: str) -> str:
        if not v:
            raise ValueError("schema_version is required")
        return v
