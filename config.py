"""Configuration for the Windows service exporter"""
from pathlib import Path
from typing import List, Optional, Tuple
from pydantic import Field, validator
from pydantic_settings import BaseSettings


def _parse_pairs(value: str) -> List[Tuple[str, str]]:
    """Parse 'Key=value,Key=value' into ordered pairs, keeping repeated keys"""
    pairs = []
    if value:
        for item in value.split(','):
            if '=' in item:
                key, val = item.split('=', 1)
                if key.strip():
                    pairs.append((key.strip(), val.strip()))
    return pairs


class Config(BaseSettings):
    """Exporter configuration loaded from environment variables"""

    # Core settings
    collection_interval: int = Field(default=30, ge=1, description="Collection interval in seconds")
    service_name: str = Field(default="windows-service-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    # WMI settings
    wmi_host: str = Field(default=".", description="Host queried over WMI")
    wmi_namespace: str = Field(default="root\\cimv2", description="WMI namespace")

    # Service query scoping
    service_where: str = Field(default="", description="Raw WQL predicate applied to Win32_Service")
    service_include_str: str = Field(
        default="",
        description="Include rules as Property=pattern pairs (comma-separated, WQL LIKE patterns)"
    )
    service_exclude_str: str = Field(
        default="",
        description="Exclude rules as Property=pattern pairs (comma-separated, WQL LIKE patterns)"
    )

    # Collection settings
    enabled_collectors_str: str = Field(default="service", description="Enabled collectors (comma-separated)")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Log file (stdout only when unset)")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('log_level')
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @validator('log_file')
    def ensure_log_directory(cls, v):
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def service_include(self) -> List[Tuple[str, str]]:
        """Include rules as (property, pattern) pairs"""
        return _parse_pairs(self.service_include_str)

    @property
    def service_exclude(self) -> List[Tuple[str, str]]:
        """Exclude rules as (property, pattern) pairs"""
        return _parse_pairs(self.service_exclude_str)

    @property
    def enabled_collectors(self) -> List[str]:
        """Get enabled collectors as a list"""
        return [item.strip() for item in self.enabled_collectors_str.split(',') if item.strip()]

    def is_collector_enabled(self, collector_name: str) -> bool:
        """Check if a specific collector is enabled"""
        return collector_name in self.enabled_collectors
