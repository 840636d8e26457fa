# salary_ranges/config/models.py
"""
Pydantic models for validating the engine settings loaded from YAML
(or constructed with defaults when no file is given).
"""

import logging
import re
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 600  # seconds

DEFAULT_REGION_TABLES: Dict[str, str] = {
    "India": "Aon India - 2025",
    "US": "Aon US Premium - 2025",
    "UK": "Aon UK London - 2025",
}

DEFAULT_SITE_ALIASES: Dict[str, str] = {
    "USA": "US",
    "United States": "US",
    "New York": "US",
    "London": "UK",
    "United Kingdom": "UK",
    "Bangalore": "India",
    "Bengaluru": "India",
}


class TableNames(BaseModel):
    """Names of the non-regional input tables."""

    levels: str = Field("Level Mapping", description="Internal level -> benchmark token")
    aliases: str = Field("Job Family Aliases", description="from-code -> to-code pairs")
    exec_descriptions: str = Field("Exec Families", description="code -> exec family name")
    internal: str = Field("Base Data", description="Internal payroll records")


class ColumnPatterns(BaseModel):
    """Case-insensitive header regexes used to locate columns."""

    job_code: str = r"^\s*job\s*code\s*$"
    job_family: str = r"^\s*job\s*family\s*$"

    level: str = r"^\s*(internal\s*)?level\s*$"
    token: str = r"token|aon\s*level|benchmark\s*level"

    alias_from: str = r"^\s*from"
    alias_to: str = r"^\s*to"

    exec_code: str = r"^\s*(job\s*)?(family\s*)?code\s*$"
    exec_family: str = r"exec|description|family\s*name"

    site: str = r"^\s*(site|location)(\s*name)?\s*$"
    family_code: str = r"^\s*(job\s*)?(family\s*)?code\s*$"
    mapped_family: str = r"^\s*(mapped|exec(utive)?)(\s*family)?(\s*name)?\s*$"
    internal_level: str = r"^\s*(job\s*)?level\s*$"
    active: str = r"^\s*(is\s*)?active(\s*flag)?\s*$"
    pay: str = r"^\s*(base\s*|annual\s*)?(pay|salary)(\s*amount)?\s*$"
    employment_type: str = r"^\s*emp(loyment|\.)?\s*type\s*$"

    @model_validator(mode="after")
    def check_patterns_compile(self) -> "ColumnPatterns":
        for name, pattern in self.model_dump().items():
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid header pattern for '{name}': {e}")
        return self


class EngineSettings(BaseModel):
    """Top-level settings for the benchmark resolution engine."""

    region_tables: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_REGION_TABLES))
    cache_ttl_seconds: int = Field(DEFAULT_CACHE_TTL, gt=0)
    engineering_prefixes: List[str] = Field(default_factory=lambda: ["EN.", "TE."])
    finance_prefixes: List[str] = Field(default_factory=lambda: ["FI."])
    default_alias: Tuple[str, str] = ("EN.SODE", "EN.SDEV")
    site_aliases: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SITE_ALIASES))
    allowed_employment_types: List[str] = Field(
        default_factory=lambda: ["Permanent", "Regular Full-Time"]
    )
    exec_level_threshold: int = Field(7, ge=1)
    exec_number_offset: int = Field(6, ge=0)
    tables: TableNames = Field(default_factory=TableNames)
    columns: ColumnPatterns = Field(default_factory=ColumnPatterns)

    @field_validator("default_alias")
    @classmethod
    def check_default_alias(cls, value: Tuple[str, str]) -> Tuple[str, str]:
        if not value[0].strip() or not value[1].strip():
            raise ValueError("default_alias entries must be non-empty codes")
        return (value[0].strip(), value[1].strip())

    @model_validator(mode="after")
    def check_regions(self) -> "EngineSettings":
        if not self.region_tables:
            raise ValueError("At least one region table must be configured")
        if self.exec_number_offset >= self.exec_level_threshold:
            raise ValueError(
                f"exec_number_offset ({self.exec_number_offset}) must be below "
                f"exec_level_threshold ({self.exec_level_threshold})"
            )
        return self

    def table_for_region(self, region: str) -> str:
        """Benchmark table name for a region (case-insensitive); falls back to the input."""
        wanted = str(region).strip().lower()
        for name, table in self.region_tables.items():
            if name.lower() == wanted:
                return table
        return str(region).strip()

    def region_for_site(self, site: str) -> str:
        """Normalize a payroll site or a region name to a configured region."""
        text = " ".join(str(site).split())
        lowered = text.lower()
        for region in self.region_tables:
            if region.lower() == lowered:
                return region
        for alias, region in self.site_aliases.items():
            if alias.lower() == lowered:
                return region
        return text
