"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pagetrail.toml only contains
overrides. A fresh site needs only [site] name.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from pagetrail.domain.languages import Language
from pagetrail.domain.models import NameScope, RandomNameOptions
from pagetrail.domain.names import NameCodec
from pagetrail.domain.types import CharsetMode

# --- pagetrail.toml sections ---


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    name: str = "my-site"


class RandomNamesConfig(BaseModel):
    """[names.random] section."""

    model_config = {"frozen": True}

    min_length: int = 6
    max_length: int = 0
    alpha: bool = True
    numeric: bool = True
    confirm: bool = True

    @model_validator(mode="after")
    def _some_alphabet(self) -> RandomNamesConfig:
        if not (self.alpha or self.numeric):
            msg = "[names.random] needs alpha or numeric enabled"
            raise ValueError(msg)
        return self

    def options(self, scope: NameScope | None = None, **overrides: object) -> RandomNameOptions:
        """Build generator options, applying per-call *overrides*."""
        values: dict[str, object] = {
            "min_length": self.min_length,
            "max_length": self.max_length,
            "alpha": self.alpha,
            "numeric": self.numeric,
            "confirm": self.confirm,
            "scope": scope or NameScope(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RandomNameOptions.model_validate(values)


class NamesConfig(BaseModel):
    """[names] section."""

    model_config = {"frozen": True}

    untitled: str = "untitled"
    delimiter: str = "-"
    delimiters: list[str] = Field(default_factory=lambda: ["-", "_", "."])
    charset: CharsetMode = CharsetMode.ASCII
    max_length: int = 128
    max_attempts: int = 1000
    random: RandomNamesConfig = Field(default_factory=RandomNamesConfig)

    def codec(self) -> NameCodec:
        delimiters = tuple(self.delimiters)
        if self.delimiter not in delimiters:
            delimiters = (self.delimiter, *delimiters)
        return NameCodec(
            delimiter=self.delimiter,
            delimiters=delimiters,
            max_length=self.max_length,
            untitled=self.untitled,
        )


class HistoryConfig(BaseModel):
    """[history] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    minimum_age: int = 120
    max_segments: int = 10


class LanguageConfig(BaseModel):
    """One [[languages]] entry."""

    model_config = {"frozen": True}

    id: int = Field(gt=0)
    name: str
    default: bool = False

    def to_language(self) -> Language:
        return Language(id=self.id, name=self.name, is_default=self.default)