"""Pydantic models and loader for the strategy template catalog.

The catalog lives in ``templates.yaml`` next to this module.  Each entry
describes a named strategy as a list of legs with strike offsets measured in
strike gaps relative to the at-the-money strike, plus descriptive metadata
for display.  The catalog is read-only input: nothing in the engine writes
to it.
"""

from __future__ import annotations

import math
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..config import _load_yaml, get as cfg_get
from ..errors import TemplateError
from ..logutils import logger
from ..models import Action, OptionType

_DEFAULT_PATH = Path(__file__).with_name("templates.yaml")


class StrategyCategory(str, Enum):
    """Directional family a template belongs to."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNLIMITED = "unlimited"


class TemplateLeg(BaseModel):
    """One leg of a template, relative to the ATM strike."""

    strike_offset: int
    option_type: OptionType
    action: Action
    lots: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("strike_offset", mode="before")
    @classmethod
    def _finite_offset(cls, value):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("strike_offset must be finite")
        return value

    @field_validator("option_type", mode="before")
    @classmethod
    def _parse_type(cls, value):
        return OptionType.parse(value)

    @field_validator("action", mode="before")
    @classmethod
    def _parse_action(cls, value):
        return Action.parse(value)


class StrategyTemplate(BaseModel):
    """Named multi-leg strategy definition."""

    id: str
    name: str
    category: StrategyCategory
    description: str = ""
    legs: List[TemplateLeg]
    max_profit: str = ""
    max_loss: str = ""
    breakeven: str = ""
    ideal_conditions: List[str] = []
    risk_level: RiskLevel = RiskLevel.MEDIUM

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("legs")
    @classmethod
    def _require_legs(cls, value: List[TemplateLeg]) -> List[TemplateLeg]:
        if not value:
            raise ValueError("template requires at least one leg")
        return value


class TemplateCatalog(BaseModel):
    """Root of ``templates.yaml``."""

    version: int
    templates: List[StrategyTemplate]

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _unique_ids(self) -> "TemplateCatalog":
        seen: set[str] = set()
        for template in self.templates:
            if template.id in seen:
                raise ValueError(f"duplicate template id: {template.id}")
            seen.add(template.id)
        return self


def _catalog_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    override = cfg_get("TEMPLATES_FILE")
    return Path(override) if override else _DEFAULT_PATH


@lru_cache(maxsize=4)
def _load(path: Path) -> Dict[str, StrategyTemplate]:
    data = _load_yaml(path)
    if not isinstance(data, dict):
        raise TemplateError(f"Template catalog {path} must be a mapping")
    try:
        catalog = TemplateCatalog(**data)
    except ValidationError as exc:
        raise TemplateError(f"Invalid template catalog {path}: {exc}") from exc
    logger.debug(f"Loaded {len(catalog.templates)} strategy templates from {path}")
    return {t.id: t for t in catalog.templates}


def load_templates(path: str | Path | None = None) -> Dict[str, StrategyTemplate]:
    """Return the template catalog keyed by id, in file order."""
    return dict(_load(_catalog_path(path)))


def get_template(template_id: str, path: str | Path | None = None) -> StrategyTemplate:
    """Return the template named ``template_id``."""
    templates = _load(_catalog_path(path))
    try:
        return templates[template_id]
    except KeyError:
        raise TemplateError(f"Unknown strategy template: {template_id}") from None


def templates_by_category(
    category: StrategyCategory | str, path: str | Path | None = None
) -> List[StrategyTemplate]:
    cat = StrategyCategory(category)
    return [t for t in _load(_catalog_path(path)).values() if t.category is cat]


__all__ = [
    "StrategyCategory",
    "RiskLevel",
    "TemplateLeg",
    "StrategyTemplate",
    "TemplateCatalog",
    "load_templates",
    "get_template",
    "templates_by_category",
]
