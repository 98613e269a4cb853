"""Strategy templates and their expansion into legs."""

from .catalog import (
    RiskLevel,
    StrategyCategory,
    StrategyTemplate,
    TemplateLeg,
    get_template,
    load_templates,
    templates_by_category,
)
from .instantiate import instantiate_template

__all__ = [
    "RiskLevel",
    "StrategyCategory",
    "StrategyTemplate",
    "TemplateLeg",
    "get_template",
    "load_templates",
    "templates_by_category",
    "instantiate_template",
]
