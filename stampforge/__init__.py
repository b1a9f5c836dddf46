"""StampForge public API."""

from .app import BotApp
from .config import StampForgeConfig
from .domain.cards import CardCatalog, CardDesign

__all__ = [
    "BotApp",
    "CardCatalog",
    "CardDesign",
    "StampForgeConfig",
]
