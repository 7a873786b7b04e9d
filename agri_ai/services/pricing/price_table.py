"""
Static agrochemical / fertilizer price table (INR).

Single source of truth for money in treatment recommendations: prices never
come from the language model or from an external API.
"""
import logging
from types import MappingProxyType
from typing import Mapping, Optional

from agri_ai.models import PriceEntry, ProductKind

logger = logging.getLogger(__name__)


def _liquid(per_liter: float) -> PriceEntry:
    return PriceEntry(kind=ProductKind.LIQUID, price_per_liter=per_liter)


def _powder(per_kg: float) -> PriceEntry:
    return PriceEntry(kind=ProductKind.POWDER, price_per_kg=per_kg)


# Insertion order matters: substring lookups return the first hit.
PRICE_TABLE: Mapping[str, PriceEntry] = MappingProxyType({
    # ===== Fungicides =====
    "Chlorothalonil": _liquid(900),
    "Mancozeb": _powder(350),
    "Copper Oxychloride": _powder(420),
    "Carbendazim": _powder(480),
    "Propiconazole": _liquid(1200),
    "Hexaconazole": _liquid(1100),
    "Metalaxyl": _powder(600),
    "Thiram": _powder(380),
    "Zineb": _powder(300),
    "Sulfur": _powder(150),
    "Bordeaux Mixture": _powder(250),
    "Trichoderma": _powder(400),
    "Mancozeb Fungicide": _powder(350),

    # ===== Insecticides =====
    "Imidacloprid": _liquid(1800),
    "Chlorpyrifos": _liquid(650),
    "Cypermethrin": _liquid(750),
    "Dimethoate": _liquid(500),
    "Neem Oil": _liquid(400),
    "Spinosad": _liquid(2200),
    "Fipronil": _liquid(1500),

    # ===== Fertilizers =====
    "Urea": _powder(8),
    "Urea (46-0-0)": _powder(8),
    "DAP": _powder(27),
    "Potash (MOP)": _powder(18),
    "Ammonium Nitrate": _powder(12),
    "NPK 10-26-26": _powder(24),
    "Organic Compost": _powder(3),
    "Micronutrient Mix": _powder(200),

    # ===== Herbicides =====
    "Glyphosate": _liquid(600),
    "2,4-D": _liquid(450),
    "Atrazine": _powder(350),
    "Pendimethalin": _liquid(700),
})


def lookup_price(name: Optional[str], table: Mapping[str, PriceEntry] = PRICE_TABLE) -> Optional[PriceEntry]:
    """
    Find the price entry for a product name.

    Exact case-insensitive match wins. Otherwise falls back to a substring match in
    either direction (key inside name, or name inside key) and returns the first
    key in table order that qualifies, e.g. "Mancozeb 75% WP" -> "Mancozeb".
    """
    if not name or not str(name).strip():
        return None
    lower = str(name).strip().lower()

    for key, entry in table.items():
        if key.lower() == lower:
            return entry

    for key, entry in table.items():
        key_lower = key.lower()
        if key_lower in lower or lower in key_lower:
            logger.debug(f"Price lookup: '{name}' matched '{key}' by substring")
            return entry

    logger.info(f"Price lookup: no entry for '{name}'")
    return None
