import re
import logging
from typing import Optional, Union

from agri_ai.config import CURRENCY
from agri_ai.models import CostResult, PriceEntry, ProductKind

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r'\d+(?:\.\d*)?|\.\d+')
# Unit tokens must stand alone: "2 l", "15 ltr", "250gm" but not "per plant"
_MILLILITRE_UNIT = re.compile(r'ml|(?<![a-z])millilit(?:re|er)s?(?![a-z])')
_LITRE_UNIT = re.compile(r'(?<![a-z])(?:l|lt|ltrs?|lit|litres?|liters?)(?![a-z])')
_GRAM_UNIT = re.compile(r'(?<![a-z])(?:g|gm|gms|grams?|grammes?)(?![a-z])')

# Liquid dosages without a unit at or above this value are read as millilitres
ML_HEURISTIC_THRESHOLD = 10


def parse_dosage_value(dosage: Union[str, int, float, None]) -> Optional[float]:
    """Return the first decimal number in a dosage string, or None."""
    if dosage is None:
        return None
    match = _NUMBER.search(str(dosage))
    if not match:
        return None
    try:
        return float(match.group())
    except ValueError:
        return None


def format_quantity(value: float, unit: str) -> str:
    """50.0 -> '50 kg', 9.9 -> '9.9 L'"""
    number = int(value) if float(value).is_integer() else value
    return f"{number} {unit}"


def calculate_cost(dosage: Union[str, int, float, None], entry: Optional[PriceEntry]) -> Optional[CostResult]:
    """
    Price a free-text dosage ("500 ml per acre", "2.5 kg", "2.5") against a table entry.

    Returns None when the dosage has no positive number, the entry is missing, or
    the entry's kind has no matching price. Callers treat None as "pricing
    unavailable".
    """
    value = parse_dosage_value(dosage)
    if value is None or value <= 0:
        return None
    if entry is None:
        return None

    text = str(dosage).lower()

    if entry.kind == ProductKind.LIQUID and entry.price_per_liter is not None:
        unit_price = entry.price_per_liter
        if _MILLILITRE_UNIT.search(text):
            in_litres = False
        elif _LITRE_UNIT.search(text):
            in_litres = True
        else:
            # No unit: large numbers are millilitres, small ones litres
            in_litres = value < ML_HEURISTIC_THRESHOLD

        if in_litres:
            total = unit_price * value
            quantity = format_quantity(value, "L")
        else:
            total = (unit_price / 1000) * value
            quantity = format_quantity(value, "ml")

    elif entry.kind == ProductKind.POWDER and entry.price_per_kg is not None:
        unit_price = entry.price_per_kg
        if "kg" in text or "kilo" in text:
            in_grams = False
        elif _GRAM_UNIT.search(text):
            in_grams = True
        else:
            # No unit: always kilograms
            in_grams = False

        if in_grams:
            total = (unit_price / 1000) * value
            quantity = format_quantity(value, "g")
        else:
            total = unit_price * value
            quantity = format_quantity(value, "kg")

    else:
        logger.warning(f"Price entry kind/price mismatch: {entry}")
        return None

    return CostResult(
        total_cost=round(total, 2),
        unit_price=unit_price,
        required_quantity=quantity,
        currency=CURRENCY,
    )
