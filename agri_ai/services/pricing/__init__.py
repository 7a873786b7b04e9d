"""Static treatment pricing: price table, dosage cost calculator, enrichment."""

from agri_ai.services.pricing.price_table import PRICE_TABLE, lookup_price
from agri_ai.services.pricing.calculator import calculate_cost, parse_dosage_value
from agri_ai.services.pricing.enrichment import (
    PRICE_FIELDS_TO_STRIP,
    enrich_treatment,
    enrich_treatments,
    strip_price_fields,
)

__all__ = [
    "PRICE_TABLE",
    "PRICE_FIELDS_TO_STRIP",
    "lookup_price",
    "calculate_cost",
    "parse_dosage_value",
    "enrich_treatment",
    "enrich_treatments",
    "strip_price_fields",
]
