import logging
from typing import Any, Dict, List, Mapping

from agri_ai.config import CURRENCY
from agri_ai.models import EnrichedTreatment, PriceEntry
from agri_ai.services.pricing.calculator import calculate_cost
from agri_ai.services.pricing.price_table import PRICE_TABLE, lookup_price

logger = logging.getLogger(__name__)

# Financial claims the model may invent. Dropped before anything else reads the
# suggestion; money only ever comes from PRICE_TABLE.
PRICE_FIELDS_TO_STRIP = frozenset({
    "price", "pricePerUnit", "pricePerLiter", "pricePerKg",
    "unitPrice", "unitCost", "cost", "totalCost", "estimatedCost",
    "savings", "profit", "estimatedProfit", "revenue", "currency",
    "price_per_unit", "price_per_liter", "price_per_kg",
    "unit_price", "unit_cost", "total_cost", "estimated_cost",
    "estimated_profit",
})


def strip_price_fields(suggestion: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of a model suggestion without any financial fields"""
    return {k: v for k, v in suggestion.items() if k not in PRICE_FIELDS_TO_STRIP}


def enrich_treatment(suggestion: Mapping[str, Any], table: Mapping[str, PriceEntry] = PRICE_TABLE) -> EnrichedTreatment:
    clean = strip_price_fields(suggestion)

    name = str(clean.get("name") or clean.get("product") or "").strip()
    dosage = str(clean.get("dosagePerAcre") or clean.get("dosage") or "0")

    cost = calculate_cost(dosage, lookup_price(name, table))

    return EnrichedTreatment(
        product=name,
        dosage_per_acre=dosage,
        description=str(clean.get("description") or ""),
        unit_price=cost.unit_price if cost else None,
        total_cost=cost.total_cost if cost else None,
        required_quantity=cost.required_quantity if cost else dosage,
        currency=cost.currency if cost else CURRENCY,
        pricing_available=cost is not None,
    )


def enrich_treatments(suggestions: Any, table: Mapping[str, PriceEntry] = PRICE_TABLE) -> List[EnrichedTreatment]:
    """
    Attach static prices to model-suggested treatments.

    Output order follows input order. Anything that is not a list yields an
    empty list; non-object items are skipped.
    """
    if not isinstance(suggestions, list) or not suggestions:
        return []

    enriched = []
    for item in suggestions:
        if not isinstance(item, Mapping):
            logger.warning(f"Skipping malformed treatment suggestion: {item!r}")
            continue
        enriched.append(enrich_treatment(item, table))

    priced = sum(1 for t in enriched if t.pricing_available)
    logger.info(f"Enriched {len(enriched)} treatments ({priced} priced)")
    return enriched
