"""
Crop plan recommendation.

A rule-based ranking over a small crop database gives a baseline; the model is
then asked for a top-3 seeded with that baseline. If the model fails or returns
nothing usable, the baseline is returned with a templated rationale.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from agri_ai.errors import AgriAIError
from agri_ai.models import CropRecommendation, CropRecommendationRequest
from agri_ai.services import gateway
from agri_ai.utils.json_parser import ParseFailure, coerce_list, coerce_number, coerce_str, coerce_str_list, extract_json_object

logger = logging.getLogger(__name__)

WATER_RANK = {"Low": 1, "Medium": 2, "High": 3}

DEFAULT_RATIONALE = "Recommended based on soil, season, water availability, and budget profile."


@dataclass(frozen=True)
class CropProfile:
    crop: str
    soil_types: Tuple[str, ...]
    seasons: Tuple[str, ...]
    water_need: str
    base_yield_per_acre_kg: float
    input_cost_per_acre: float
    price_range_per_kg: Tuple[float, float]
    fertilizers: Tuple[str, ...]

    @property
    def avg_price(self) -> float:
        return (self.price_range_per_kg[0] + self.price_range_per_kg[1]) / 2

    @property
    def profit_per_acre(self) -> float:
        return self.base_yield_per_acre_kg * self.avg_price - self.input_cost_per_acre


# Crop suitability + mandi price estimates for Indian conditions
CROP_DATABASE: Tuple[CropProfile, ...] = (
    CropProfile("Tomato", ("loamy", "red", "black"), ("Kharif", "Rabi"), "Medium", 2500, 28000, (12, 18), ("NPK 19:19:19", "Organic compost")),
    CropProfile("Wheat", ("loamy", "clay", "black"), ("Rabi",), "Medium", 2200, 24000, (18, 24), ("DAP", "Urea", "Zinc sulphate")),
    CropProfile("Paddy (Rice)", ("clay", "loamy", "black"), ("Kharif",), "High", 2600, 32000, (18, 22), ("NPK 10:26:26", "Organic manure")),
    CropProfile("Cotton", ("black",), ("Kharif",), "Medium", 800, 30000, (65, 85), ("NPK 20:20:0", "Potash")),
    CropProfile("Groundnut", ("sandy", "red", "loamy"), ("Kharif",), "Low", 900, 22000, (60, 75), ("Gypsum", "Single super phosphate")),
    CropProfile("Onion", ("red", "loamy"), ("Rabi", "Summer"), "Medium", 1500, 26000, (10, 18), ("NPK 12:32:16", "Farmyard manure")),
    CropProfile("Chillies", ("black", "red", "loamy"), ("Kharif", "Rabi"), "Medium", 800, 25000, (80, 120), ("NPK 19:19:19", "Micronutrient mix")),
)


def format_rupees(value: float) -> str:
    """Indian digit grouping: 123456 -> '1,23,456'"""
    rounded = int(round(value))
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))
    if len(digits) <= 3:
        return sign + digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups + [tail])


def _format_price(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def score_crop(profile: CropProfile, request: CropRecommendationRequest) -> int:
    matches_soil = request.soil_type.lower() in profile.soil_types
    matches_season = request.season in profile.seasons
    water_ok = WATER_RANK.get(request.water_availability, 0) >= WATER_RANK[profile.water_need]
    within_budget = profile.input_cost_per_acre * request.farm_size <= request.budget

    return (
        (3 if matches_soil else 0)
        + (3 if matches_season else 0)
        + (2 if water_ok else 0)
        + (2 if within_budget else 0)
    )


def compute_baseline(request: CropRecommendationRequest, limit: int = 3) -> List[Dict[str, Any]]:
    """Top crops by suitability score, ties broken by profit per acre"""
    ranked = sorted(
        CROP_DATABASE,
        key=lambda p: (score_crop(p, request), p.profit_per_acre),
        reverse=True,
    )

    baseline = []
    for profile in ranked[:limit]:
        profit = max(0, profile.profit_per_acre)
        min_price, max_price = profile.price_range_per_kg
        baseline.append({
            "crop": profile.crop,
            "expectedProfitPerAcre": profit,
            "expectedProfit": f"₹{format_rupees(profit)} / acre",
            "expectedPriceRange": f"₹{_format_price(min_price)}-{_format_price(max_price)}/kg",
            "fertilizers": list(profile.fertilizers),
            "waterNeed": profile.water_need,
            "avgPricePerKg": profile.avg_price,
        })
    return baseline


def build_prompt(request: CropRecommendationRequest, baseline: List[Dict[str, Any]]) -> str:
    baseline_text = "\n".join(
        f"{idx + 1}. {rec['crop']} – Profit ~{rec['expectedProfit']}, Water: {rec['waterNeed']}, "
        f"Price: {rec['expectedPriceRange']}, Fertilizers: {', '.join(rec['fertilizers'])}"
        for idx, rec in enumerate(baseline)
    )

    return f"""You are an AI agricultural planning assistant helping Indian farmers plan crops for the next season.

Farmer context:
- Soil type: {request.soil_type}
- Region: {request.region or "Not specified"}
- Season: {request.season}
- Water availability: {request.water_availability}
- Budget: ₹{format_rupees(request.budget)} total
- Farm size: {request.farm_size:g} acres

You also have rule-based baseline suggestions and mandi-style price estimates:
{baseline_text or "No strong rule-based matches – suggest robust, low-risk crops."}

Using agronomy knowledge plus market understanding, suggest the TOP 3 most profitable yet realistic crops to grow next season.

Very important:
- Make suggestions practical for small and medium Indian farmers.
- Respect water constraints and budget (avoid extremely high input cost crops if budget is low).
- Prefer crops that match the soil and season; only deviate if no suitable option exists.
- Consider risk diversification – don't suggest three ultra-volatile crops together.

Return ONLY a JSON object in the following format:
{{
  "recommendations": [
    {{
      "crop": "Tomato",
      "expectedProfit": "₹45,000 / acre",
      "expectedProfitValue": 45000,
      "expectedPriceRange": "₹14-18/kg",
      "fertilizers": ["NPK 19:19:19", "Organic compost"],
      "waterNeed": "Medium",
      "whyRecommended": "Short-season cash crop suitable for loamy soil with medium water and strong urban demand."
    }}
  ]
}}

Rules:
- expectedProfitValue must be a NUMBER representing profit per acre in rupees (no currency symbol).
- expectedProfit must be a human-readable string using Indian format, e.g. "₹45,000 / acre".
- fertilizers must be a short array of 2–4 input recommendations.
- whyRecommended must be a 1–2 sentence explanation tailored to the given inputs.
- Do NOT include any extra commentary outside JSON."""


def normalize_recommendation(rec: Dict[str, Any]) -> CropRecommendation:
    profit_value = coerce_number(rec.get("expectedProfitValue")) or 0
    expected_profit = rec.get("expectedProfit")
    if not isinstance(expected_profit, str):
        expected_profit = f"₹{format_rupees(profit_value)} / acre"

    return CropRecommendation(
        crop=coerce_str(rec.get("crop")),
        expected_profit=expected_profit,
        expected_profit_value=profit_value,
        expected_price_range=coerce_str(rec.get("expectedPriceRange")),
        fertilizers=coerce_str_list(rec.get("fertilizers")),
        water_need=coerce_str(rec.get("waterNeed"), "Medium"),
        why_recommended=coerce_str(rec.get("whyRecommended"), DEFAULT_RATIONALE),
    )


def parse_recommendations(text: str) -> List[CropRecommendation]:
    """Model recommendations; empty list when the response is unusable"""
    data = extract_json_object(text)
    if isinstance(data, ParseFailure):
        return []
    if not isinstance(data.get("recommendations"), list):
        logger.warning("AI response missing recommendations array")
        return []
    return [
        normalize_recommendation(rec)
        for rec in coerce_list(data.get("recommendations"))
        if isinstance(rec, dict)
    ]


def baseline_recommendations(request: CropRecommendationRequest, baseline: List[Dict[str, Any]]) -> List[CropRecommendation]:
    region = request.region or "your region"
    return [
        CropRecommendation(
            crop=rec["crop"],
            expected_profit=rec["expectedProfit"],
            expected_profit_value=rec["expectedProfitPerAcre"],
            expected_price_range=rec["expectedPriceRange"],
            fertilizers=rec["fertilizers"],
            water_need=rec["waterNeed"],
            why_recommended=(
                f"Based on your {request.soil_type} soil in {region}, "
                f"{rec['crop']} fits the {request.season} season, works with {request.water_availability.lower()} water "
                f"availability, and matches your budget for {request.farm_size:g} acre(s)."
            ),
        )
        for rec in baseline
    ]


async def get_crop_recommendations(request: CropRecommendationRequest) -> List[CropRecommendation]:
    baseline = compute_baseline(request)

    try:
        raw_text = await gateway.generate_text(build_prompt(request, baseline))
        recommendations = parse_recommendations(raw_text)
        if recommendations:
            logger.info(f"AI crop recommendations: {[r.crop for r in recommendations]}")
            return recommendations
        logger.warning("Empty AI recommendation list, falling back to rule-based")
    except AgriAIError as e:
        logger.error(f"AI crop recommendation failed, falling back to rule-based: {e}")

    return baseline_recommendations(request, baseline)
