import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from agri_ai.models import CustomerRecommendation
from agri_ai.services import gateway
from agri_ai.services.services import get_supabase_client
from agri_ai.utils.json_parser import ParseFailure, coerce_list, coerce_str, extract_json_object

logger = logging.getLogger(__name__)

ORDER_HISTORY_LIMIT = 20
LISTINGS_LIMIT = 50
PRIORITIES = ("high", "medium", "low")


def _unique(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))


def fetch_order_history(supabase, customer_id: str) -> List[Dict[str, Any]]:
    result = supabase.table("customer_orders")\
        .select("listing:marketplace_listings (category, title, farming_method)")\
        .eq("customer_id", customer_id)\
        .eq("status", "delivered")\
        .limit(ORDER_HISTORY_LIMIT)\
        .execute()
    return result.data or []


def fetch_active_listings(supabase) -> List[Dict[str, Any]]:
    result = supabase.table("marketplace_listings")\
        .select("id, title, category, farming_method, price, quantity, unit, location")\
        .eq("status", "active")\
        .limit(LISTINGS_LIMIT)\
        .execute()
    return result.data or []


def build_prompt(order_history: List[Dict[str, Any]], listings: List[Dict[str, Any]], current_month: str) -> str:
    purchased = [o.get("listing") or {} for o in order_history]
    categories = _unique([p["category"] for p in purchased if p.get("category")])
    items = _unique([p["title"] for p in purchased if p.get("title")])[:10]

    listings_text = "\n".join(
        f"- {l.get('title')} ({l.get('category')}, ₹{l.get('price')}/{l.get('unit')}, {l.get('farming_method') or 'conventional'}) [id: {l.get('id')}]"
        for l in listings
    )

    return f"""Based on the following customer purchase history and current available produce, suggest 5 personalized crop recommendations.

Customer Purchase History:
- Categories bought: {", ".join(categories) or "None yet"}
- Items purchased: {", ".join(items) or "None yet"}
- Current month: {current_month} (consider seasonal availability)

Available listings:
{listings_text or "None"}

Provide recommendations that:
1. Match customer preferences based on history
2. Consider seasonal availability for {current_month}
3. Include a mix of their favorites and new discoveries
4. Prioritize organic/sustainable options when available

Return ONLY a JSON object in the following format:
{{
  "recommendations": [
    {{
      "title": "Product or crop name",
      "category": "Category",
      "reason": "Why this is recommended",
      "listing_id": "optional listing id from the list above",
      "priority": "high" | "medium" | "low"
    }}
  ],
  "seasonal_tip": "One paragraph seasonal tip"
}}

The response must be valid JSON with no extra commentary."""


def normalize_recommendation(rec: Dict[str, Any]) -> Optional[CustomerRecommendation]:
    title = coerce_str(rec.get("title"))
    if not title:
        return None
    priority = coerce_str(rec.get("priority"), "medium").lower()
    return CustomerRecommendation(
        title=title,
        category=coerce_str(rec.get("category")),
        reason=coerce_str(rec.get("reason")),
        listing_id=coerce_str(rec.get("listing_id")) or None,
        priority=priority if priority in PRIORITIES else "medium",
    )


async def generate_customer_recommendations(customer_id: str) -> Dict[str, Any]:
    """
    Recommend produce from purchase history and active listings, then store the
    result as the customer's latest recommendation snapshot.
    """
    supabase = get_supabase_client()

    order_history = fetch_order_history(supabase, customer_id)
    listings = fetch_active_listings(supabase)
    current_month = datetime.now().strftime("%B")
    logger.info(f"Customer {customer_id}: {len(order_history)} delivered orders, {len(listings)} active listings")

    raw_text = await gateway.generate_text(build_prompt(order_history, listings, current_month))

    data = extract_json_object(raw_text)
    if isinstance(data, ParseFailure):
        logger.error(f"Failed to parse customer recommendations JSON: {data.reason}")
        return {"recommendations": [], "seasonal_tip": ""}

    recommendations = [
        r for r in (normalize_recommendation(rec) for rec in coerce_list(data.get("recommendations")) if isinstance(rec, dict))
        if r is not None
    ]
    result = {
        "recommendations": [r.model_dump() for r in recommendations],
        "seasonal_tip": coerce_str(data.get("seasonal_tip")),
    }

    try:
        supabase.table("customer_preferences").upsert(
            {
                "customer_id": customer_id,
                "last_recommendations": result,
                "recommendations_updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="customer_id",
        ).execute()
        logger.info(f"Saved {len(recommendations)} recommendations for customer {customer_id}")
    except Exception as e:
        # Snapshot write is best-effort
        logger.error(f"Error saving recommendations for customer {customer_id}: {e}", exc_info=True)

    return result
