"""
Pull a JSON object out of free-form model text.

Models wrap JSON in prose or ```json fences, so extraction takes everything from
the first "{" to the last "}" and parses that. Failures come back as a
``ParseFailure`` value instead of an exception so every flow can show the same
"please retry" message.
"""
import re
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw_text: str = ""

    def __bool__(self) -> bool:
        return False


def _repair(json_str: str) -> str:
    json_str = re.sub(r',\s*}', '}', json_str)  # trailing comma before }
    json_str = re.sub(r',\s*]', ']', json_str)  # trailing comma before ]
    return json_str


def extract_json_object(text: Optional[str]) -> Union[Dict[str, Any], ParseFailure]:
    """Parse the first "{" .. last "}" slice of *text* into a dict."""
    if not text:
        return ParseFailure("empty model response", "")

    start_idx = text.find("{")
    end_idx = text.rfind("}")
    if start_idx == -1 or end_idx <= start_idx:
        logger.warning(f"No JSON object found in model response: {text[:200]}")
        return ParseFailure("no JSON object found in model response", text)

    json_str = text[start_idx:end_idx + 1]
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError:
        try:
            data = json.loads(_repair(json_str))
        except json.JSONDecodeError as e:
            logger.warning(f"JSON parse failed: {e}")
            return ParseFailure(f"invalid JSON: {e}", text)

    if not isinstance(data, dict):
        return ParseFailure("JSON value is not an object", text)
    return data


# ============================================================================#
# Field coercion
# ============================================================================#

def coerce_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        return value or default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def coerce_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def coerce_str_list(value: Any) -> List[str]:
    return [str(v).strip() for v in coerce_list(value) if v is not None and str(v).strip()]


def coerce_number(value: Any) -> Optional[float]:
    """Leading number of a value: 70 -> 70.0, "58%" -> 58.0, "high" -> None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = re.match(r'\s*(-?\d+(?:\.\d+)?)', value)
        if match:
            return float(match.group(1))
    return None
