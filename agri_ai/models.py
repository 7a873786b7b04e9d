from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase keys on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ============================================================================#
# Pricing
# ============================================================================#

class ProductKind(str, Enum):
    LIQUID = "liquid"
    POWDER = "powder"


class PriceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ProductKind
    price_per_liter: Optional[float] = None
    price_per_kg: Optional[float] = None


class CostResult(BaseModel):
    total_cost: float
    unit_price: float
    required_quantity: str
    currency: str = "INR"


class EnrichedTreatment(CamelModel):
    product: str
    dosage_per_acre: str = Field(alias="dosagePerAcre")
    description: str = ""
    unit_price: Optional[float] = Field(default=None, alias="unitPrice")
    total_cost: Optional[float] = Field(default=None, alias="totalCost")
    required_quantity: str = Field(alias="requiredQuantity")
    currency: str = "INR"
    pricing_available: bool = Field(default=False, alias="pricingAvailable")


# ============================================================================#
# Disease analysis
# ============================================================================#

class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ApplicationStep(BaseModel):
    step: str
    timing: str = ""


class DiseaseAnalysis(CamelModel):
    disease_name: str
    confidence: Union[int, float, str] = "low"
    severity: Severity = Severity.MEDIUM
    description: str = ""
    symptoms: List[str] = []
    treatments: List[EnrichedTreatment] = []
    application_guide: List[ApplicationStep] = Field(default=[], alias="applicationGuide")
    prevention_tips: List[str] = Field(default=[], alias="preventionTips")
    note: Optional[str] = None

    def to_wire(self) -> dict:
        data = self.model_dump(by_alias=True, mode="json")
        if data.get("note") is None:
            data.pop("note", None)
        return data


class SafetyVerdict(BaseModel):
    rejected: bool
    error: Optional[str] = None


class DetectionOutcome(BaseModel):
    """A pipeline run that completed: either an analysis or a rejection reason."""
    analysis: Optional[DiseaseAnalysis] = None
    error: Optional[str] = None

    @property
    def rejected(self) -> bool:
        return self.error is not None


# ============================================================================#
# Recommendations
# ============================================================================#

class CropRecommendation(CamelModel):
    crop: str
    expected_profit: str = Field(alias="expectedProfit")
    expected_profit_value: float = Field(default=0, alias="expectedProfitValue")
    expected_price_range: str = Field(default="", alias="expectedPriceRange")
    fertilizers: List[str] = []
    water_need: str = Field(default="Medium", alias="waterNeed")
    why_recommended: str = Field(default="", alias="whyRecommended")


class CustomerRecommendation(BaseModel):
    title: str
    category: str = ""
    reason: str = ""
    listing_id: Optional[str] = None
    priority: str = "medium"


# ============================================================================#
# Requests
# ============================================================================#

class ChatRequest(BaseModel):
    message: str = Field(min_length=1)


class AdvisoryRequest(BaseModel):
    query: str = Field(min_length=1)


class DiseaseDetectionRequest(CamelModel):
    method: str
    image_base64: Optional[str] = Field(default=None, alias="imageBase64")
    symptoms: Optional[List[Optional[str]]] = None


class CropRecommendationRequest(CamelModel):
    soil_type: str = Field(alias="soilType")
    region: Optional[str] = None
    season: str
    water_availability: str = Field(alias="waterAvailability")
    budget: float
    farm_size: float = Field(alias="farmSize")


class CustomerRecommendationRequest(CamelModel):
    customer_id: str = Field(alias="customerId", min_length=1)
