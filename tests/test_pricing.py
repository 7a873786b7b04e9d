"""
Unit tests for static treatment pricing:
  - price lookup (exact first, then substring)
  - dosage cost calculation (liquid ml/L heuristic, powder g/kg)
  - treatment enrichment (financial field stripping)
"""
import pytest

from agri_ai.models import PriceEntry, ProductKind
from agri_ai.services.pricing import (
    PRICE_TABLE,
    calculate_cost,
    enrich_treatments,
    lookup_price,
    parse_dosage_value,
    strip_price_fields,
)

LIQUID = PRICE_TABLE["Chlorothalonil"]  # 900 / L
POWDER = PRICE_TABLE["Mancozeb"]  # 350 / kg


class TestLookupPrice:

    @pytest.mark.parametrize("name", ["Urea", "urea", "UREA", "  Urea  "])
    def test_exact_match_any_case(self, name):
        assert lookup_price(name) is PRICE_TABLE["Urea"]

    def test_exact_match_not_shadowed_by_substring(self):
        """'Mancozeb Fungicide' contains 'Mancozeb' but has its own exact entry"""
        assert lookup_price("mancozeb fungicide") is PRICE_TABLE["Mancozeb Fungicide"]

    def test_table_key_inside_name(self):
        assert lookup_price("Spinosad 45% SC") is PRICE_TABLE["Spinosad"]

    def test_name_inside_table_key(self):
        assert lookup_price("Neem") is PRICE_TABLE["Neem Oil"]
        assert lookup_price("Potash") is PRICE_TABLE["Potash (MOP)"]

    def test_ambiguous_substring_takes_first_in_table_order(self):
        assert lookup_price("Mancozeb 75% WP") is PRICE_TABLE["Mancozeb"]

    @pytest.mark.parametrize("name", ["Unobtainium", "", "   ", None])
    def test_not_found(self, name):
        assert lookup_price(name) is None

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            PRICE_TABLE["Urea"] = PriceEntry(kind=ProductKind.POWDER, price_per_kg=1)


class TestParseDosageValue:

    def test_first_number(self):
        assert parse_dosage_value("500 ml per acre") == 500
        assert parse_dosage_value("apply 2.5 kg in 200 L water") == 2.5
        assert parse_dosage_value(2.5) == 2.5

    def test_no_number(self):
        assert parse_dosage_value("as needed") is None
        assert parse_dosage_value(None) is None


class TestCalculateCostLiquid:

    def test_millilitres(self):
        cost = calculate_cost("500 ml per acre", LIQUID)
        assert cost.total_cost == 450
        assert cost.unit_price == 900
        assert cost.required_quantity == "500 ml"
        assert cost.currency == "INR"

    def test_small_value_with_ml_unit_uses_ml(self):
        cost = calculate_cost("9 ml", LIQUID)
        assert cost.total_cost == 8.1
        assert cost.required_quantity == "9 ml"

    @pytest.mark.parametrize("dosage", ["2 liters", "2 litre per acre", "2 L per acre", "2l"])
    def test_litres(self, dosage):
        cost = calculate_cost(dosage, LIQUID)
        assert cost.total_cost == 1800
        assert cost.required_quantity == "2 L"

    @pytest.mark.parametrize("dosage, total, quantity", [
        ("15 ltr per acre", 13500, "15 L"),
        ("20 lit", 18000, "20 L"),
        ("12 lt/acre", 10800, "12 L"),
        ("10 ltrs", 9000, "10 L"),
    ])
    def test_litre_abbreviations(self, dosage, total, quantity):
        cost = calculate_cost(dosage, LIQUID)
        assert cost.total_cost == total
        assert cost.required_quantity == quantity

    def test_spelled_out_millilitres(self):
        cost = calculate_cost("500 millilitres", LIQUID)
        assert cost.total_cost == 450
        assert cost.required_quantity == "500 ml"

    def test_no_unit_boundary_is_inclusive_at_ten(self):
        cost = calculate_cost("10", LIQUID)
        assert cost.total_cost == 9
        assert cost.required_quantity == "10 ml"

    def test_no_unit_below_ten_is_litres(self):
        cost = calculate_cost("9.9", LIQUID)
        assert cost.total_cost == 8910
        assert cost.required_quantity == "9.9 L"

    def test_no_unit_large_value_is_millilitres(self):
        cost = calculate_cost("250", LIQUID)
        assert cost.total_cost == 225
        assert cost.required_quantity == "250 ml"

    def test_word_containing_l_is_not_a_unit(self):
        """'per plant' must not switch to litres"""
        cost = calculate_cost("20 per plant", LIQUID)
        assert cost.required_quantity == "20 ml"


class TestCalculateCostPowder:

    def test_no_unit_defaults_to_kilograms(self):
        cost = calculate_cost("2.5", POWDER)
        assert cost.total_cost == 875
        assert cost.required_quantity == "2.5 kg"

    def test_no_unit_large_value_still_kilograms(self):
        cost = calculate_cost("30", POWDER)
        assert cost.total_cost == 10500
        assert cost.required_quantity == "30 kg"

    @pytest.mark.parametrize("dosage", ["250 g per acre", "250 grams", "250g", "250 gm per acre", "250gms", "250 gram/acre"])
    def test_grams(self, dosage):
        cost = calculate_cost(dosage, POWDER)
        assert cost.total_cost == 87.5
        assert cost.required_quantity == "250 g"

    @pytest.mark.parametrize("dosage", ["2 kg per acre", "2 kilograms", "2 kilo"])
    def test_kilograms(self, dosage):
        cost = calculate_cost(dosage, POWDER)
        assert cost.total_cost == 700
        assert cost.required_quantity == "2 kg"

    def test_urea(self):
        cost = calculate_cost("50 kg per acre", PRICE_TABLE["Urea"])
        assert cost.total_cost == 400
        assert cost.unit_price == 8
        assert cost.required_quantity == "50 kg"

    def test_rounds_to_two_decimals(self):
        cost = calculate_cost("333 g", PRICE_TABLE["Urea"])
        assert cost.total_cost == 2.66


class TestCalculateCostFailures:

    @pytest.mark.parametrize("dosage", ["as needed", "0 kg", "0", "", None])
    def test_unusable_dosage(self, dosage):
        assert calculate_cost(dosage, POWDER) is None

    def test_missing_entry(self):
        assert calculate_cost("2 kg", None) is None

    def test_kind_price_mismatch(self):
        entry = PriceEntry(kind=ProductKind.LIQUID, price_per_kg=100)
        assert calculate_cost("2 L", entry) is None


class TestEnrichTreatments:

    def test_hallucinated_financial_fields_are_discarded(self):
        suggestion = {
            "name": "Urea",
            "dosagePerAcre": "50 kg per acre",
            "price": 99999,
            "pricePerUnit": 77777,
            "totalCost": 12345,
            "unitPrice": 1,
            "currency": "USD",
            "savings": 555,
            "estimatedProfit": 4444,
            "revenue": 3333,
        }
        [treatment] = enrich_treatments([suggestion])
        wire = treatment.to_wire()

        assert wire["totalCost"] == 400
        assert wire["unitPrice"] == 8
        assert wire["currency"] == "INR"
        for value in (99999, 77777, 12345, 555, 4444, 3333, "USD"):
            assert value not in wire.values()
        assert "price" not in wire and "savings" not in wire

    def test_unknown_product(self):
        [treatment] = enrich_treatments([{"name": "Unobtainium", "dosagePerAcre": "5 kg"}])
        assert treatment.to_wire() == {
            "product": "Unobtainium",
            "dosagePerAcre": "5 kg",
            "description": "",
            "unitPrice": None,
            "totalCost": None,
            "requiredQuantity": "5 kg",
            "currency": "INR",
            "pricingAvailable": False,
        }

    def test_falls_back_to_dosage_field(self):
        [treatment] = enrich_treatments([{"name": "Urea", "dosage": "10 kg"}])
        assert treatment.dosage_per_acre == "10 kg"
        assert treatment.total_cost == 80

    def test_missing_dosage_is_unpriced(self):
        [treatment] = enrich_treatments([{"name": "Urea", "description": "Top dress"}])
        assert treatment.pricing_available is False
        assert treatment.required_quantity == "0"
        assert treatment.description == "Top dress"

    def test_numeric_dosage(self):
        [treatment] = enrich_treatments([{"name": "Mancozeb", "dosagePerAcre": 2.5}])
        assert treatment.dosage_per_acre == "2.5"
        assert treatment.total_cost == 875

    def test_order_is_preserved_and_junk_skipped(self):
        treatments = enrich_treatments([
            {"name": "Neem Oil", "dosagePerAcre": "1 L"},
            "spray something",
            {"name": "DAP", "dosagePerAcre": "50 kg"},
        ])
        assert [t.product for t in treatments] == ["Neem Oil", "DAP"]
        assert [t.total_cost for t in treatments] == [400, 1350]

    @pytest.mark.parametrize("value", [None, [], {}, "Urea", 42])
    def test_non_list_or_empty_input(self, value):
        assert enrich_treatments(value) == []

    def test_strip_price_fields_keeps_other_fields(self):
        clean = strip_price_fields({"name": "Urea", "cost": 1, "unit_price": 2, "note": "x"})
        assert clean == {"name": "Urea", "note": "x"}
