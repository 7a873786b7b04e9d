from agri_ai.utils.json_parser import (
    ParseFailure,
    coerce_number,
    coerce_str,
    coerce_str_list,
    extract_json_object,
)


class TestExtractJsonObject:

    def test_plain_json(self):
        assert extract_json_object('{"isPlant": true}') == {"isPlant": True}

    def test_code_fence(self):
        text = 'Here you go:\n```json\n{"disease_name": "Rust", "symptoms": ["spots"]}\n```'
        assert extract_json_object(text) == {"disease_name": "Rust", "symptoms": ["spots"]}

    def test_nested_objects_use_last_brace(self):
        text = 'Result {"a": {"b": 1}, "c": [{"d": 2}]} done'
        assert extract_json_object(text) == {"a": {"b": 1}, "c": [{"d": 2}]}

    def test_trailing_commas_repaired(self):
        assert extract_json_object('{"a": [1, 2,], "b": 3,}') == {"a": [1, 2], "b": 3}

    def test_no_object(self):
        result = extract_json_object("I cannot analyze this image.")
        assert isinstance(result, ParseFailure)
        assert not result

    def test_invalid_json(self):
        result = extract_json_object("{isPlant: maybe}")
        assert isinstance(result, ParseFailure)
        assert result.raw_text == "{isPlant: maybe}"

    def test_empty(self):
        assert isinstance(extract_json_object(""), ParseFailure)
        assert isinstance(extract_json_object(None), ParseFailure)


class TestCoercion:

    def test_coerce_str(self):
        assert coerce_str("  Rust ") == "Rust"
        assert coerce_str("", "fallback") == "fallback"
        assert coerce_str(None, "fallback") == "fallback"
        assert coerce_str(70) == "70"
        assert coerce_str(["x"], "fallback") == "fallback"

    def test_coerce_str_list(self):
        assert coerce_str_list(["a", " b ", "", None, 3]) == ["a", "b", "3"]
        assert coerce_str_list("a, b") == []

    def test_coerce_number(self):
        assert coerce_number(70) == 70.0
        assert coerce_number("58%") == 58.0
        assert coerce_number("high") is None
        assert coerce_number(True) is None
