import json
import pytest
from fakes import FakeLLM, MENU_HTML, SUNDAY, TUESDAY, menu_json
from menu_publisher.llm.normalize import (
    MENU_SCHEMA,
    fallback_summary,
    normalize_allergen,
    normalize_menu,
    parse_menu,
)
from menu_publisher.core.errors import NormalizationFailure
from menu_publisher.schemas import MenuItem

class TestFallbackSummary:
    """Unit tests for the bullet summary used when pretty_text is blank"""

    def test_one_bullet_per_item(self):
        items = [
            MenuItem(title="Fiskesuppe", allergens=["fisk", "melk"]),
            MenuItem(title="Linsegryte", dietary=["vegansk"]),
        ]
        lines = fallback_summary(items).split("\n")
        assert lines == [
            "• Fiskesuppe (allergens: fisk, melk)",
            "• Linsegryte",
        ]

    def test_no_items(self):
        assert fallback_summary([]) == ""

class TestAllergenNormalization:
    @pytest.mark.parametrize("raw, expected", [
        ("Milk", "melk"),
        ("  LAKTOSE ", "melk"),
        ("wheat", "gluten"),
        ("Svoveldioksid og sulfitter", "sulfitt"),
        ("fisk", "fisk"),
        ("Koriander", "koriander"),
    ])
    def test_mapping(self, raw, expected):
        assert normalize_allergen(raw) == expected

    def test_parse_dedupes_allergens(self):
        raw = menu_json([{"title": "Pasta", "allergens": ["Wheat", "gluten", "Milk", "egg"]}])
        menu = parse_menu(raw)
        assert menu.items[0].allergens == ["gluten", "melk", "egg"]

class TestParseMenu:
    def test_fenced_response(self):
        menu = parse_menu("```json\n" + menu_json([{"title": "Taco"}], "• Taco") + "\n```")
        assert menu.items[0].title == "Taco"

    def test_extra_property_rejected(self):
        raw = json.dumps({"language": "no", "items": [], "pretty_text": "", "price": 5})
        with pytest.raises(NormalizationFailure):
            parse_menu(raw)

    def test_item_without_title_rejected(self):
        with pytest.raises(NormalizationFailure):
            parse_menu(menu_json([{"description": "uten tittel"}]))

    def test_empty_response(self):
        with pytest.raises(NormalizationFailure):
            parse_menu("   ")

class TestNormalizeMenu:
    """Unit tests for the schema-constrained normalization step"""

    def test_success_uses_pretty_text(self):
        llm = FakeLLM([menu_json([{"title": "Fish"}, {"title": "Rice"}], "• Fish\n• Rice")])
        result = normalize_menu(llm, MENU_HTML, TUESDAY)
        assert result.ok
        assert result.summary == "• Fish\n• Rice"
        assert [i.title for i in result.menu.items] == ["Fish", "Rice"]

    def test_request_shape(self):
        """Container text as input, schema attached, deterministic settings"""
        llm = FakeLLM([menu_json([], "")])
        normalize_menu(llm, MENU_HTML, TUESDAY, language="Norwegian", max_output_tokens=800)
        call = llm.calls[0]
        assert call["prompt"].startswith("Mandag\nSoup\nTirsdag")
        assert call["response_schema"] is MENU_SCHEMA
        assert call["temperature"] == 0
        assert call["max_output_tokens"] == 800
        assert "Tirsdag" in call["system_instruction"]
        assert "Norwegian" in call["system_instruction"]
        assert "Do not invent" in call["system_instruction"]

    def test_weekend_instruction(self):
        llm = FakeLLM([menu_json([], "")])
        normalize_menu(llm, MENU_HTML, SUNDAY)
        assert "weekend" in llm.calls[0]["system_instruction"]

    def test_blank_pretty_text_falls_back_to_bullets(self):
        items = [{"title": "Fish", "allergens": ["fish"]}, {"title": "Rice"}]
        llm = FakeLLM([menu_json(items, "   ")])
        result = normalize_menu(llm, MENU_HTML, TUESDAY)
        lines = result.summary.split("\n")
        assert len(lines) == 2
        assert all(line.startswith("• ") for line in lines)
        assert "Fish" in lines[0] and "fisk" in lines[0]
        assert lines[1] == "• Rice"

    def test_no_menu_today(self):
        """'ingen meny i dag' gives no items and an empty summary, not an error"""
        html = '<div class="static-container"><p>ingen meny i dag</p></div>'
        llm = FakeLLM([menu_json([], "", weekday=None)])
        result = normalize_menu(llm, html, TUESDAY)
        assert result.error is None
        assert result.menu.items == []
        assert result.summary == ""

    def test_no_menu_today_keeps_model_text(self):
        html = '<div class="static-container"><p>ingen meny i dag</p></div>'
        llm = FakeLLM([menu_json([], "Ingen meny i dag")])
        result = normalize_menu(llm, html, TUESDAY)
        assert result.summary == "Ingen meny i dag"

    def test_call_failure_is_absorbed(self):
        llm = FakeLLM(error=RuntimeError("503 Service Unavailable"))
        result = normalize_menu(llm, MENU_HTML, TUESDAY)
        assert result.summary == ""
        assert result.menu is None
        assert "503" in result.error

    def test_invalid_json_is_absorbed(self):
        llm = FakeLLM(["Here is the menu: fish and rice"])
        result = normalize_menu(llm, MENU_HTML, TUESDAY)
        assert result.summary == ""
        assert result.menu is None
        assert result.error

    def test_missing_container_skips_model(self):
        llm = FakeLLM([menu_json([{"title": "Fish"}], "• Fish")])
        result = normalize_menu(llm, "<html><body></body></html>", TUESDAY)
        assert llm.calls == []
        assert result.summary == ""
        assert result.menu is None
