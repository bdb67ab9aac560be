import pytest
from pydantic import ValidationError
from menu_publisher.schemas import MenuItem, NormalizationResult, NormalizedMenu, NotificationResult

class TestSchemaValidation:
    """Unit tests for Pydantic schema validation"""

    def test_menu_item_optional_fields(self):
        """Only title is required"""
        item = MenuItem(title="Fiskesuppe")
        assert item.description is None
        assert item.allergens == []
        assert item.dietary == []
        assert item.notes is None

    def test_menu_item_title_stripped(self):
        assert MenuItem(title="  Taco  ").title == "Taco"

    def test_menu_item_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            MenuItem(title="   ")

    def test_menu_item_extra_fields_rejected(self):
        """Additional properties are not allowed"""
        with pytest.raises(ValidationError):
            MenuItem(title="Taco", price=120)

    def test_normalized_menu_requires_fields(self):
        with pytest.raises(ValidationError):
            NormalizedMenu(language="no", items=[])

    def test_normalized_menu_from_json(self):
        menu = NormalizedMenu.model_validate_json(
            '{"language": "no", "items": [{"title": "Laks", "allergens": ["fisk"]}], "pretty_text": "• Laks"}'
        )
        assert menu.weekday is None
        assert menu.items[0].allergens == ["fisk"]

    def test_normalization_result_ok(self):
        menu = NormalizedMenu(language="no", items=[], pretty_text="")
        assert NormalizationResult(summary="", menu=menu).ok is True
        assert NormalizationResult(error="boom").ok is False

    def test_notification_result_defaults(self):
        result = NotificationResult()
        assert result.delivered is False
        assert result.channel is None
        assert result.errors == []
