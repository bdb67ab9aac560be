import random
import pytest
from menu_publisher.images.prompts import PROMPT_CATALOG, select_prompt

SUMMARY = "• Fiskesuppe (allergens: fisk, melk)\n• Linsegryte"

class TestPromptSelection:
    """Unit tests for picking an image prompt template"""

    @pytest.mark.parametrize("seed", range(10))
    def test_output_is_catalog_member(self, seed):
        prompt = select_prompt(SUMMARY, random.Random(seed))
        assert prompt in [template.format(menu=SUMMARY) for template in PROMPT_CATALOG]
        assert SUMMARY in prompt

    def test_seeded_selection_is_reproducible(self):
        assert select_prompt(SUMMARY, random.Random(7)) == select_prompt(SUMMARY, random.Random(7))

    def test_all_templates_reachable(self):
        rng = random.Random(0)
        seen = {select_prompt("x", rng) for _ in range(500)}
        assert len(seen) == len(PROMPT_CATALOG)

    def test_braces_in_summary_survive(self):
        summary = "• Pasta {dagens} saus"
        assert summary in select_prompt(summary, random.Random(1))

    def test_default_rng(self):
        assert SUMMARY in select_prompt(SUMMARY)

    def test_templates_have_placeholder(self):
        assert all("{menu}" in template for template in PROMPT_CATALOG)
