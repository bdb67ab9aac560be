import random
from typing import Optional

# Each template takes the menu summary as {menu}. The image model must not
# render text, so every template says so.
PROMPT_CATALOG = [
    (
        "Create a visually appealing image with no text that represents the following cafeteria menu:\n{menu}"
    ),
    (
        "Overhead food photography of a bright Scandinavian cafeteria lunch, natural window light, "
        "light wooden table, linen napkins, shallow depth of field. No text, letters or labels. "
        "The dishes served today:\n{menu}"
    ),
    (
        "Warm, cozy close-up of today's lunch plated in rustic ceramic bowls, soft golden-hour light, "
        "steam rising, photorealistic, 50mm lens. Do not include any writing. Menu:\n{menu}"
    ),
    (
        "Editorial magazine-style photo of a modern office canteen buffet, clean minimal styling, "
        "soft diffused studio lighting, muted Nordic colors, no people, no text. Serving:\n{menu}"
    ),
    (
        "Moody dark-background still life of the following dishes, dramatic side lighting, "
        "rich textures, fine-dining presentation, no text or signage:\n{menu}"
    ),
    (
        "Cheerful, colorful flat-lay of a lunch tray seen from above, playful arrangement, "
        "crisp daylight, vibrant but realistic colors, absolutely no text. Dishes:\n{menu}"
    ),
    (
        "Watercolor illustration of a Norwegian cafeteria lunch table, loose brush strokes, "
        "pastel palette, airy and calm mood, no lettering. Illustrate these dishes:\n{menu}"
    ),
]


def select_prompt(summary: str, rng: Optional[random.Random] = None) -> str:
    """Pick one template uniformly at random and fill in the menu summary."""
    rng = rng or random.Random()
    template = rng.choice(PROMPT_CATALOG)
    return template.format(menu=summary)
