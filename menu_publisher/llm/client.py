import copy
from typing import Any, Dict, Optional

from menu_publisher.core.logging import get_logger

logger = get_logger(__name__)

# Keys of JSON Schema that Gemini's response_schema (an OpenAPI subset) rejects.
_UNSUPPORTED_SCHEMA_KEYS = ("additionalProperties", "$schema", "title", "default")


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a JSON Schema dict into the subset Gemini accepts.

    Unsupported keywords are dropped and type names upper-cased. The dropped
    constraints are enforced again when the response is parsed.
    """
    def convert(node: Any) -> Any:
        if isinstance(node, dict):
            out = {}
            for key, value in node.items():
                if key in _UNSUPPORTED_SCHEMA_KEYS:
                    continue
                if key == "type" and isinstance(value, str):
                    out[key] = value.upper()
                elif key == "properties":
                    out[key] = {name: convert(prop) for name, prop in value.items()}
                else:
                    out[key] = convert(value)
            return out
        if isinstance(node, list):
            return [convert(v) for v in node]
        return node

    return convert(copy.deepcopy(schema))


def strip_code_fences(text: str) -> str:
    """Remove a ```json ... ``` wrapper some models add around JSON."""
    content = (text or "").strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


class GeminiClient:
    """Thin wrapper around google-generativeai so pipeline code only sees `generate`."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.0-flash"):
        if not api_key:
            raise ValueError("GOOGLE_API_KEY not set")

        try:
            import google.generativeai as genai  # lazy import to allow tests without package
        except Exception as e:
            raise ImportError("google-generativeai package is required to use Gemini client") from e

        genai.configure(api_key=api_key)
        self._genai = genai
        self.model_name = model_name

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        config: Dict[str, Any] = {}
        if max_output_tokens is not None:
            config["max_output_tokens"] = max_output_tokens
        if temperature is not None:
            config["temperature"] = temperature
        if response_schema is not None:
            config["response_mime_type"] = "application/json"
            config["response_schema"] = to_gemini_schema(response_schema)

        model = self._genai.GenerativeModel(self.model_name, system_instruction=system_instruction)
        logger.debug("Gemini request: model=%s prompt_len=%d", self.model_name, len(prompt))
        response = model.generate_content(
            prompt,
            generation_config=self._genai.GenerationConfig(**config),
        )

        if not response.text:
            raise ValueError("Empty response from Gemini")
        return response.text
