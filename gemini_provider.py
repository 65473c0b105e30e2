import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from errors import GenerationError, ModelNotFoundError, ProviderError

logger = logging.getLogger(__name__)

MODEL_NAMESPACE = 'models/'


def bare_model_id(name: str) -> str:
    """Strip the 'models/' namespace the API puts in front of model names"""
    if name.startswith(MODEL_NAMESPACE):
        return name[len(MODEL_NAMESPACE):]
    return name


@dataclass(frozen=True)
class ModelInfo:
    identifier: str
    supports_generation: bool
    display_name: str = ""


class GeminiProvider:
    """Google Gemini provider"""

    def __init__(self, api_key: str, temperature: Optional[float] = None, max_tokens: Optional[int] = None):
        genai.configure(api_key=api_key)
        self.genai = genai
        self.generation_config = {}
        if temperature is not None:
            self.generation_config["temperature"] = temperature
        if max_tokens is not None:
            self.generation_config["max_output_tokens"] = max_tokens

    def get_name(self) -> str:
        return "Gemini"

    def list_models(self) -> List[ModelInfo]:
        """Fetch the models visible to this API key. Raises ProviderError if the API is unreachable."""
        try:
            models_response = list(self.genai.list_models())
        except Exception as e:
            raise ProviderError(f"Could not list Gemini models: {e}") from e

        models = []
        for model in models_response:
            methods = getattr(model, 'supported_generation_methods', None) or []
            models.append(ModelInfo(
                identifier=bare_model_id(model.name),
                supports_generation='generateContent' in methods,
                display_name=getattr(model, 'display_name', '') or '',
            ))
        logger.info(f"✅ Gemini: Detected {len(models)} models")
        return models

    def generate(self, model_id: str, prompt_parts: Sequence[str]) -> str:
        """
        Generate text with the given model.

        Raises ModelNotFoundError if the model does not exist or is not
        available to this key, GenerationError for any other failure.
        """
        model = self.genai.GenerativeModel(
            model_id,
            generation_config=self.generation_config or None,
        )
        try:
            response = model.generate_content(list(prompt_parts))
        except google_exceptions.NotFound as e:
            raise ModelNotFoundError(str(e), model=model_id) from e
        except Exception as e:
            raise GenerationError(str(e), model=model_id) from e

        try:
            return response.text
        except ValueError as e:
            # No text parts, e.g. the candidate was blocked by safety filters
            logger.warning(f"⚠️ Gemini returned no text from {model_id}: {e}")
            return ""
