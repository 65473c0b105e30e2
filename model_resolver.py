import asyncio
import logging
from typing import List, Optional, Sequence

from gemini_provider import ModelInfo, bare_model_id

logger = logging.getLogger(__name__)

# Tried after the operator's preference, in priority order
STATIC_CANDIDATES = (
    "gemini-1.5-flash",
    "gemini-1.5-flash-latest",
    "gemini-1.5-pro",
    "gemini-1.5-pro-latest",
    "gemini-1.0-pro",
)

# Last resort when the model list cannot be obtained
LEGACY_MODEL = "gemini-pro"


def build_candidates(preference: str) -> List[str]:
    return [preference] + list(STATIC_CANDIDATES)


def resolve_model(preference: str, available: Optional[Sequence[ModelInfo]]) -> str:
    """
    Pick the model to use from what the provider advertises.

    The preference comes first, then STATIC_CANDIDATES. Entries match with or
    without the 'models/' prefix. If nothing matches, the first model that
    supports generateContent wins. With no list at all, LEGACY_MODEL.
    """
    if not available:
        return LEGACY_MODEL

    advertised = {bare_model_id(m.identifier) for m in available}
    for candidate in build_candidates(bare_model_id(preference)):
        if candidate in advertised:
            return candidate

    for model in available:
        if model.supports_generation:
            return bare_model_id(model.identifier)

    return LEGACY_MODEL


class ModelState:
    """
    Process-wide model selection shared by every chat.

    Holds the operator's preference and the resolved model. All writes go
    through one asyncio.Lock; the last write wins.
    """

    def __init__(self, preference: str):
        self._preference = preference
        self._resolved: Optional[str] = None
        self._lock = asyncio.Lock()
        self._resolve_lock = asyncio.Lock()

    @property
    def preference(self) -> str:
        return self._preference

    @property
    def resolved(self) -> Optional[str]:
        return self._resolved

    async def set_preference(self, model: str):
        """Change the preference and force re-resolution"""
        async with self._lock:
            self._preference = model
            self._resolved = None
        logger.info(f"🔧 Model preference set to {model}")

    async def set_resolved(self, model: str, if_preference: Optional[str] = None) -> bool:
        """Store the resolved model. With `if_preference`, only if the preference still matches."""
        async with self._lock:
            if if_preference is not None and self._preference != if_preference:
                return False
            self._resolved = model
            return True

    async def invalidate(self, if_preference: Optional[str] = None) -> bool:
        async with self._lock:
            if if_preference is not None and self._preference != if_preference:
                return False
            self._resolved = None
            return True

    async def ensure_resolved(self, provider) -> str:
        """Return the resolved model, asking the provider for its model list if needed"""
        current = self._resolved
        if current:
            return current

        # Chats arriving together wait for a single model list fetch
        async with self._resolve_lock:
            current = self._resolved
            if current:
                return current

            preference = self._preference
            try:
                available = await asyncio.to_thread(provider.list_models)
            except Exception as e:
                logger.warning(f"⚠️ Could not fetch model list, falling back to {LEGACY_MODEL}: {e}")
                available = None

            resolved = resolve_model(preference, available)
            # A /model_* command that landed while we were listing wins; this
            # call still answers with the model resolved for the old preference
            await self.set_resolved(resolved, if_preference=preference)
        logger.info(f"✅ Resolved model: {resolved} (preference: {preference})")
        return resolved
