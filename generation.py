import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence

from errors import ErrorKind, GenerationError
from model_resolver import ModelState

logger = logging.getLogger(__name__)

# Tried in order when the selected model turns out not to exist
FALLBACK_MODELS = (
    "gemini-1.5-flash",
    "gemini-1.5-flash-8b",
    "gemini-pro",
)


class CallState(Enum):
    RESOLVED = "resolved"
    CALLING = "calling"
    FAILED_RETRY = "failed_retry"
    DONE = "done"
    FAILED_FATAL = "failed_fatal"


@dataclass
class GenerationResult:
    text: str
    model: str
    state: CallState = CallState.DONE
    attempts: List[str] = field(default_factory=list)


async def generate_with_fallback(
    provider,
    state: ModelState,
    model: str,
    prompt_parts: Sequence[str],
    fallback_models: Sequence[str] = FALLBACK_MODELS,
) -> GenerationResult:
    """
    Call the provider with `model`, falling back on a not-found error.

    A not-found failure invalidates the resolved model and tries each entry
    of `fallback_models` (skipping models already tried). The first success
    becomes the new resolved model unless the operator changed the
    preference in the meantime. Any other failure, or running out of
    fallbacks, re-raises the original GenerationError.
    """
    call_state = CallState.RESOLVED
    attempts = [model]
    preference = state.preference
    logger.debug(f"Generating with {model} ({call_state.value})")

    call_state = CallState.CALLING
    try:
        text = await asyncio.to_thread(provider.generate, model, prompt_parts)
        return GenerationResult(text=text, model=model, attempts=attempts)
    except GenerationError as e:
        if e.kind is not ErrorKind.NOT_FOUND:
            call_state = CallState.FAILED_FATAL
            logger.error(f"❌ Generation with {model} failed ({call_state.value}): {e}")
            raise
        original_error = e

    call_state = CallState.FAILED_RETRY
    logger.warning(f"⚠️ Model {model} not found, trying fallbacks: {', '.join(fallback_models)}")
    await state.invalidate(if_preference=preference)

    for candidate in fallback_models:
        if candidate in attempts:
            continue
        attempts.append(candidate)
        try:
            text = await asyncio.to_thread(provider.generate, candidate, prompt_parts)
        except GenerationError as e:
            logger.warning(f"⚠️ Fallback {candidate} failed ({e.kind.value}): {e}")
            continue
        if await state.set_resolved(candidate, if_preference=preference):
            logger.info(f"✅ Fell back from {model} to {candidate}")
        else:
            logger.info(f"✅ Fell back from {model} to {candidate} (preference changed, not stored)")
        return GenerationResult(text=text, model=candidate, attempts=attempts)

    call_state = CallState.FAILED_FATAL
    logger.error(f"❌ All fallback models failed after {model} ({call_state.value}): {original_error}")
    raise original_error
