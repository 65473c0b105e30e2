import logging
from dataclasses import dataclass
from typing import List, Sequence, Union

from telegram.constants import ParseMode
from telegram.error import BadRequest

from config import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutboundChunk:
    index: int
    text: str
    rich_text: bool


def chunk_text(text: str, max_size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
    """Split text into consecutive slices of at most max_size characters.

    Joining the result gives back the original text. Splits may fall mid-word.
    """
    if max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")
    return [text[i:i + max_size] for i in range(0, len(text), max_size)]


async def dispatch_chunks(
    bot,
    chat_id: Union[int, str],
    chunks: Sequence[str],
    parse_mode: str = ParseMode.MARKDOWN,
) -> List[OutboundChunk]:
    """
    Send chunks one after another, in order.

    Each chunk is tried with `parse_mode` first. If Telegram cannot parse the
    markup, that chunk is resent once as plain text. A failed plain retry
    propagates.
    """
    delivered = []
    for index, chunk in enumerate(chunks):
        try:
            await bot.send_message(chat_id=chat_id, text=chunk, parse_mode=parse_mode)
            delivered.append(OutboundChunk(index=index, text=chunk, rich_text=True))
        except BadRequest as e:
            logger.warning(f"⚠️ {parse_mode} rejected for chunk {index + 1}/{len(chunks)}, sending plain text: {e}")
            await bot.send_message(chat_id=chat_id, text=chunk)
            delivered.append(OutboundChunk(index=index, text=chunk, rich_text=False))
    return delivered
