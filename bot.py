import asyncio
import logging

from telegram import Update
from telegram.constants import ChatAction
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from config import Settings, load_settings
from delivery import chunk_text, dispatch_chunks
from errors import GenerationError, ProviderError
from gemini_provider import GeminiProvider
from generation import generate_with_fallback
from model_resolver import ModelState

logger = logging.getLogger(__name__)

FLASH_MODEL = 'gemini-1.5-flash'
PRO_MODEL = 'gemini-1.5-pro'

EMPTY_RESPONSE_TEXT = "Sorry, I got no response. Please try again."


# ============================================================================
# COMMAND HANDLERS
# ============================================================================

async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Send a message when the command /start is issued."""
    state: ModelState = context.bot_data["model_state"]

    await update.message.reply_text(
        "Hello! 🤖\n"
        "I'm an AI bot powered by Google Gemini.\n\n"
        "Send me any question or topic and I'll answer it.\n"
        f"Current model: {state.preference}\n"
        f"Resolved model: {state.resolved or 'not resolved yet'}\n\n"
        "Commands:\n"
        f"/model_flash - use {FLASH_MODEL} (faster)\n"
        f"/model_pro - use {PRO_MODEL} (smarter, may be slower)\n"
        "/models - list models available to this bot\n"
    )


async def _switch_model(update: Update, context: ContextTypes.DEFAULT_TYPE, model: str):
    state: ModelState = context.bot_data["model_state"]
    await state.set_preference(model)
    await update.message.reply_text(f"Model set to {model} ✅\nGo ahead and send your message.")


async def model_flash(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Switch the preferred model to Flash."""
    await _switch_model(update, context, FLASH_MODEL)


async def model_pro(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Switch the preferred model to Pro."""
    await _switch_model(update, context, PRO_MODEL)


async def models_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """List models that support text generation."""
    provider: GeminiProvider = context.bot_data["provider"]
    state: ModelState = context.bot_data["model_state"]
    settings: Settings = context.bot_data["settings"]

    try:
        models = await asyncio.to_thread(provider.list_models)
    except ProviderError as e:
        logger.warning(f"⚠️ /models failed: {e}")
        await update.message.reply_text(f"❌ Could not fetch models: {e}")
        return

    current = state.resolved or state.preference
    lines = [
        f"• {m.identifier}" + (" ✓" if m.identifier == current else "")
        for m in models if m.supports_generation
    ]
    if not lines:
        await update.message.reply_text("❌ No models with text generation support are available.")
        return

    listing = f"🤖 {provider.get_name()} models:\n\n" + "\n".join(lines) + f"\n\nCurrent: {current}"
    for part in chunk_text(listing, settings.max_chunk_size):
        await update.message.reply_text(part)


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle incoming messages."""
    message = update.message
    if message is None:
        return
    text = (message.text or '').strip()

    # Commands are handled by their own handlers
    if not text or text.startswith('/'):
        return

    chat_id = update.effective_chat.id
    provider: GeminiProvider = context.bot_data["provider"]
    state: ModelState = context.bot_data["model_state"]
    settings: Settings = context.bot_data["settings"]

    try:
        await context.bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)
    except TelegramError as e:
        logger.debug(f"Typing indicator failed for chat {chat_id}: {e}")

    model = None
    try:
        model = await state.ensure_resolved(provider)
        result = await generate_with_fallback(provider, state, model, [settings.system_prompt, text])
    except GenerationError as e:
        logger.error(f"❌ AI error for chat {chat_id}: {e}")
        await context.bot.send_message(chat_id=chat_id, text=format_generation_error(e, model))
        return

    output = result.text or EMPTY_RESPONSE_TEXT
    await dispatch_chunks(context.bot, chat_id, chunk_text(output, settings.max_chunk_size))


def format_generation_error(error: GenerationError, model=None) -> str:
    model_name = error.model or model or "unknown model"
    return (
        f"❌ Error with Gemini ({model_name}): {error}\n\n"
        f"Try:\n"
        f"• /model_flash to switch to {FLASH_MODEL}\n"
        f"• /model_pro to switch to {PRO_MODEL}"
    )


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Log errors raised by handlers so polling keeps going for other chats."""
    logger.error("Exception while handling an update:", exc_info=context.error)


# ============================================================================
# APPLICATION
# ============================================================================

def build_application(settings: Settings, provider=None) -> Application:
    """Create the Application with handlers and shared state registered."""
    if provider is None:
        provider = GeminiProvider(
            settings.google_api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    application = (
        Application.builder()
        .token(settings.telegram_token)
        .concurrent_updates(True)
        .build()
    )
    application.bot_data["settings"] = settings
    application.bot_data["provider"] = provider
    application.bot_data["model_state"] = ModelState(settings.preferred_model)

    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("model_flash", model_flash))
    application.add_handler(CommandHandler("model_pro", model_pro))
    application.add_handler(CommandHandler("models", models_command))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))
    application.add_error_handler(error_handler)
    return application


def main():
    """Start the bot."""
    settings = load_settings()

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, settings.log_level, logging.INFO)
    )
    # httpx logs every request URL, which contains the bot token
    logging.getLogger("httpx").setLevel(logging.WARNING)

    application = build_application(settings)

    logger.info("🚀 Gemini Telegram Bot started!")
    logger.info(f"🤖 Preferred model: {settings.preferred_model}")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == '__main__':
    main()
