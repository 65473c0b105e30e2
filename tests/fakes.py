"""In-memory fakes for the Gemini provider and the Telegram bot."""

from telegram.error import BadRequest

from errors import ModelNotFoundError
from gemini_provider import ModelInfo


class FakeProvider:
    """In-memory stand-in for GeminiProvider.

    `responses` maps a model id to the text it returns or the exception it
    raises. Unknown models raise ModelNotFoundError, like the real API.
    """

    def __init__(self, models=None, responses=None, list_error=None):
        self.models = models or []
        self.responses = responses or {}
        self.list_error = list_error
        self.calls = []
        self.list_calls = 0

    def get_name(self):
        return "Gemini"

    def list_models(self):
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.models)

    def generate(self, model_id, prompt_parts):
        self.calls.append((model_id, list(prompt_parts)))
        outcome = self.responses.get(model_id)
        if outcome is None:
            raise ModelNotFoundError(f"404 models/{model_id} is not found", model=model_id)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def called_models(self):
        return [model for model, _ in self.calls]


class FakeBot:
    """Records send_message calls in order.

    Texts listed in `reject_markup` fail with BadRequest when sent with a
    parse mode; texts in `reject_plain` also fail without one.
    """

    def __init__(self, reject_markup=(), reject_plain=()):
        self.sent = []
        self.actions = []
        self.reject_markup = set(reject_markup)
        self.reject_plain = set(reject_plain)

    async def send_message(self, chat_id, text, parse_mode=None, **kwargs):
        if parse_mode is not None and text in self.reject_markup:
            raise BadRequest("Can't parse entities: can't find end of the entity")
        if parse_mode is None and text in self.reject_plain:
            raise BadRequest("Message text is empty")
        self.sent.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})

    async def send_chat_action(self, chat_id, action):
        self.actions.append((chat_id, action))


def models(*ids, generation=True):
    return [ModelInfo(identifier=i, supports_generation=generation) for i in ids]
