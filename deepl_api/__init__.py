# DeepL API module - Thin client for the DeepL Pro REST API (v2)
# One client per account, one POST per operation, no retries

from .client import DeepL
from .errors import (
    DeepLError, ErrorKind, AuthorizationError, ServerError,
    DeserializationError, TransportError, user_message
)
from .models import (
    UsageInformation, LanguageInformation, LanguageList,
    SplitSentences, Formality, TranslationOptions,
    TranslatableTextList, TranslatedText
)

__all__ = [
    "DeepL",
    # Errors
    "DeepLError",
    "ErrorKind",
    "AuthorizationError",
    "ServerError",
    "DeserializationError",
    "TransportError",
    "user_message",
    # Models
    "UsageInformation",
    "LanguageInformation",
    "LanguageList",
    "SplitSentences",
    "Formality",
    "TranslationOptions",
    "TranslatableTextList",
    "TranslatedText",
]
