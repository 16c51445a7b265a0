"""
DeepL Data Models
-----------------
Immutable request and response records for the v2 REST API.

Request records know how to turn themselves into wire parameters,
response records know how to validate and build themselves from JSON.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from .errors import DeserializationError


Param = Tuple[str, str]


def _require_str(payload: Any, key: str) -> str:
    if not isinstance(payload, dict):
        raise DeserializationError(f"expected an object, got {type(payload).__name__}")
    if key not in payload:
        raise DeserializationError(f"missing field '{key}'")
    value = payload[key]
    if not isinstance(value, str):
        raise DeserializationError(f"field '{key}' is not a string")
    return value


def _require_count(payload: Any, key: str) -> int:
    if not isinstance(payload, dict):
        raise DeserializationError(f"expected an object, got {type(payload).__name__}")
    if key not in payload:
        raise DeserializationError(f"missing field '{key}'")
    value = payload[key]
    # bool is an int subclass; JSON true/false is not a counter
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DeserializationError(f"field '{key}' is not a non-negative integer")
    return value


class SplitSentences(Enum):
    """Controls how the input is split into sentences before translating."""
    NONE = "0"
    PUNCTUATION = "nonewlines"
    PUNCTUATION_AND_NEWLINES = "1"


class Formality(Enum):
    """Whether the translation should lean towards formal or informal language."""
    DEFAULT = "default"
    MORE = "more"
    LESS = "less"


@dataclass(frozen=True)
class TranslationOptions:
    """
    Optional translation flags.

    A field left as None sends no parameter, so the server default applies.
    """
    split_sentences: Optional[SplitSentences] = None
    preserve_formatting: Optional[bool] = None
    formality: Optional[Formality] = None

    def to_params(self) -> List[Param]:
        params: List[Param] = []
        if self.split_sentences is not None:
            params.append(("split_sentences", self.split_sentences.value))
        if self.preserve_formatting is not None:
            params.append(("preserve_formatting", "1" if self.preserve_formatting else "0"))
        if self.formality is not None:
            params.append(("formality", self.formality.value))
        return params


@dataclass(frozen=True)
class TranslatableTextList:
    """Texts to translate into one target language."""
    target_language: str
    texts: Sequence[str] = field(default_factory=tuple)
    source_language: Optional[str] = None  # Auto-detected by DeepL if None

    def to_params(self) -> List[Param]:
        params: List[Param] = [("target_lang", self.target_language)]
        if self.source_language is not None:
            params.append(("source_lang", self.source_language))
        params.extend(("text", text) for text in self.texts)
        return params


@dataclass(frozen=True)
class TranslatedText:
    """One translated text, paired with the source language DeepL used."""
    detected_source_language: str
    text: str

    @classmethod
    def from_dict(cls, payload: Any) -> "TranslatedText":
        return cls(
            detected_source_language=_require_str(payload, "detected_source_language"),
            text=_require_str(payload, "text"),
        )

    @classmethod
    def list_from_response(cls, payload: Any) -> List["TranslatedText"]:
        """Decode the ``{"translations": [...]}`` envelope of /translate."""
        if not isinstance(payload, dict) or "translations" not in payload:
            raise DeserializationError("missing field 'translations'")
        translations = payload["translations"]
        if not isinstance(translations, list):
            raise DeserializationError("field 'translations' is not a list")
        return [cls.from_dict(item) for item in translations]


@dataclass(frozen=True)
class LanguageInformation:
    """A language DeepL supports, e.g. ``EN-US`` / ``English (American)``."""
    language: str
    name: str

    @classmethod
    def from_dict(cls, payload: Any) -> "LanguageInformation":
        return cls(
            language=_require_str(payload, "language"),
            name=_require_str(payload, "name"),
        )

    @classmethod
    def list_from_response(cls, payload: Any) -> List["LanguageInformation"]:
        if not isinstance(payload, list):
            raise DeserializationError("expected a list of languages")
        return [cls.from_dict(item) for item in payload]


LanguageList = List[LanguageInformation]


@dataclass(frozen=True)
class UsageInformation:
    """Characters translated so far in the billing period, and the limit."""
    character_limit: int
    character_count: int

    @classmethod
    def from_dict(cls, payload: Any) -> "UsageInformation":
        return cls(
            character_limit=_require_count(payload, "character_limit"),
            character_count=_require_count(payload, "character_count"),
        )
