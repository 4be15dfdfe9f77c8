"""
Language Directory

Static table of supported language codes, their display names, and the
defaults used by message routing. Also normalizes codes into the forms the
speech provider accepts.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

ENGLISH = "en-IN"
HINDI = "hi-IN"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    native: str


_LANGUAGES: List[Language] = [
    Language("hi-IN", "Hindi", "हिन्दी"),
    Language("bn-IN", "Bengali", "বাংলা"),
    Language("ta-IN", "Tamil", "தமிழ்"),
    Language("te-IN", "Telugu", "తెలుగు"),
    Language("mr-IN", "Marathi", "मराठी"),
    Language("gu-IN", "Gujarati", "ગુજરાતી"),
    Language("kn-IN", "Kannada", "ಕನ್ನಡ"),
    Language("ml-IN", "Malayalam", "മലയാളം"),
    Language("pa-IN", "Punjabi", "ਪੰਜਾਬੀ"),
    Language("od-IN", "Odia", "ଓଡ଼ିଆ"),
    Language("en-IN", "English", "English"),
]

# or-IN is the ISO spelling; the speech provider only knows od-IN
_ALIASES = {"or-IN": "od-IN"}

_BASE_TO_REGION = {
    "hi": "hi-IN", "en": "en-IN", "bn": "bn-IN", "kn": "kn-IN", "ml": "ml-IN",
    "mr": "mr-IN", "pa": "pa-IN", "ta": "ta-IN", "te": "te-IN", "gu": "gu-IN",
    "od": "od-IN", "or": "od-IN",
}

# Codes accepted by the speech-to-text and text-to-speech endpoints
_SPEECH_CODES = frozenset(
    {UNKNOWN, "hi-IN", "bn-IN", "kn-IN", "ml-IN", "mr-IN", "od-IN",
     "pa-IN", "ta-IN", "te-IN", "en-IN", "gu-IN"}
)

# Codes accepted by the text translation endpoint
_TRANSLATE_CODES = frozenset(
    {"bn-IN", "en-IN", "gu-IN", "hi-IN", "kn-IN", "ml-IN", "mr-IN", "od-IN",
     "pa-IN", "ta-IN", "te-IN", "as-IN", "brx-IN", "doi-IN", "kok-IN", "ks-IN",
     "mai-IN", "mni-IN", "ne-IN", "sa-IN", "sat-IN", "sd-IN", "ur-IN"}
)

_SPEAKERS = {"en-IN": "meera"}
DEFAULT_SPEAKER = "anushka"

_AUDIO_EXTENSIONS = ("wav", "ogg", "webm", "mp3")


class LanguageDirectory:
    def __init__(
        self,
        reply_language: str = ENGLISH,
        default_language: str = HINDI,
        languages: Optional[List[Language]] = None,
    ):
        self.reply_language = reply_language
        self.default_language = default_language
        self._languages: Dict[str, Language] = {
            lang.code: lang for lang in (languages or _LANGUAGES)
        }

    def display_name(self, code: Optional[str]) -> str:
        """Human-readable name; unknown codes are shown as-is."""
        if not code:
            return ""
        lang = self._languages.get(_ALIASES.get(code, code))
        return lang.name if lang else code

    def get(self, code: str) -> Optional[Language]:
        return self._languages.get(_ALIASES.get(code, code))

    def languages(self) -> List[Language]:
        return list(self._languages.values())

    def is_supported(self, code: str) -> bool:
        return _ALIASES.get(code, code) in self._languages


def ensure_region_code(code: Optional[str]) -> str:
    """Region code for speech endpoints; anything unrecognized means auto-detect."""
    if not code:
        return UNKNOWN
    raw = str(code)
    lowered = raw.lower()
    if lowered in ("auto", UNKNOWN):
        return UNKNOWN
    if raw in _SPEECH_CODES:
        return raw
    return _BASE_TO_REGION.get(lowered.split("-")[0], UNKNOWN)


def to_translate_source(code: Optional[str]) -> str:
    if not code:
        return "auto"
    normalized = ensure_region_code(code)
    return normalized if normalized in _TRANSLATE_CODES else "auto"


def to_translate_target(code: Optional[str]) -> str:
    # Target must be definite; never "auto"
    normalized = ensure_region_code(code)
    return normalized if normalized in _TRANSLATE_CODES else ENGLISH


def speaker_for_language(code: Optional[str]) -> str:
    normalized = ensure_region_code(code)
    if normalized == UNKNOWN:
        normalized = HINDI
    return _SPEAKERS.get(normalized, DEFAULT_SPEAKER)


def audio_filename(mime_type: Optional[str]) -> str:
    if not mime_type:
        return "audio.webm"
    lowered = mime_type.lower()
    for ext in _AUDIO_EXTENSIONS:
        if ext in lowered:
            return f"audio.{ext}"
    return "audio.webm"


directory = LanguageDirectory()
