"""
Language registry.

A fixed catalog of the languages a backend can translate into. Codes follow
the BCP-47 style used by the translation services (``zh-CN``, ``pt-BR``);
:func:`resources.values.values_directory_name` turns them into Android
resource qualifiers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from errors import UnsupportedLanguageError


@dataclass(frozen=True, slots=True)
class Lang:
    code: str
    english_name: str
    local_name: str

    @property
    def primary(self) -> str:
        return self.code.split("-")[0]

    @property
    def region(self) -> str | None:
        parts = self.code.split("-")
        return parts[1] if len(parts) > 1 else None


AUTO = Lang("auto", "Auto", "Auto")

LANGUAGES: tuple[Lang, ...] = (
    Lang("af", "Afrikaans", "Afrikaans"),
    Lang("sq", "Albanian", "Shqip"),
    Lang("am", "Amharic", "አማርኛ"),
    Lang("ar", "Arabic", "العربية"),
    Lang("hy", "Armenian", "Հայերեն"),
    Lang("az", "Azerbaijani", "Azərbaycan"),
    Lang("eu", "Basque", "Euskara"),
    Lang("be", "Belarusian", "Беларуская"),
    Lang("bn", "Bengali", "বাংলা"),
    Lang("bs", "Bosnian", "Bosanski"),
    Lang("bg", "Bulgarian", "Български"),
    Lang("ca", "Catalan", "Català"),
    Lang("zh-CN", "Chinese Simplified", "简体中文"),
    Lang("zh-TW", "Chinese Traditional", "繁體中文"),
    Lang("hr", "Croatian", "Hrvatski"),
    Lang("cs", "Czech", "Čeština"),
    Lang("da", "Danish", "Dansk"),
    Lang("nl", "Dutch", "Nederlands"),
    Lang("en", "English", "English"),
    Lang("et", "Estonian", "Eesti"),
    Lang("fil", "Filipino", "Filipino"),
    Lang("fi", "Finnish", "Suomi"),
    Lang("fr", "French", "Français"),
    Lang("gl", "Galician", "Galego"),
    Lang("ka", "Georgian", "ქართული"),
    Lang("de", "German", "Deutsch"),
    Lang("el", "Greek", "Ελληνικά"),
    Lang("gu", "Gujarati", "ગુજરાતી"),
    Lang("iw", "Hebrew", "עברית"),
    Lang("hi", "Hindi", "हिन्दी"),
    Lang("hu", "Hungarian", "Magyar"),
    Lang("is", "Icelandic", "Íslenska"),
    Lang("in", "Indonesian", "Bahasa Indonesia"),
    Lang("it", "Italian", "Italiano"),
    Lang("ja", "Japanese", "日本語"),
    Lang("kn", "Kannada", "ಕನ್ನಡ"),
    Lang("kk", "Kazakh", "Қазақ"),
    Lang("km", "Khmer", "ខ្មែរ"),
    Lang("ko", "Korean", "한국어"),
    Lang("lo", "Lao", "ລາວ"),
    Lang("lv", "Latvian", "Latviešu"),
    Lang("lt", "Lithuanian", "Lietuvių"),
    Lang("mk", "Macedonian", "Македонски"),
    Lang("ms", "Malay", "Bahasa Melayu"),
    Lang("ml", "Malayalam", "മലയാളം"),
    Lang("mr", "Marathi", "मराठी"),
    Lang("mn", "Mongolian", "Монгол"),
    Lang("my", "Myanmar", "မြန်မာ"),
    Lang("ne", "Nepali", "नेपाली"),
    Lang("nb", "Norwegian", "Norsk bokmål"),
    Lang("fa", "Persian", "فارسی"),
    Lang("pl", "Polish", "Polski"),
    Lang("pt", "Portuguese", "Português"),
    Lang("pt-BR", "Portuguese Brazil", "Português (Brasil)"),
    Lang("pa", "Punjabi", "ਪੰਜਾਬੀ"),
    Lang("ro", "Romanian", "Română"),
    Lang("ru", "Russian", "Русский"),
    Lang("sr", "Serbian", "Српски"),
    Lang("si", "Sinhala", "සිංහල"),
    Lang("sk", "Slovak", "Slovenčina"),
    Lang("sl", "Slovenian", "Slovenščina"),
    Lang("es", "Spanish", "Español"),
    Lang("sw", "Swahili", "Kiswahili"),
    Lang("sv", "Swedish", "Svenska"),
    Lang("ta", "Tamil", "தமிழ்"),
    Lang("te", "Telugu", "తెలుగు"),
    Lang("th", "Thai", "ไทย"),
    Lang("tr", "Turkish", "Türkçe"),
    Lang("uk", "Ukrainian", "Українська"),
    Lang("ur", "Urdu", "اردو"),
    Lang("uz", "Uzbek", "Oʻzbek"),
    Lang("vi", "Vietnamese", "Tiếng Việt"),
    Lang("zu", "Zulu", "isiZulu"),
)

_BY_CODE: Dict[str, Lang] = {lang.code: lang for lang in (AUTO, *LANGUAGES)}
_BY_LOWER_CODE: Dict[str, Lang] = {code.lower(): lang for code, lang in _BY_CODE.items()}


def get_languages() -> List[Lang]:
    return list(LANGUAGES)


def get_language(code: str) -> Lang:
    lang = _BY_CODE.get(code) or _BY_LOWER_CODE.get(code.strip().lower())
    if lang is None:
        raise UnsupportedLanguageError(code)
    return lang


def find_languages(codes: Iterable[str]) -> List[Lang]:
    """Resolve codes to languages, dropping duplicates but keeping order."""
    resolved: List[Lang] = []
    for code in codes:
        lang = get_language(code)
        if lang not in resolved:
            resolved.append(lang)
    return resolved


def sort_by_english_name(languages: Iterable[Lang]) -> List[Lang]:
    return sorted(languages, key=lambda lang: lang.english_name)
