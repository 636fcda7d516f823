SOURCE_LANGUAGE = "en"

# Region-specific codes used by the app, checked before the two-letter map
APP_LANGUAGES = {
    "zh-CN": "Chinese (Simplified)",
    "zh-HK": "Chinese (Traditional, Hong Kong)",
    "zh-TW": "Chinese (Traditional)",
    "pt-BR": "Brazilian Portuguese",
}

LANGUAGES = {
    "ar": "Arabic",
    "bg": "Bulgarian",
    "bn": "Bengali",
    "ca": "Catalan",
    "cs": "Czech",
    "da": "Danish",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "es": "Spanish",
    "et": "Estonian",
    "fa": "Persian",
    "fi": "Finnish",
    "fr": "French",
    "he": "Hebrew",
    "hi": "Hindi",
    "hr": "Croatian",
    "hu": "Hungarian",
    "id": "Indonesian",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "ms": "Malay",
    "nb": "Norwegian Bokmål",
    "nl": "Dutch",
    "pl": "Polish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "sk": "Slovak",
    "sl": "Slovenian",
    "sr": "Serbian",
    "sv": "Swedish",
    "sw": "Swahili",
    "ta": "Tamil",
    "th": "Thai",
    "tl": "Filipino",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "zh": "Chinese",
}


def get_language_name(folder_name: str) -> str | None:
    """
    Map a catalog's folder name to a language name.

    Returns None for the source language and for codes we do not know.
    """
    code = folder_name.replace("_", "-")
    if code == SOURCE_LANGUAGE:
        return None
    if code in APP_LANGUAGES:
        return APP_LANGUAGES[code]
    return LANGUAGES.get(code)
