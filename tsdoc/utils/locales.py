from __future__ import annotations

"""Windows locale identifiers (LCIDs) -> display names.

Covers the languages Windows ships as OS display languages; anything else
falls back to the POSIX tag known to :data:`locale.windows_locale`.
"""

import locale

__all__ = ["lcid_display_name"]

_DISPLAY_NAMES = {
    1025: "Arabic (Saudi Arabia)",
    1026: "Bulgarian (Bulgaria)",
    1027: "Catalan (Catalan)",
    1028: "Chinese (Traditional, Taiwan)",
    1029: "Czech (Czech Republic)",
    1030: "Danish (Denmark)",
    1031: "German (Germany)",
    1032: "Greek (Greece)",
    1033: "English (United States)",
    1035: "Finnish (Finland)",
    1036: "French (France)",
    1037: "Hebrew (Israel)",
    1038: "Hungarian (Hungary)",
    1040: "Italian (Italy)",
    1041: "Japanese (Japan)",
    1042: "Korean (Korea)",
    1043: "Dutch (Netherlands)",
    1044: "Norwegian, Bokmål (Norway)",
    1045: "Polish (Poland)",
    1046: "Portuguese (Brazil)",
    1048: "Romanian (Romania)",
    1049: "Russian (Russia)",
    1050: "Croatian (Croatia)",
    1051: "Slovak (Slovakia)",
    1053: "Swedish (Sweden)",
    1054: "Thai (Thailand)",
    1055: "Turkish (Turkey)",
    1058: "Ukrainian (Ukraine)",
    1060: "Slovenian (Slovenia)",
    1061: "Estonian (Estonia)",
    1062: "Latvian (Latvia)",
    1063: "Lithuanian (Lithuania)",
    1081: "Hindi (India)",
    2052: "Chinese (Simplified, PRC)",
    2057: "English (United Kingdom)",
    2058: "Spanish (Mexico)",
    2070: "Portuguese (Portugal)",
    2074: "Serbian (Latin, Serbia)",
    3076: "Chinese (Traditional, Hong Kong S.A.R.)",
    3081: "English (Australia)",
    3082: "Spanish (Spain, International Sort)",
    3084: "French (Canada)",
    4105: "English (Canada)",
    5129: "English (New Zealand)",
}


def lcid_display_name(code: int) -> str:  # noqa: D401
    """Return a human display name for Windows locale *code*."""
    name = _DISPLAY_NAMES.get(code)
    if name:
        return name
    tag = locale.windows_locale.get(code)
    if tag:
        return tag.replace("_", "-")
    return "Unknown Locale"
