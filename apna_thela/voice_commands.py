import re
from typing import Dict, List, Optional, Tuple

from rapidfuzz import process, fuzz

from .language import LanguagePreference, detect_language
from .models import VoiceCommandResponse


def _pattern(latin: List[str], native: List[str]) -> "re.Pattern":
    # Latin keywords must be whole words; native-script keywords match anywhere
    parts = [r"\b(?:" + "|".join(latin) + r")\b"] + [re.escape(w) for w in native]
    return re.compile("|".join(parts), re.IGNORECASE)


# Checked in this order; the first hit decides the action
COMMAND_PATTERNS: List[Tuple[str, "re.Pattern"]] = [
    ("order", _pattern(
        ["order", "buy"],
        ["ऑर्डर", "অর্ডার", "ஆர்டர்", "ఆర్డర్", "खरीद", "কিন", "खरेदी", "வாங்கு", "కొను"],
    )),
    ("stock", _pattern(
        ["stock", "inventory"],
        ["स्टॉक", "স্টক", "ஸ்டாக்", "స్టాక్", "इन्वेंटरी", "ইনভেন্টরি", "इन्व्हेंटरी", "இன்வென்டரி", "ఇన్వెంటరీ"],
    )),
    ("wallet", _pattern(
        ["wallet", "money"],
        ["वॉलेट", "ওয়ালেট", "வாலெட்", "వాలెట్", "पैसा", "টাকা", "पैसे", "பணம்", "డబ్బు"],
    )),
    ("marketplace", _pattern(
        ["market", "supplier"],
        ["मार्केट", "বাজার", "बाजार", "சந்தை", "మార్కెట్", "सप्लायर", "সরবরাহকারী", "पुरवठादार", "சப்ளையர்", "సరఫరాదారు"],
    )),
    ("profile", _pattern(
        ["profile", "account"],
        ["प्रोफाइल", "প্রোফাইল", "ప్రొఫైల్", "अकाउंट", "অ্যাকাউন্ট", "खाते", "கணக்கு", "ఖాతా"],
    )),
]

ACTION_ROUTES: Dict[str, str] = {
    "order": "/buy-ingredients",
    "stock": "/inventory",
    "wallet": "/wallet",
    "marketplace": "/marketplace",
    "profile": "/profile",
}

PRODUCT_ALIASES: Dict[str, List[str]] = {
    "aloo": ["aloo", "potato", "आलू", "আলু", "बटाटे", "உருளைக்கிழங்கு", "బంగాళాదుంప"],
    "pyaz": ["pyaz", "onion", "प्याज", "পেঁয়াজ", "कांदा", "வெங்காயம்", "ఉల్లిపాయ"],
    "tamatar": ["tamatar", "tomato", "टमाटर", "টমেটো", "टोमॅटो", "தக்காளி", "టమాటా"],
    "oil": ["oil", "तेल", "তেল", "எண்ணெய்", "నూనె"],
}

_ALIAS_TO_PRODUCT: Dict[str, str] = {
    alias.lower(): product for product, aliases in PRODUCT_ALIASES.items() for alias in aliases
}

FUZZY_PRODUCT_CUTOFF = 80


def match_action(text: str) -> Optional[str]:
    for action, pattern in COMMAND_PATTERNS:
        if pattern.search(text):
            return action
    return None


def match_product(text: str) -> Optional[str]:
    """Exact alias first, then a fuzzy match per word (catches "tamatr", "onions")."""
    lowered = (text or "").lower()
    for product, aliases in PRODUCT_ALIASES.items():
        for alias in aliases:
            if alias.isascii():
                if re.search(r"\b" + re.escape(alias) + r"\b", lowered):
                    return product
            elif alias in lowered:
                return product
    for word in lowered.split():
        hit = process.extractOne(word, list(_ALIAS_TO_PRODUCT.keys()), scorer=fuzz.ratio, score_cutoff=FUZZY_PRODUCT_CUTOFF)
        if hit:
            return _ALIAS_TO_PRODUCT[hit[0]]
    return None


def interpret_command(transcript: str, preference: Optional[LanguagePreference] = None) -> VoiceCommandResponse:
    """Detect the speaker's language, switch to it, and map the words to a page."""
    language = detect_language(transcript)
    if preference is not None:
        preference.set(language)

    action = match_action(transcript or "")
    product = None
    route = None
    if action is not None:
        route = ACTION_ROUTES[action]
        if action == "order":
            product = match_product(transcript)
            if product:
                route += f"?search={product}"

    return VoiceCommandResponse(
        transcript=transcript,
        language=language,
        action=action,
        product=product,
        route=route,
    )
