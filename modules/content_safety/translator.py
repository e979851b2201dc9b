"""
Content-safety reason translation.

Image and video providers report moderation rejections as free text that usually
embeds one or more eight-digit support codes. `translate` turns such a reason into
a message that is safe to show to end users. It is a total function: it never
raises and never returns an empty string.
"""

import re
from typing import Dict, Optional, Tuple

GENERIC_MESSAGE = (
    "The content could not be generated because it may violate our content "
    "guidelines. Please rephrase your prompt and try again."
)

CHILD = (
    "The request was blocked because it may depict children. "
    "Please remove references to minors and try again."
)
CELEBRITY = (
    "The request was blocked because it may depict a real, well-known person. "
    "Please describe a fictional character instead."
)
VIDEO_SAFETY = "The video was blocked by the video safety filter. Please adjust the prompt or image."
DANGEROUS = "The request was blocked because it may describe dangerous activities."
HATE = "The request was blocked because it may contain hateful content."
PROHIBITED = "The request was blocked because it asks for prohibited content."
SEXUAL = "The request was blocked because it may contain sexual content."
TOXIC = "The request was blocked because it may contain toxic language."
VIOLENCE = "The request was blocked because it may contain violent content."
VULGAR = "The request was blocked because it may contain vulgar language."
PERSON = (
    "The request was blocked because it would generate a photorealistic person "
    "or face that is not allowed. Please adjust the description."
)
THIRD_PARTY = (
    "The request was blocked because it may reproduce third-party content "
    "such as logos, brands or copyrighted material."
)
OTHER = "The request was blocked by the safety filter. Please adjust the prompt and try again."

SUPPORT_CODES: Dict[str, str] = {
    "58061214": CHILD,
    "17301594": CHILD,
    "29310472": CELEBRITY,
    "15236754": CELEBRITY,
    "64151117": VIDEO_SAFETY,
    "42237218": VIDEO_SAFETY,
    "62263041": DANGEROUS,
    "57734940": HATE,
    "22137204": HATE,
    "74803281": OTHER,
    "29578790": OTHER,
    "42876398": OTHER,
    "89371032": PROHIBITED,
    "49114662": PROHIBITED,
    "72817394": PROHIBITED,
    "63429089": SEXUAL,
    "90789179": SEXUAL,
    "43188360": SEXUAL,
    "78610348": TOXIC,
    "61493863": VIOLENCE,
    "56562880": VIOLENCE,
    "32635315": VULGAR,
    "39322892": PERSON,
    "60599140": THIRD_PARTY,
    "35561574": THIRD_PARTY,
    "35561575": THIRD_PARTY,
}

# Checked in order; the first matching keyword wins
KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("child", CHILD),
    ("minor", CHILD),
    ("celebrit", CELEBRITY),
    ("sexual", SEXUAL),
    ("nsfw", SEXUAL),
    ("violen", VIOLENCE),
    ("hate", HATE),
    ("danger", DANGEROUS),
    ("toxic", TOXIC),
    ("vulgar", VULGAR),
    ("prohibited", PROHIBITED),
    ("person", PERSON),
    ("face", PERSON),
    ("copyright", THIRD_PARTY),
    ("third-party", THIRD_PARTY),
)

# Phrases providers use when a request or output was moderated
FILTER_MARKERS = (
    "support code",
    "safety",
    "filtered",
    "flagged",
    "sensitive",
    "nsfw",
    "responsible ai",
    "content policy",
    "blocked",
)

_CODE_PATTERN = re.compile(r"\b(\d{8})\b")


def _lookup_code(reason: str) -> Optional[str]:
    for code in _CODE_PATTERN.findall(reason):
        message = SUPPORT_CODES.get(code)
        if message:
            return message
    return None


def translate(reason) -> str:
    """
    Translate a provider content-filter reason into a user-facing message.

    Args:
        reason: Raw reason text (may embed support codes); any value is accepted

    Returns:
        Non-empty user-facing message
    """
    if reason is None:
        return GENERIC_MESSAGE
    text = reason if isinstance(reason, str) else str(reason)

    message = _lookup_code(text)
    if message:
        return message

    lowered = text.lower()
    for keyword, keyword_message in KEYWORDS:
        if keyword in lowered:
            return keyword_message

    return GENERIC_MESSAGE


def is_content_filtered(error_text: Optional[str]) -> bool:
    """Whether a provider error message describes a moderation rejection."""
    if not error_text:
        return False
    if _lookup_code(error_text):
        return True
    lowered = error_text.lower()
    return any(marker in lowered for marker in FILTER_MARKERS)
