"""
Content Safety module.

Translates provider content-filter reasons into user-facing messages.
"""

from .translator import translate, is_content_filtered, GENERIC_MESSAGE

__all__ = ["translate", "is_content_filtered", "GENERIC_MESSAGE"]
