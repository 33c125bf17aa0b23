"""
Classification of commit messages by their leading Gitmoji marker.

A marker is either the emoji glyph itself (``✨ add login``) or its
colon-delimited shortcode (``:sparkles: add login``). Both forms map to
the same :class:`Category`. The table is fixed; markers that are not in it,
or that do not open the message, classify as :attr:`Category.OTHER`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Category(Enum):
    """Semantic-version impact of a commit."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    OTHER = "other"


@dataclass(frozen=True)
class Gitmoji:
    """A single entry of the marker table."""

    shortcode: str
    glyph: str
    category: Category


_VARIATION_SELECTOR = "\ufe0f"
_SHORTCODE_RE = re.compile(r":([A-Za-z0-9_+\-]+):")

# (shortcode, glyph) pairs per category
_TABLE: Dict[Category, List[Tuple[str, str]]] = {
    Category.MAJOR: [
        ("boom", "💥"),
    ],
    Category.MINOR: [
        ("sparkles", "✨"),
        ("children_crossing", "🚸"),
        ("lipstick", "💄"),
        ("iphone", "📱"),
        ("egg", "🥚"),
        ("chart_with_upwards_trend", "📈"),
        ("heavy_plus_sign", "➕"),
        ("heavy_minus_sign", "➖"),
        ("passport_control", "🛂"),
    ],
    Category.PATCH: [
        ("art", "🎨"),
        ("ambulance", "🚑️"),
        ("lock", "🔒️"),
        ("bug", "🐛"),
        ("zap", "⚡️"),
        ("goal_net", "🥅"),
        ("alien", "👽️"),
        ("wheelchair", "♿️"),
        ("speech_balloon", "💬"),
        ("mag", "🔍️"),
        ("fire", "🔥"),
        ("white_check_mark", "✅"),
        ("closed_lock_with_key", "🔐"),
        ("rotating_light", "🚨"),
        ("green_heart", "💚"),
        ("arrow_down", "⬇️"),
        ("arrow_up", "⬆️"),
        ("pushpin", "📌"),
        ("construction_worker", "👷"),
        ("recycle", "♻️"),
        ("wrench", "🔧"),
        ("hammer", "🔨"),
        ("globe_with_meridians", "🌐"),
        ("package", "📦️"),
        ("truck", "🚚"),
        ("bento", "🍱"),
        ("card_file_box", "🗃️"),
        ("loud_sound", "🔊"),
        ("mute", "🔇"),
        ("building_construction", "🏗️"),
        ("camera_flash", "📸"),
        ("label", "🏷️"),
        ("seedling", "🌱"),
        ("triangular_flag_on_post", "🚩"),
        ("dizzy", "💫"),
        ("adhesive_bandage", "🩹"),
        ("monocle_face", "🧐"),
        ("necktie", "👔"),
        ("stethoscope", "🩺"),
        ("technologist", "🧑‍💻"),
        ("thread", "🧵"),
        ("safety_vest", "🦺"),
    ],
    Category.OTHER: [
        ("memo", "📝"),
        ("rocket", "🚀"),
        ("tada", "🎉"),
        ("bookmark", "🔖"),
        ("construction", "🚧"),
        ("pencil2", "✏️"),
        ("poop", "💩"),
        ("rewind", "⏪️"),
        ("twisted_rightwards_arrows", "🔀"),
        ("page_facing_up", "📄"),
        ("bulb", "💡"),
        ("beers", "🍻"),
        ("bust_in_silhouette", "👥"),
        ("clown_face", "🤡"),
        ("see_no_evil", "🙈"),
        ("alembic", "⚗️"),
        ("wastebasket", "🗑️"),
        ("coffin", "⚰️"),
        ("test_tube", "🧪"),
        ("bricks", "🧱"),
        ("money_with_wings", "💸"),
    ],
}


def _strip_variation(text: str) -> str:
    return text.replace(_VARIATION_SELECTOR, "")


GITMOJIS: Tuple[Gitmoji, ...] = tuple(
    Gitmoji(shortcode=f":{name}:", glyph=glyph, category=category)
    for category, entries in _TABLE.items()
    for name, glyph in entries
)

_BY_SHORTCODE: Dict[str, Gitmoji] = {g.shortcode[1:-1].lower(): g for g in GITMOJIS}
# Longest glyph first so that ZWJ sequences win over their leading emoji.
_BY_GLYPH: Tuple[Tuple[str, Gitmoji], ...] = tuple(
    sorted(
        ((_strip_variation(g.glyph), g) for g in GITMOJIS),
        key=lambda item: len(item[0]),
        reverse=True,
    )
)


def marker_of(message: str) -> Optional[Gitmoji]:
    """Return the Gitmoji that opens ``message``, or ``None``.

    Leading whitespace is ignored. Shortcodes are compared case-insensitively
    and must match a table entry exactly; glyphs are compared with any
    U+FE0F variation selectors removed.
    """
    if not message:
        return None
    text = message.lstrip()

    match = _SHORTCODE_RE.match(text)
    if match:
        return _BY_SHORTCODE.get(match.group(1).lower())

    head = _strip_variation(text[:8])
    for glyph, gitmoji in _BY_GLYPH:
        if head.startswith(glyph):
            return gitmoji
    return None


def classify_message(message: str) -> Category:
    """Classify a commit message into a :class:`Category`.

    Parameters
    ----------
    message : str
        The full commit message. May be empty.

    Returns
    -------
    Category
        The category of the leading marker, or ``Category.OTHER`` when
        the message has no recognised marker.
    """
    gitmoji = marker_of(message)
    if gitmoji is None:
        return Category.OTHER
    return gitmoji.category
