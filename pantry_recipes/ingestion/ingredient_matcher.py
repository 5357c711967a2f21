"""Ingredient tokenization and pantry availability matching.

Decides whether a recipe's ingredient line is "already in the user's
pantry" by comparing word tokens.

DESIGN DECISIONS:
- One tokenization rule for both sides (user input and recipe lines), so
  matching is symmetric and deterministic
- Prefix matching tolerates plural/suffix variation ("domates" matches
  "domatesler") without fuzzy edit-distance logic
- A user ingredient with no tokens never matches anything
"""

import re
from typing import Iterable, List


# Anything that is not a Latin letter, a digit or one of the Turkish
# letters separates tokens. Text is case-folded first (see _fold_case).
_TOKEN_SEPARATOR = re.compile(r"[^a-z0-9ığüşöç]+")

# str.lower() turns "İ" into "i" plus U+0307 (combining dot above)
_DOTTED_CAPITAL_I = "\u0130"
_COMBINING_DOT = "\u0307"

_USER_INGREDIENT_SEPARATOR = re.compile(r"[,\n]+")


def _fold_case(text: str) -> str:
    """Lower-case text, folding the Turkish dotted capital "İ" to "i"."""
    return text.replace(_DOTTED_CAPITAL_I, "i").lower().replace(_COMBINING_DOT, "")


def tokenize(text: str) -> List[str]:
    """Split text into lowercase word tokens.

    Args:
        text: Raw ingredient phrase (e.g. "2 Adet Domates!")

    Returns:
        Tokens in order of appearance (e.g. ["2", "adet", "domates"])
    """
    if not text:
        return []
    return [token for token in _TOKEN_SEPARATOR.split(_fold_case(text)) if token]


def parse_user_ingredients(raw: str) -> List[str]:
    """Split the user's free-text list on commas/newlines.

    Entries are lower-cased and trimmed; empty entries are dropped.
    """
    if not raw:
        return []
    entries = _USER_INGREDIENT_SEPARATOR.split(_fold_case(raw))
    return [entry.strip() for entry in entries if entry.strip()]


def _matches(user_words: List[str], ingredient_words: List[str]) -> bool:
    if not user_words:
        return False
    return all(
        any(token.startswith(word) for token in ingredient_words)
        for word in user_words
    )


def is_available(user_ingredients: Iterable[str], candidate_line: str) -> bool:
    """Return True if any user ingredient covers the candidate line.

    A user ingredient covers the line when every one of its words equals,
    or is a prefix of, some token of the line.

    Args:
        user_ingredients: Parsed user ingredients (see parse_user_ingredients)
        candidate_line: Recipe ingredient line (e.g. "1 adet domates")

    Returns:
        True if the ingredient is considered available
    """
    ingredient_words = tokenize(candidate_line)
    return any(
        _matches(tokenize(user_ingredient), ingredient_words)
        for user_ingredient in user_ingredients
    )
