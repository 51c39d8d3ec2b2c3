"""
Expense Categorization

Transactions have no category field. Reports derive one from the
description through a categorizer: any callable taking a description and
returning a label.

Both categorizers here are heuristics, not a guaranteed taxonomy.
"""

from typing import Callable, Optional


Categorizer = Callable[[str], str]

UNCATEGORIZED = "Other"

# Money lent is reported as its own expense category
LENDING_CATEGORY = "Lending"


def description_category(description: str) -> str:
    """Use the description itself as the category."""
    return description.strip() or UNCATEGORIZED


class KeywordCategorizer:
    """
    Match descriptions against keyword lists.

    Labels are tried in order; the first label with a keyword contained in
    the lowercased description wins.

    Usage:
        categorize = KeywordCategorizer()
        categorize("Weekly groceries")   # "Food"
        categorize("Uber to airport")    # "Transport"
    """

    DEFAULT_KEYWORDS: dict[str, tuple[str, ...]] = {
        "Rent": ("rent",),
        "Food": (
            "food", "grocer", "restaurant", "dining", "coffee",
            "lunch", "dinner", "breakfast", "snack",
        ),
        "Transport": (
            "transport", "uber", "taxi", "cab", "bus", "train",
            "metro", "fuel", "petrol", "diesel",
        ),
        "Utilities": (
            "electricity", "water", "gas", "internet", "wifi",
            "mobile", "phone", "recharge",
        ),
        "Health": ("medical", "doctor", "pharmacy", "medicine", "hospital", "insurance"),
        "Shopping": ("shopping", "clothes", "shoes", "amazon", "flipkart"),
        "Entertainment": ("movie", "netflix", "concert", "game", "party"),
    }

    def __init__(
        self,
        keywords: Optional[dict[str, tuple[str, ...]]] = None,
        fallback: str = UNCATEGORIZED,
    ):
        source = self.DEFAULT_KEYWORDS if keywords is None else keywords
        self._keywords = {
            label: tuple(word.lower() for word in words)
            for label, words in source.items()
        }
        self._fallback = fallback

    def __call__(self, description: str) -> str:
        lowered = description.lower()
        for label, words in self._keywords.items():
            if any(word in lowered for word in words):
                return label
        return self._fallback
