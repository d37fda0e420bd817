"""Classification of grid activity codes."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

DEFAULT_REST_TOKENS = frozenset({"BREAK", "ПОЧИВКА"})
IDLE_SENTINEL = "-"

BLACKJACK_PREFIX = "BJ"
ROULETTE_PREFIX = "ROU"


class ActivityFamily(Enum):
    """What a dealer is doing in a slot."""

    REST = "rest"
    BLACKJACK = "blackjack"
    ROULETTE = "roulette"
    IDLE = "idle"
    OTHER = "other"

    @property
    def is_worked(self) -> bool:
        """True for families that count as time at a table."""
        return self in (ActivityFamily.BLACKJACK, ActivityFamily.ROULETTE, ActivityFamily.OTHER)


DISPLAY_CLASSES = {
    ActivityFamily.REST: "break",
    ActivityFamily.BLACKJACK: "blackjack",
    ActivityFamily.ROULETTE: "roulette",
    ActivityFamily.IDLE: "idle",
    ActivityFamily.OTHER: "table",
}


@dataclass(frozen=True)
class Classification:
    family: ActivityFamily
    display_class: str


class ActivityClassifier:
    """Classifies activity codes into families.

    Rules are checked in a fixed order and the first match wins: rest
    token, ``BJ`` prefix, ``ROU`` prefix, idle sentinel (or empty), other.
    Rest tokens are a set so that localized spellings of "break" classify
    the same way.

    Example:
        >>> classifier = ActivityClassifier()
        >>> classifier.classify("BJ6").family
        <ActivityFamily.BLACKJACK: 'blackjack'>
    """

    def __init__(
        self,
        rest_tokens: Iterable[str] = DEFAULT_REST_TOKENS,
        idle_sentinel: str = IDLE_SENTINEL,
    ):
        self.rest_tokens = frozenset(rest_tokens)
        self.idle_sentinel = idle_sentinel

    def family(self, code: Optional[str]) -> ActivityFamily:
        code = (code or "").strip()
        if code in self.rest_tokens:
            return ActivityFamily.REST
        if code.startswith(BLACKJACK_PREFIX):
            return ActivityFamily.BLACKJACK
        if code.startswith(ROULETTE_PREFIX):
            return ActivityFamily.ROULETTE
        if not code or code == self.idle_sentinel:
            return ActivityFamily.IDLE
        return ActivityFamily.OTHER

    def classify(self, code: Optional[str]) -> Classification:
        family = self.family(code)
        return Classification(family=family, display_class=DISPLAY_CLASSES[family])

    def is_rest(self, code: Optional[str]) -> bool:
        return self.family(code) is ActivityFamily.REST

    def is_worked(self, code: Optional[str]) -> bool:
        return self.family(code).is_worked

    def table_family(self, code: str) -> str:
        """Short group token used when tallying tables by type."""
        family = self.family(code)
        if family is ActivityFamily.BLACKJACK:
            return BLACKJACK_PREFIX
        if family is ActivityFamily.ROULETTE:
            return ROULETTE_PREFIX
        return code
