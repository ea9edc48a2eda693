# cart_api/domain/matching.py
from enum import Enum


class MatchResult(str, Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    VACUOUS = "vacuous"  # expected name has no significant keywords

    @property
    def accepted(self) -> bool:
        return self is not MatchResult.MISMATCH


MIN_KEYWORD_LENGTH = 4


def significant_keywords(expected: str) -> list[str]:
    return [w for w in expected.lower().split() if len(w) >= MIN_KEYWORD_LENGTH]


def match_product_name(canonical: str, expected: str) -> MatchResult:
    """
    Heurystyka: czy nazwa podana przez agenta pasuje do nazwy z katalogu.

    Pasuje, jesli cala oczekiwana nazwa jest podciagiem nazwy kanonicznej
    albo ktorekolwiek slowo kluczowe (> 3 znaki) jest jej podciagiem.
    Bez slow kluczowych nie ma czego sprawdzac, wynik VACUOUS jest akceptowany.
    """
    canonical = canonical.lower().strip()
    expected = expected.lower().strip()
    keywords = significant_keywords(expected)

    if expected in canonical or any(k in canonical for k in keywords):
        return MatchResult.MATCH

    if not keywords:
        return MatchResult.VACUOUS

    return MatchResult.MISMATCH
