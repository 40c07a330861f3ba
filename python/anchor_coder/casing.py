import re
from typing import List

_SEPARATORS = re.compile(r"[\s_\-]+")
_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM = re.compile(r"([A-Z]+)([A-Z][a-z])")


def words(name: str) -> List[str]:
    """Split an identifier into words on separators and camel-case humps.

    Digits stay attached to the word before them, so ``initializeV2`` gives
    ``["initialize", "V2"]``.
    """
    out = []
    for chunk in _SEPARATORS.split(name):
        chunk = _ACRONYM.sub(r"\1 \2", _LOWER_UPPER.sub(r"\1 \2", chunk))
        out.extend(w for w in chunk.split(" ") if w)
    return out


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def snake_case(name: str) -> str:
    return "_".join(w.lower() for w in words(name))


def camel_case(name: str) -> str:
    parts = words(name)
    if not parts:
        return ""
    return parts[0].lower() + "".join(_capitalize(w) for w in parts[1:])


def pascal_case(name: str) -> str:
    return "".join(_capitalize(w) for w in words(name))


def sentence_case(name: str) -> str:
    return " ".join(_capitalize(w) for w in words(name))
