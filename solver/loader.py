"""
solver/loader.py — ładowanie zestawu reguł po referencji "moduł:atrybut".

Publiczne API:
  parse_reference(ref)  -> (module_name, attribute_path)
  load_object(ref)      -> wskazany atrybut (wywołany, jeśli to funkcja)
  load_ruleset(ref)     -> Ruleset
"""

from __future__ import annotations

import importlib
import logging
import re
from typing import Any

from .ruleset import Ruleset

logger = logging.getLogger(__name__)

_REFERENCE_RE = re.compile(r"^\s*([\w.]+)\s*:\s*([\w.]+)\s*$")


def parse_reference(ref: str) -> tuple[str, str]:
    """
    Parsuje referencję w formie 'pakiet.moduł:atrybut'.

    Przykłady::

        "readability.rules:RULES"        -> ("readability.rules", "RULES")
        "mysite.rules:build.ruleset"     -> ("mysite.rules", "build.ruleset")

    Raises:
        ValueError: gdy referencja nie pasuje do wzorca.
    """
    m = _REFERENCE_RE.match(ref)
    if not m:
        raise ValueError(
            f"Nieprawidłowa referencja zestawu reguł: {ref!r} "
            "(oczekiwano 'pakiet.moduł:atrybut')"
        )
    return m.group(1), m.group(2)


def load_object(ref: str) -> Any:
    """
    Importuje moduł i zwraca wskazany atrybut.

    Atrybut wywoływalny (poza samym Rulesetem) jest wywoływany bez argumentów,
    a zwracany jest jego wynik.

    Raises:
        ValueError:  zła referencja albo brak atrybutu.
        ImportError: moduł nie istnieje.
        RulesetError: moduł buduje niepoprawny zestaw reguł.
    """
    module_name, attr_path = parse_reference(ref)
    obj = importlib.import_module(module_name)
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"Moduł {module_name!r} nie ma atrybutu {attr_path!r}") from None

    if not isinstance(obj, Ruleset) and callable(obj):
        obj = obj()
    return obj


def load_ruleset(ref: str) -> Ruleset:
    """
    Jak load_object(), ale wynik musi być zestawem reguł.

    Raises:
        ValueError: gdy atrybut nie jest (i nie zwraca) Rulesetem.
    """
    obj = load_object(ref)
    if not isinstance(obj, Ruleset):
        raise ValueError(f"{ref!r} nie wskazuje zestawu reguł (Ruleset), tylko {type(obj).__name__}")

    logger.debug("Załadowano %s: %r", ref, obj)
    return obj
