"""Rails-style inflection: pluralize, singularize, underscore, camelize."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

DEFAULT_LOCALE = "en"

Rule = Tuple["re.Pattern[str]", str]


class Inflector:
    """Inflection rules for one locale.

    Rules are tried in order and the first match wins, so more specific
    patterns go first.
    """

    def __init__(self, plurals: Iterable[Tuple[str, str]] = (),
                 singulars: Iterable[Tuple[str, str]] = (),
                 irregulars: Optional[Dict[str, str]] = None,
                 uncountables: Iterable[str] = ()):
        self.plurals: List[Rule] = [(re.compile(p, re.IGNORECASE), r) for p, r in plurals]
        self.singulars: List[Rule] = [(re.compile(p, re.IGNORECASE), r) for p, r in singulars]
        self.irregulars: Dict[str, str] = dict(irregulars or {})
        self.uncountables = frozenset(w.lower() for w in uncountables)

    def irregular(self, singular: str, plural: str) -> None:
        self.irregulars[singular.lower()] = plural.lower()

    def pluralize(self, word: str) -> str:
        return self._inflect(word, self.irregulars, self.plurals)

    def singularize(self, word: str) -> str:
        reverse = {v: k for k, v in self.irregulars.items()}
        return self._inflect(word, reverse, self.singulars)

    def _inflect(self, word: str, irregulars: Dict[str, str],
                 rules: List[Rule]) -> str:
        if not word:
            return word
        # Only the last segment of a compound word inflects: sales_person -> sales_people
        head, sep, last = word.rpartition("_")
        lower = last.lower()
        # Already in the target form: people stays people
        if lower in self.uncountables or lower in irregulars.values():
            return word
        if lower in irregulars:
            replacement = irregulars[lower]
            if last[:1].isupper():
                replacement = replacement[:1].upper() + replacement[1:]
            return f"{head}{sep}{replacement}"
        for pattern, replacement in rules:
            if pattern.search(last):
                return f"{head}{sep}{pattern.sub(replacement, last, count=1)}"
        return word


ENGLISH = Inflector(
    plurals=[
        (r"(quiz)$", r"\1zes"),
        (r"^(oxen)$", r"\1"),
        (r"^(ox)$", r"\1en"),
        (r"(m|l)ice$", r"\1ice"),
        (r"(m|l)ouse$", r"\1ice"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(hive)$", r"\1s"),
        (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
        (r"sis$", "ses"),
        (r"([ti])a$", r"\1a"),
        (r"([ti])um$", r"\1a"),
        (r"(buffal|tomat)o$", r"\1oes"),
        (r"(bu)s$", r"\1ses"),
        (r"(alias|status)$", r"\1es"),
        (r"(octop|vir)i$", r"\1i"),
        (r"(octop|vir)us$", r"\1i"),
        (r"^(ax|test)is$", r"\1es"),
        (r"s$", "s"),
        (r"$", "s"),
    ],
    singulars=[
        (r"(database)s$", r"\1"),
        (r"(quiz)zes$", r"\1"),
        (r"(matr)ices$", r"\1ix"),
        (r"(vert|ind)ices$", r"\1ex"),
        (r"^(ox)en", r"\1"),
        (r"(alias|status)(es)?$", r"\1"),
        (r"(octop|vir)(us|i)$", r"\1us"),
        (r"^(a)x[ie]s$", r"\1xis"),
        (r"(cris|test)(is|es)$", r"\1is"),
        (r"(shoe)s$", r"\1"),
        (r"(o)es$", r"\1"),
        (r"(bus)(es)?$", r"\1"),
        (r"^(m|l)ice$", r"\1ouse"),
        (r"(x|ch|ss|sh)es$", r"\1"),
        (r"(m)ovies$", r"\1ovie"),
        (r"(s)eries$", r"\1eries"),
        (r"([^aeiouy]|qu)ies$", r"\1y"),
        (r"([lr])ves$", r"\1f"),
        (r"(tive)s$", r"\1"),
        (r"(hive)s$", r"\1"),
        (r"([^f])ves$", r"\1fe"),
        (r"(^analy)(sis|ses)$", r"\1sis"),
        (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
        (r"([ti])a$", r"\1um"),
        (r"(n)ews$", r"\1ews"),
        (r"(ss)$", r"\1"),
        (r"s$", ""),
    ],
    irregulars={
        "person": "people",
        "man": "men",
        "woman": "women",
        "child": "children",
        "sex": "sexes",
        "move": "moves",
        "zombie": "zombies",
        "tooth": "teeth",
        "foot": "feet",
        "goose": "geese",
    },
    uncountables=[
        "equipment", "information", "rice", "money", "species", "series",
        "fish", "sheep", "jeans", "police", "metadata", "feedback",
    ],
)

_INFLECTORS: Dict[str, Inflector] = {DEFAULT_LOCALE: ENGLISH}


def register(locale: str, inflector: Inflector) -> None:
    """Install the inflection rules used for ``locale``."""
    _INFLECTORS[locale] = inflector


def inflector_for(locale: str = DEFAULT_LOCALE) -> Inflector:
    """Return the rules for ``locale``, falling back to English."""
    return _INFLECTORS.get(locale, ENGLISH)


def pluralize(word: str, locale: str = DEFAULT_LOCALE) -> str:
    """Pluralize a word using Rails-like inflection rules."""
    return inflector_for(locale).pluralize(word)


def singularize(word: str, locale: str = DEFAULT_LOCALE) -> str:
    """Singularize a word using Rails-like inflection rules."""
    return inflector_for(locale).singularize(word)


def underscore(camel: str) -> str:
    """Convert CamelCase to snake_case (``Admin::PersonHat`` -> ``admin/person_hat``)."""
    s1 = re.sub(r"([A-Z\d]+)([A-Z][a-z])", r"\1_\2", camel.replace("::", "/"))
    s2 = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1)
    return s2.replace("-", "_").lower()


def camelize(snake: str) -> str:
    """Convert snake_case to CamelCase (``admin/person_hat`` -> ``Admin::PersonHat``)."""
    return "::".join(
        "".join(word[:1].upper() + word[1:] for word in part.split("_"))
        for part in snake.split("/")
    )
