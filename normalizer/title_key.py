"""
normalizer/title_key.py — comparison keys built from a law title.

  title_normalized  scriptfold(title)
  root_title        title_normalized without amendment boilerplate,
                    jurisdiction suffixes and generic nouns, last word stemmed
  slug              root_title joined with "-", bounded length

The rule lists were tuned on real titles and are configuration, not a
grammar: pass a custom TitleKeyRules to change them.

Public API:
  title_keys(title, rules) -> TitleKeys
  root_title(normalized, rules) -> str
  make_slug(root, max_len) -> str
"""

from __future__ import annotations

from dataclasses import dataclass

from normalizer.scriptfold import scriptfold

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

AMENDMENT_PREFIXES: tuple[str, ...] = (
    "zakon o izmjenama i dopunama",
    "zakon o izmjeni i dopunama",
    "zakon o izmjenama i dopuni",
    "zakon o izmjeni i dopuni",
    "zakona o izmjenama i dopunama",
    "zakon o izmenama i dopunama",
    "zakon o izmeni i dopuni",
    "zakon o izmjenama",
    "zakon o izmenama",
    "zakon o izmjeni",
    "zakon o dopunama",
    "zakon o dopuni",
    "ispravka",
    "odluka o",
)

CONNECTIVES: tuple[str, ...] = (
    "zakonika o",
    "zakona o",
    "zakonik o",
    "zakon o",
    "zakona",
)

JURISDICTION_SUFFIXES: tuple[str, ...] = (
    "u republici srpskoj",
    "republike srpske",
    "u federaciji bosne i hercegovine",
    "federacije bosne i hercegovine",
    "bosne i hercegovine",
    "u bosni i hercegovini",
    "brcko distrikta bih",
    "u brcko distriktu bih",
    "brcko distrikta",
    "republike srbije",
    "u republici srbiji",
    "crne gore",
    "u crnoj gori",
    "fbih",
    "bih",
    "rs",
    "cg",
)

GENERIC_NOUNS: tuple[str, ...] = ("zakonika", "zakonik", "zakona", "zakon")

STEM_SUFFIXES: tuple[str, ...] = ("og", "om", "im", "ih", "i", "a", "e", "u")

SLUG_MAX_LEN = 80


@dataclass(frozen=True, slots=True)
class TitleKeyRules:
    prefixes: tuple[str, ...] = AMENDMENT_PREFIXES
    connectives: tuple[str, ...] = CONNECTIVES
    jurisdiction_suffixes: tuple[str, ...] = JURISDICTION_SUFFIXES
    generic_nouns: tuple[str, ...] = GENERIC_NOUNS
    stem_suffixes: tuple[str, ...] = STEM_SUFFIXES
    stem_min_len: int = 5          # stem only words longer than 4 characters
    slug_max_len: int = SLUG_MAX_LEN


DEFAULT_RULES = TitleKeyRules()


@dataclass(frozen=True, slots=True)
class TitleKeys:
    title_normalized: str
    root_title: str
    slug: str


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def title_keys(title: str | None, rules: TitleKeyRules = DEFAULT_RULES) -> TitleKeys:
    normalized = scriptfold(title)
    root = root_title(normalized, rules)
    return TitleKeys(
        title_normalized=normalized,
        root_title=root,
        slug=make_slug(root, rules.slug_max_len),
    )


def root_title(normalized: str, rules: TitleKeyRules = DEFAULT_RULES) -> str:
    """
    Reduces a scriptfolded title to its root.

    Order:
      1. one amendment prefix (longest match wins)
      2. one connective at the new start ("zakona o ...")
      3. trailing jurisdiction suffixes
      4. one trailing generic noun ("... zakon")
      5. stem of the last word

    A step that would leave fewer than two characters is discarded.
    """
    s = normalized.strip()
    if not s:
        return ""

    s = _keep(s, _strip_prefix(s, sorted(rules.prefixes, key=len, reverse=True)))
    s = _keep(s, _strip_prefix(s, sorted(rules.connectives, key=len, reverse=True)))

    changed = True
    while changed:
        stripped = _keep(s, _strip_suffix(s, rules.jurisdiction_suffixes))
        changed = stripped != s
        s = stripped

    s = _keep(s, _strip_suffix(s, rules.generic_nouns))
    return _keep(s, _stem_last_word(s, rules))


def make_slug(root: str, max_len: int = SLUG_MAX_LEN) -> str:
    return root.replace(" ", "-")[:max_len].rstrip("-")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _keep(before: str, after: str) -> str:
    after = after.strip()
    return after if len(after) > 1 else before


def _strip_prefix(s: str, prefixes: list[str]) -> str:
    for p in prefixes:
        if s == p or s.startswith(p + " "):
            return s[len(p):]
    return s


def _strip_suffix(s: str, suffixes: tuple[str, ...]) -> str:
    for suffix in suffixes:
        if s.endswith(" " + suffix):
            return s[: -len(suffix)]
    return s


def _stem_last_word(s: str, rules: TitleKeyRules) -> str:
    head, _, last = s.rpartition(" ")
    if len(last) < rules.stem_min_len:
        return s
    for suffix in rules.stem_suffixes:
        if last.endswith(suffix):
            last = last[: -len(suffix)]
            break
    return f"{head} {last}" if head else last
