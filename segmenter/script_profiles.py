"""
segmenter/script_profiles.py — per-jurisdiction script profiles.

A ScriptProfile lists:
  - scripts       : active script variants (latin / cyrillic / english)
  - heading_word  : canonical word used in segment labels ("Član 6")
  - fallback_label: label of the whole-document fallback segment

Heading vocabulary per script lives in HEADING_TOKENS; the scanner compiles
one pattern per profile from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Script(StrEnum):
    LATIN    = "latin"
    CYRILLIC = "cyrillic"
    ENGLISH  = "english"


HEADING_TOKENS: dict[Script, tuple[str, ...]] = {
    Script.LATIN:    ("Članak", "Clanak", "Član", "Clan", "Čl.", "Cl."),
    Script.CYRILLIC: ("Чланак", "Члан", "Чл."),
    Script.ENGLISH:  ("Article", "Art."),
}


@dataclass(frozen=True, slots=True)
class ScriptProfile:
    jurisdiction: str
    scripts: tuple[Script, ...]
    heading_word: str
    fallback_label: str = "Uvod"

    @property
    def tokens(self) -> tuple[str, ...]:
        out: list[str] = []
        for script in self.scripts:
            out.extend(HEADING_TOKENS[script])
        return tuple(out)

    def label(self, number: int) -> str:
        return f"{self.heading_word} {number}"


PROFILES: dict[str, ScriptProfile] = {
    # -------------------------------------------------------------------------
    # Bosnia and Herzegovina: both scripts are official
    # -------------------------------------------------------------------------
    "RS": ScriptProfile(
        jurisdiction="RS",
        scripts=(Script.LATIN, Script.CYRILLIC),
        heading_word="Član",
    ),
    "FBIH": ScriptProfile(
        jurisdiction="FBiH",
        scripts=(Script.LATIN, Script.CYRILLIC),
        heading_word="Član",
    ),
    "BRCKO": ScriptProfile(
        jurisdiction="Brcko",
        scripts=(Script.LATIN, Script.CYRILLIC),
        heading_word="Član",
    ),
    "BIH": ScriptProfile(
        jurisdiction="BiH",
        scripts=(Script.LATIN, Script.CYRILLIC, Script.ENGLISH),
        heading_word="Član",
    ),

    # -------------------------------------------------------------------------
    # Serbia: gazette text is Cyrillic
    # -------------------------------------------------------------------------
    "SRB": ScriptProfile(
        jurisdiction="SRB",
        scripts=(Script.CYRILLIC, Script.LATIN),
        heading_word="Члан",
        fallback_label="Увод",
    ),

    # -------------------------------------------------------------------------
    # Montenegro
    # -------------------------------------------------------------------------
    "CG": ScriptProfile(
        jurisdiction="Crna Gora",
        scripts=(Script.LATIN, Script.CYRILLIC),
        heading_word="Član",
    ),
}

_ALIASES: dict[str, str] = {
    "republika srpska": "RS",
    "federacija bih":   "FBIH",
    "brčko":            "BRCKO",
    "srbija":           "SRB",
    "crna gora":        "CG",
}

DEFAULT_PROFILE = ScriptProfile(
    jurisdiction="",
    scripts=(Script.LATIN, Script.CYRILLIC),
    heading_word="Član",
)


def jurisdiction_code(jurisdiction: str | None) -> str:
    """Canonical code: "Republika Srpska" / " rs " → "RS"; unknown names are upper-cased."""
    key = (jurisdiction or "").strip()
    return _ALIASES.get(key.lower(), key.upper())


def get_profile(jurisdiction: str | None) -> ScriptProfile:
    """Profile of a jurisdiction; unknown ones get the Latin+Cyrillic default."""
    if not jurisdiction:
        return DEFAULT_PROFILE
    return PROFILES.get(jurisdiction_code(jurisdiction), DEFAULT_PROFILE)
