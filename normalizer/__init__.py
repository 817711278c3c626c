"""
normalizer — canonical comparable forms of titles, gazette references and
document locations.

Public API:
  scriptfold(text)                       → str
  title_keys(title, rules)               → TitleKeys
  parse_gazette(text)                    → GazetteInfo
  gazette_key_from_number(number)        → str | None
  document_fingerprint(path_or_url)      → str | None
  compute_law_keys(law, rules)           → dict (changed fields)
"""

from .scriptfold  import scriptfold, transliterate, strip_diacritics
from .title_key   import TitleKeyRules, TitleKeys, DEFAULT_RULES, title_keys, root_title, make_slug
from .gazette     import GazetteInfo, parse_gazette, gazette_key_from_number, normalize_gazette_key
from .fingerprint import document_fingerprint, law_fingerprint
from .law_keys    import compute_law_keys, title_key_of

__all__ = [
    "scriptfold",
    "transliterate",
    "strip_diacritics",
    "TitleKeyRules",
    "TitleKeys",
    "DEFAULT_RULES",
    "title_keys",
    "root_title",
    "make_slug",
    "GazetteInfo",
    "parse_gazette",
    "gazette_key_from_number",
    "normalize_gazette_key",
    "document_fingerprint",
    "law_fingerprint",
    "compute_law_keys",
    "title_key_of",
]
