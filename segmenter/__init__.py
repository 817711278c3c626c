"""
segmenter — heading-driven segmentation of extracted law text.

Public API:
  Segmenter(profile).segment(pages, law_id)  → SegmentationResult
  segment_pages(pages, jurisdiction, law_id) → SegmentationResult
  HeadingScanner(profile).scan(text, page)   → lazy HeadingMatch sequence
  detect_artifact(text)                      → ArtifactVerdict
  segment_and_store(repo, law, pages)        → IngestResult
  store_segmentation(repo, law, result)      → IngestResult
  get_profile(jurisdiction)                  → ScriptProfile
  jurisdiction_code(jurisdiction)            → "RS", "SRB", ...
"""

from .script_profiles import Script, ScriptProfile, PROFILES, DEFAULT_PROFILE, get_profile, jurisdiction_code
from .heading_scanner import HeadingScanner, HeadingScan
from .text_cleaner    import clean_page_text, repair_mojibake
from .artifact_filter import ArtifactFilter, ArtifactVerdict, detect_artifact
from .parser          import Segmenter, SegmentationResult, segment_pages
from .ingest          import IngestResult, segment_and_store, store_segmentation, collapse_duplicates

__all__ = [
    "Script",
    "ScriptProfile",
    "PROFILES",
    "DEFAULT_PROFILE",
    "get_profile",
    "jurisdiction_code",
    "HeadingScanner",
    "HeadingScan",
    "clean_page_text",
    "repair_mojibake",
    "ArtifactFilter",
    "ArtifactVerdict",
    "detect_artifact",
    "Segmenter",
    "SegmentationResult",
    "segment_pages",
    "IngestResult",
    "segment_and_store",
    "store_segmentation",
    "collapse_duplicates",
]
