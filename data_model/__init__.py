"""
data_model — data structures shared by the normalization, segmentation
and dedup packages.

Usage:
  from data_model import Law, Segment, SegmentType, ...

Modules:
  laws — Law, Segment, SegmentType, HeadingMatch, DuplicateGroup,
         GroupStatus, ReprocessEvent

Storage mapping (db/schema.sql):
  Law      → table law
  Segment  → table segment (UNIQUE law_id, number, segment_type)
  HeadingMatch, DuplicateGroup, ReprocessEvent are never persisted
"""

from .laws import (
    SegmentType,
    GroupStatus,
    Law,
    Segment,
    HeadingMatch,
    ReprocessEvent,
    DuplicateGroup,
)

__all__ = [
    "SegmentType",
    "GroupStatus",
    "Law",
    "Segment",
    "HeadingMatch",
    "ReprocessEvent",
    "DuplicateGroup",
]
