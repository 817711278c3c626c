"""lexnorm — normalization, segmentation and dedup of legal texts."""

__version__ = "0.1.0"
