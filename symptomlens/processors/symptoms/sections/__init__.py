"""Clinical note section segmentation."""

from .segmenter import SECTION_HEADERS, SectionSegmenter, identify_sections

__all__ = ["SectionSegmenter", "identify_sections", "SECTION_HEADERS"]
