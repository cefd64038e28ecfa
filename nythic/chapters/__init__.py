"""Chapter ordering helpers."""

from nythic.chapters.natural_sort import chapter_sort_key, compare_chapters, sort_chapters

__all__ = ["chapter_sort_key", "compare_chapters", "sort_chapters"]
