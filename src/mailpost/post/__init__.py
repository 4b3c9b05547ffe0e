"""Post extraction from front matter and writing to disk."""

from .extract import extract_post, parse_front_matter
from .writer import write_post

__all__ = [
    "extract_post",
    "parse_front_matter",
    "write_post",
]
