from .sanitize import sanitize_filename, sanitize_image_name

__all__ = [
    "sanitize_filename",
    "sanitize_image_name",
]
