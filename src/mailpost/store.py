"""Batch-scoped store of posts, images and warnings.

A :class:`BatchStore` is created for every pipeline run and handed
explicitly to each stage.  Nothing in it outlives the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mailpost.errors import MailpostError
from mailpost.models import Image, PipelineWarning, Post


def locator_matches(image: Image, locator: str) -> bool:
    """Return ``True`` when *locator* refers to *image*.

    The comparison is exact: the captured locator is not stripped,
    case-folded or URL-normalized.
    """
    return image.origin_identifier == locator


@dataclass
class BatchStore:
    """Working set for one batch of messages."""

    posts: list[Post] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)
    warnings: list[PipelineWarning] = field(default_factory=list)

    def add_post(self, post: Post) -> int:
        """Append *post* and return its index."""
        self.posts.append(post)
        return len(self.posts) - 1

    def add_image(self, image: Image) -> int:
        """Append *image* and return its index."""
        self.images.append(image)
        return len(self.images) - 1

    def find_image(self, locator: str) -> Image | None:
        """Return the first image whose origin identifier equals *locator*."""
        for image in self.images:
            if locator_matches(image, locator):
                return image
        return None

    def has_image(self, identifier: str) -> bool:
        return self.find_image(identifier) is not None

    def warn(self, error: MailpostError) -> PipelineWarning:
        """Record *error* as a non-fatal warning and return it."""
        warning = PipelineWarning(
            code=getattr(error.code, "value", error.code),
            message=error.message,
            context=dict(error.context),
        )
        self.warnings.append(warning)
        return warning
