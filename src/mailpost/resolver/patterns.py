"""Image reference patterns.

Each :class:`ReferencePattern` captures the image *locator* in a named
group ``locator``.  The three dialects are:

* markdown: ``![alt](locator "optional title")``; the alt text may hold
  one level of balanced brackets
* figure shortcode: ``{{< figure ... src="locator" ... >}}``
* img shortcode: ``{{< img ... src="locator" ... >}}``
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from mailpost.models import ReferenceStyle


@dataclass(frozen=True)
class ReferencePattern:
    """A compiled pattern for one reference dialect."""

    style: ReferenceStyle
    regex: re.Pattern[str]

    def finditer(self, body: str) -> Iterator[re.Match[str]]:
        """Yield matches in document order."""
        return self.regex.finditer(body)

    def locators(self, body: str) -> list[str]:
        return [m.group("locator") for m in self.finditer(body)]


def _shortcode(name: str) -> re.Pattern[str]:
    # The src attribute must sit inside the same {{< ... >}} tag.
    return re.compile(
        r"\{\{<\s*" + name + r"\b(?:(?!>\}\}).)*?(?<![\w-])src=\"(?P<locator>[^\"]*)\"",
        re.DOTALL,
    )


MARKDOWN = ReferencePattern(
    ReferenceStyle.MARKDOWN,
    re.compile(r"!\[(?:[^\[\]\n]|\[[^\[\]\n]*\])*\]\(\s*(?P<locator>[^\s)]+)"),
)

SHORTCODE_FIGURE = ReferencePattern(ReferenceStyle.SHORTCODE_FIGURE, _shortcode("figure"))

SHORTCODE_IMG = ReferencePattern(ReferenceStyle.SHORTCODE_IMG, _shortcode("img"))

# Resolution order.
PATTERNS: tuple[ReferencePattern, ...] = (MARKDOWN, SHORTCODE_FIGURE, SHORTCODE_IMG)
