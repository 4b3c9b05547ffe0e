"""Shared test fixtures for the mailpost test suite."""

from __future__ import annotations

import io
from email.message import EmailMessage
from pathlib import Path

import pytest
from PIL import Image as PILImage

from mailpost.config import MailpostConfig
from mailpost.store import BatchStore


@pytest.fixture
def config(tmp_path: Path) -> MailpostConfig:
    """Configuration writing under a temporary directory."""
    return MailpostConfig(
        image_dir=str(tmp_path / "static" / "images" / "<date>"),
        post_dir=str(tmp_path / "content" / "<type>" / "<date>"),
        date_path_fmt="%Y/%m",
        base_url="https://example.com",
        image_path="images",
        max_img_width=100,
        fetch_max_attempts=3,
        fetch_retry_base_delay=0.0,
        fetch_retry_max_delay=0.0,
        fetch_retry_jitter=False,
    )


@pytest.fixture
def store() -> BatchStore:
    return BatchStore()


@pytest.fixture
def make_image_bytes():
    """Factory producing encoded image bytes of a given size."""

    def _make(
        width: int = 40,
        height: int = 20,
        fmt: str = "PNG",
        mode: str = "RGB",
        color=(200, 30, 30),
    ) -> bytes:
        img = PILImage.new(mode, (width, height), color)
        out = io.BytesIO()
        img.save(out, format=fmt)
        return out.getvalue()

    return _make


@pytest.fixture
def make_message():
    """Factory building a message with a text body and image attachments."""

    def _make(
        body: str,
        attachments: list[tuple[str, bytes, str]] | None = None,
        sender: str = "Del Putnam <del@example.com>",
        subject: str = "New post",
    ) -> bytes:
        msg = EmailMessage()
        msg["From"] = sender
        msg["To"] = "blog@example.com"
        msg["Subject"] = subject
        msg.set_content(body)
        for filename, data, subtype in attachments or []:
            msg.add_attachment(data, maintype="image", subtype=subtype, filename=filename)
        return msg.as_bytes()

    return _make


FRONT_MATTER = """---
title: An Apple a Day
date: 2015-06-01
type: Blog
---
"""


@pytest.fixture
def front_matter() -> str:
    return FRONT_MATTER
