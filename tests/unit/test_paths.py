"""Tests for directory templating, date formatting and URL joining."""

from pathlib import Path

import pytest

from mailpost.errors import ErrorCode, MailpostOutputError
from mailpost.paths import (
    ZERO_DATE,
    apply_path_template,
    ensure_dir,
    format_date_path,
    join_url,
    parse_post_date,
)

# =========================================================================
# apply_path_template
# =========================================================================

class TestApplyPathTemplate:

    def test_both_tokens(self):
        assert apply_path_template("content/<type>/<date>", "blog", "2015/06") == "content/blog/2015/06"

    def test_type_is_trimmed(self):
        assert apply_path_template("c/<type>", "  blog  ") == "c/blog"

    def test_each_token_replaced_once(self):
        result = apply_path_template("<type>/<type>/<date>/<date>", "a", "b")
        assert result == "a/<type>/b/<date>"

    def test_empty_type_leaves_token(self):
        assert apply_path_template("c/<type>/<date>", "", "2015") == "c/<type>/2015"

    def test_empty_date_leaves_token(self):
        assert apply_path_template("c/<date>", "blog", "") == "c/<date>"

    def test_type_replaced_before_date(self):
        # A type value containing <date> is itself rewritten by the date step.
        assert apply_path_template("<type>/x", "<date>", "2015") == "2015/x"

    def test_no_tokens_is_unchanged(self):
        assert apply_path_template("static/images", "blog", "2015/06") == "static/images"

    def test_reapplying_is_idempotent(self):
        once = apply_path_template("c/<type>/<date>", "blog", "2015/06")
        assert apply_path_template(once, "blog", "2015/06") == once


# =========================================================================
# Date formatting
# =========================================================================

class TestFormatDatePath:

    def test_year_month(self):
        assert format_date_path("2015-06-01", "%Y/%m") == "2015/06"

    def test_custom_layout(self):
        assert format_date_path("2015-06-01", "%Y-%m-%d") == "2015-06-01"

    @pytest.mark.parametrize("value", ["", "June 1st", "2015-13-01", "2015/06/01"])
    def test_unparsable_degrades_to_zero_date(self, value):
        assert format_date_path(value, "%Y/%m") == "0001/01"

    def test_parse_post_date_zero(self):
        assert parse_post_date("nope") == ZERO_DATE


# =========================================================================
# ensure_dir
# =========================================================================

class TestEnsureDir:

    def test_creates_nested(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        assert ensure_dir(target) == target
        assert target.is_dir()

    def test_idempotent(self, tmp_path):
        ensure_dir(tmp_path / "x")
        ensure_dir(str(tmp_path / "x"))
        assert (tmp_path / "x").is_dir()

    def test_failure_raises_output_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a dir")
        with pytest.raises(MailpostOutputError) as excinfo:
            ensure_dir(blocker / "sub")
        assert excinfo.value.code == ErrorCode.OUTPUT_ERROR
        assert excinfo.value.context["path"] == str(Path(blocker / "sub"))


# =========================================================================
# join_url
# =========================================================================

class TestJoinURL:

    def test_keeps_scheme(self):
        assert join_url("https://example.com", "images", "2015/06", "a.jpg") == (
            "https://example.com/images/2015/06/a.jpg"
        )

    def test_collapses_slashes(self):
        assert join_url("https://example.com/", "/images/", "/2015/06/", "a.jpg") == (
            "https://example.com/images/2015/06/a.jpg"
        )

    def test_skips_empty_segments(self):
        assert join_url("https://example.com", "", "a.jpg") == "https://example.com/a.jpg"

    def test_empty_base_gives_root_relative(self):
        assert join_url("", "images", "a.jpg") == "/images/a.jpg"
