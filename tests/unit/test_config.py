"""Tests for MailpostConfig validation and TOML loading."""

from __future__ import annotations

import pytest

from mailpost.config import MailpostConfig, layout_to_strftime, load_config
from mailpost.errors import ErrorCode, MailpostConfigError


class TestDefaults:

    def test_defaults(self):
        config = MailpostConfig()
        assert config.image_dir == "static/images/<date>"
        assert config.post_dir == "content/<type>/<date>"
        assert config.date_path_fmt == "%Y/%m"
        assert config.max_img_width == 1024
        assert config.jpeg_quality == 75
        assert config.post_from == ""
        assert config.metrics is None


class TestValidation:

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("max_img_width", 0),
            ("max_img_width", -5),
            ("jpeg_quality", 0),
            ("jpeg_quality", 96),
            ("fetch_timeout_seconds", 0),
            ("fetch_max_attempts", 0),
            ("fetch_retry_base_delay", -1),
            ("fetch_retry_max_delay", -0.5),
            ("image_dir", ""),
            ("post_dir", ""),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValueError, match=field):
            MailpostConfig(**{field: value})

    def test_boundary_values_accepted(self):
        config = MailpostConfig(max_img_width=1, jpeg_quality=95, fetch_max_attempts=1)
        assert config.jpeg_quality == 95


class TestLayoutToStrftime:

    @pytest.mark.parametrize(
        ("layout", "expected"),
        [
            ("2006/01", "%Y/%m"),
            ("2006-01-02", "%Y-%m-%d"),
            ("06/Jan", "%y/%b"),
            ("2006/January", "%Y/%B"),
            ("%Y/%m", "%Y/%m"),
            ("posts", "posts"),
        ],
    )
    def test_translation(self, layout, expected):
        assert layout_to_strftime(layout) == expected


class TestLoadConfig:

    def test_legacy_keys(self, tmp_path):
        path = tmp_path / "mailpost.toml"
        path.write_text(
            'Server = "imap.example.com:993"\n'
            'User = "me"\n'
            'Password = "secret"\n'
            'ImageDir = "site/static/images/<date>"\n'
            'PostDir = "site/content/<type>/<date>"\n'
            'DatePathFmt = "2006/01"\n'
            'BaseURL = "https://blog.example.com"\n'
            'ImagePath = "img"\n'
            "MaxImgWidth = 800\n"
            'PostFrom = "me@example.com"\n'
        )
        config = load_config(path)
        assert config.image_dir == "site/static/images/<date>"
        assert config.post_dir == "site/content/<type>/<date>"
        assert config.date_path_fmt == "%Y/%m"
        assert config.base_url == "https://blog.example.com"
        assert config.image_path == "img"
        assert config.max_img_width == 800
        assert config.post_from == "me@example.com"

    def test_snake_case_keys(self, tmp_path):
        path = tmp_path / "mailpost.toml"
        path.write_text('jpeg_quality = 90\nfetch_max_attempts = 5\ndate_path_fmt = "%Y"\n')
        config = load_config(str(path))
        assert config.jpeg_quality == 90
        assert config.fetch_max_attempts == 5
        assert config.date_path_fmt == "%Y"

    def test_metrics_key_ignored(self, tmp_path):
        path = tmp_path / "mailpost.toml"
        path.write_text('metrics = "statsd"\n')
        assert load_config(path).metrics is None

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "mailpost.toml"
        path.write_text("")
        assert load_config(path) == MailpostConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(MailpostConfigError) as excinfo:
            load_config(tmp_path / "nope.toml")
        assert excinfo.value.code == ErrorCode.CONFIG_ERROR
        assert excinfo.value.context["path"] == str(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "mailpost.toml"
        path.write_text("ImageDir = \n")
        with pytest.raises(MailpostConfigError):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "mailpost.toml"
        path.write_text("MaxImgWidth = 0\n")
        with pytest.raises(ValueError):
            load_config(path)

    @pytest.mark.parametrize(
        ("line", "key"),
        [
            ('MaxImgWidth = "800"', "MaxImgWidth"),
            ("MaxImgWidth = true", "MaxImgWidth"),
            ("MaxImgWidth = 800.5", "MaxImgWidth"),
            ("DatePathFmt = 2006", "DatePathFmt"),
            ('fetch_retry_jitter = "yes"', "fetch_retry_jitter"),
            ("fetch_retry_jitter = 1", "fetch_retry_jitter"),
            ('fetch_timeout_seconds = "30"', "fetch_timeout_seconds"),
        ],
    )
    def test_mistyped_value(self, tmp_path, line, key):
        path = tmp_path / "mailpost.toml"
        path.write_text(line + "\n")
        with pytest.raises(MailpostConfigError) as excinfo:
            load_config(path)
        assert excinfo.value.code == ErrorCode.CONFIG_ERROR
        assert excinfo.value.context == {"path": str(path), "key": key}

    def test_integer_accepted_for_float_field(self, tmp_path):
        path = tmp_path / "mailpost.toml"
        path.write_text("fetch_timeout_seconds = 10\n")
        config = load_config(path)
        assert config.fetch_timeout_seconds == 10.0
        assert isinstance(config.fetch_timeout_seconds, float)
