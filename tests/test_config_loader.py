"""
Tests for configuration loading

Covers the bundled defaults, local overrides, remote overrides and schema
validation.
"""
from unittest import mock

import pytest
import requests

from form_validation import Form, TextBinding
from form_validation.config_loader import (
    FormConfig,
    default_config,
    load_config,
    load_yaml_document,
)


@pytest.fixture
def override_file(tmp_path):
    path = tmp_path / "override.yaml"
    path.write_text(
        "real_time:\n"
        "  debounce_ms: 250\n"
        "messages:\n"
        "  not_empty: \"is required\"\n"
    )
    return path


class TestBundledConfig:
    """Test the bundled default configuration."""

    def test_defaults(self):
        """Test bundled real-time defaults."""
        config = load_config()
        assert config.source == "bundled"
        assert config.real_time == {"debounce_ms": 500, "disable_submit": False}

    def test_every_message_key_present(self):
        """Test that templates exist for every key assertions use."""
        config = load_config()
        for key in ("not_empty", "length_between", "email", "url", "uri",
                    "number", "decimal", "checked", "selection_required"):
            assert config.message(key)

    def test_unknown_message_key(self):
        """Test message() with an unknown key."""
        with pytest.raises(KeyError, match="No message template"):
            load_config().message("nope")

    def test_default_config_cached(self):
        """Test that the bundled config is loaded once."""
        assert default_config() is default_config()


class TestOverrides:
    """Test merging override documents."""

    def test_path_override(self, override_file):
        """Test a local path override merges over the defaults."""
        config = load_config(override_file)
        assert config.real_time["debounce_ms"] == 250
        assert config.real_time["disable_submit"] is False
        assert config.message("not_empty") == "is required"
        assert config.message("email") == "must be a valid email address"

    def test_file_uri_override(self, override_file):
        """Test a file:// URI."""
        config = load_config(override_file.as_uri())
        assert config.real_time["debounce_ms"] == 250

    def test_override_reaches_descriptions(self, override_file):
        """Test that forms use the overridden templates."""
        form = Form(config=load_config(override_file))
        binding = TextBinding("")
        form.input("a", "A", binding).is_not_empty()
        form.validate()
        assert binding.error == "is required"

    def test_invalid_override_rejected(self, tmp_path):
        """Test schema validation of the merged document."""
        path = tmp_path / "bad.yaml"
        path.write_text("real_time:\n  debounce_ms: -3\n")
        with pytest.raises(ValueError, match="real_time -> debounce_ms"):
            load_config(path)

    def test_unknown_section_rejected(self, tmp_path):
        """Test that unknown top-level keys are rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("colors:\n  error: red\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_non_mapping_override_rejected(self, tmp_path):
        """Test that an override must be a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)

    def test_unsupported_scheme(self):
        """Test an unsupported URI scheme."""
        with pytest.raises(ValueError, match="Unsupported URI scheme"):
            load_yaml_document("ftp://example.com/config.yaml")


class TestRemoteOverrides:
    """Test http(s) overrides (requests is mocked)."""

    def test_remote_override(self):
        """Test that remote documents are fetched and merged."""
        response = mock.Mock()
        response.text = "real_time:\n  disable_submit: true\n"
        response.raise_for_status.return_value = None
        with mock.patch("form_validation.config_loader.requests.get", return_value=response) as get:
            config = load_config("https://config.example.com/forms.yaml")
        get.assert_called_once()
        assert get.call_args.kwargs["timeout"] > 0
        assert config.real_time["disable_submit"] is True

    def test_remote_failure_wrapped(self):
        """Test that fetch errors surface as RuntimeError."""
        with mock.patch(
            "form_validation.config_loader.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            with pytest.raises(RuntimeError, match="Failed to fetch"):
                load_config("https://config.example.com/forms.yaml")


def test_form_config_repr():
    """Test FormConfig repr names its source."""
    assert "bundled" in repr(FormConfig({"real_time": {}, "messages": {}}))
