"""Tests for configuration parsing and marker convention loading."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from dual_solc import config
from dual_solc.core.ir import MarkerConvention, MarkerPolicy


class TestParsePolicy:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("opt-out", MarkerPolicy.OPT_OUT),
            ("opt-in", MarkerPolicy.OPT_IN),
            ("all", MarkerPolicy.ALL),
            (" Opt-In ", MarkerPolicy.OPT_IN),
        ],
    )
    def test_known_policies(self, value, expected):
        assert config.parse_policy(value) is expected

    def test_unknown_policy_lists_available(self):
        with pytest.raises(ValueError, match="Unknown marker policy 'sometimes'") as exc_info:
            config.parse_policy("sometimes")
        assert "opt-out, opt-in, all" in str(exc_info.value)


class TestLoadMarkerConvention:

    def test_environment_defaults(self):
        with patch.object(config, "DEFAULT_MARKER_POLICY", "opt-in"), \
                patch.object(config, "DEFAULT_TAG", "l2"), \
                patch.object(config, "DEFAULT_DEMOTE_MARKED_ERRORS", True), \
                patch.object(config, "DEFAULT_DEMOTE_UNLESS_OPTED_IN", True):
            convention = config.load_marker_convention()
        assert convention == MarkerConvention(
            policy=MarkerPolicy.OPT_IN,
            tag="l2",
            demote_marked_errors=True,
            demote_unless_opted_in=True,
        )

    def test_arguments_override_environment(self):
        with patch.object(config, "DEFAULT_MARKER_POLICY", "opt-in"), \
                patch.object(config, "DEFAULT_TAG", "l2"), \
                patch.object(config, "DEFAULT_DEMOTE_MARKED_ERRORS", True):
            convention = config.load_marker_convention(
                policy="all", tag="ovm", demote_marked_errors=False,
            )
        assert convention.policy is MarkerPolicy.ALL
        assert convention.tag == "ovm"
        assert convention.demote_marked_errors is False

    def test_tag_is_stripped(self):
        assert config.load_marker_convention(tag="  ovm ").tag == "ovm"

    @pytest.mark.parametrize("tag", ["", "   "])
    def test_blank_tag_rejected(self, tag):
        with pytest.raises(ValueError, match="Marker tag must not be empty"):
            config.load_marker_convention(tag=tag)

    def test_bad_environment_policy_rejected(self):
        with patch.object(config, "DEFAULT_MARKER_POLICY", "bogus"):
            with pytest.raises(ValueError, match="Unknown marker policy 'bogus'"):
                config.load_marker_convention()
