"""Unit tests for the compilation splitter.

WHY: The splitter decides which compiler sees which file. A file wrongly
sent to the secondary compiler produces spurious errors; a file wrongly
withheld from the primary compiler breaks the whole build.

HOW: Tests are organized by policy plus the invariants shared by all
policies (primary gets everything, settings pass through, empty input).
"""

from __future__ import annotations

import pytest

from dual_solc.core.ir import CompilerInput, MarkerConvention, MarkerPolicy
from dual_solc.core.splitter import has_marker, split_input


def _input(**sources: str) -> CompilerInput:
    return CompilerInput(
        sources={"{}.sol".format(name): {"content": content} for name, content in sources.items()},
        settings={"optimizer": {"enabled": False}},
    )


class TestHasMarker:

    def test_marker_anywhere_in_content(self):
        source = {"content": "pragma solidity ^0.7.0;\n// @unsupported: ovm\ncontract A {}"}
        assert has_marker(source, "// @unsupported: ovm")

    def test_missing_marker(self):
        assert not has_marker({"content": "contract A {}"}, "// @unsupported: ovm")

    def test_different_tag_does_not_match(self):
        assert not has_marker({"content": "// @unsupported: evm"}, "// @unsupported: ovm")

    def test_missing_content_is_empty(self):
        assert not has_marker({"urls": ["ipfs://x"]}, "// @unsupported: ovm")


class TestActiveMarker:

    @pytest.mark.parametrize(
        "policy, expected",
        [
            (MarkerPolicy.OPT_OUT, "// @unsupported: l2"),
            (MarkerPolicy.OPT_IN, "// @supports: l2"),
            (MarkerPolicy.ALL, "// @unsupported: l2"),
        ],
    )
    def test_marker_follows_policy(self, policy, expected):
        assert MarkerConvention(policy=policy, tag="l2").active_marker == expected


class TestPrimaryGetsEverything:
    """primary.sources == input.sources for every policy."""

    @pytest.mark.parametrize("policy", list(MarkerPolicy))
    def test_primary_sources_equal_input(self, policy):
        compiler_input = _input(
            A="// @unsupported: ovm\ncontract A {}",
            B="// @supports: ovm\ncontract B {}",
            C="contract C {}",
        )
        primary, _ = split_input(compiler_input, MarkerConvention(policy=policy))
        assert primary.sources == compiler_input.sources
        assert list(primary.sources) == ["A.sol", "B.sol", "C.sol"]

    def test_source_entries_are_not_copied(self):
        compiler_input = _input(A="contract A {}")
        primary, secondary = split_input(compiler_input, MarkerConvention())
        assert primary.sources["A.sol"] is compiler_input.sources["A.sol"]
        assert secondary.sources["A.sol"] is compiler_input.sources["A.sol"]

    def test_derived_inputs_own_their_mappings(self):
        compiler_input = _input(A="contract A {}")
        primary, secondary = split_input(compiler_input, MarkerConvention())
        assert primary.sources is not compiler_input.sources
        assert secondary.sources is not primary.sources


class TestOptOutPolicy:

    def test_marked_file_excluded_from_secondary(self):
        compiler_input = _input(A="// @unsupported: ovm\ncontract A {}", B="contract B {}")
        _, secondary = split_input(compiler_input, MarkerConvention(policy=MarkerPolicy.OPT_OUT))
        assert list(secondary.sources) == ["B.sol"]

    def test_opt_in_marker_is_ignored(self):
        compiler_input = _input(A="// @supports: ovm\ncontract A {}")
        _, secondary = split_input(compiler_input, MarkerConvention(policy=MarkerPolicy.OPT_OUT))
        assert list(secondary.sources) == ["A.sol"]

    def test_tag_selects_marker(self):
        compiler_input = _input(A="// @unsupported: secondary\ncontract A {}")
        _, secondary = split_input(compiler_input, MarkerConvention(tag="secondary"))
        assert secondary.sources == {}


class TestOptInPolicy:

    def test_only_marked_files_reach_secondary(self):
        compiler_input = _input(A="// @supports: ovm\ncontract A {}", B="contract B {}")
        _, secondary = split_input(compiler_input, MarkerConvention(policy=MarkerPolicy.OPT_IN))
        assert list(secondary.sources) == ["A.sol"]

    def test_opt_out_marker_is_ignored(self):
        compiler_input = _input(A="// @unsupported: ovm\ncontract A {}")
        _, secondary = split_input(compiler_input, MarkerConvention(policy=MarkerPolicy.OPT_IN))
        assert secondary.sources == {}


class TestAllPolicy:

    def test_every_file_reaches_secondary(self):
        compiler_input = _input(A="// @unsupported: ovm\ncontract A {}", B="contract B {}")
        _, secondary = split_input(compiler_input, MarkerConvention(policy=MarkerPolicy.ALL))
        assert list(secondary.sources) == ["A.sol", "B.sol"]


class TestPassThrough:

    def test_settings_and_language_shared(self):
        compiler_input = _input(A="contract A {}")
        primary, secondary = split_input(compiler_input, MarkerConvention())
        assert primary.settings is compiler_input.settings
        assert secondary.settings is compiler_input.settings
        assert primary.language == secondary.language == "Solidity"

    def test_empty_sources_are_legal(self):
        compiler_input = CompilerInput(sources={}, settings={})
        primary, secondary = split_input(compiler_input, MarkerConvention())
        assert primary.sources == {}
        assert secondary.sources == {}

    def test_to_dict_round_trips_extra_source_keys(self):
        data = {
            "language": "Solidity",
            "sources": {"A.sol": {"content": "contract A {}", "keccak256": "0x01"}},
            "settings": {"evmVersion": "istanbul"},
        }
        primary, _ = split_input(CompilerInput.from_dict(data), MarkerConvention())
        assert primary.to_dict() == data
