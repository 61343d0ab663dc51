"""
Tests for the command policy wrapper — fold ⊃ timing ⊃ retry ⊃ assertion.
"""

import pytest
from pydantic import ValidationError

from buildscript.core.models.directive import CommandOptions
from buildscript.core.shell.policy import wrap
from buildscript.core.shell.prelude import PRELUDE, RETRY_ATTEMPTS


class TestWrap:
    def test_bare(self):
        options = CommandOptions(timing=False, assert_=False)
        assert wrap("true", options) == ["true", "build_result=$?"]

    def test_status_always_captured(self):
        for options in (
            CommandOptions(),
            CommandOptions(retry=True),
            CommandOptions(assert_=False, timing=False),
        ):
            assert "build_result=$?" in wrap("ls", options)

    def test_retry_quotes_command(self):
        lines = wrap("curl -o- -L https://x | bash", CommandOptions(retry=True, timing=False))
        assert lines[0] == "build_retry 'curl -o- -L https://x | bash'"

    def test_full_nesting_order(self):
        options = CommandOptions(retry=True, fold="install")
        lines = wrap("npm install", options, timer_id=7)
        assert lines == [
            "build_fold begin install",
            "build_time_start 7",
            "build_retry 'npm install'",
            "build_result=$?",
            "build_time_finish",
            "build_assert 'npm install'",
            "build_fold end install",
        ]

    def test_assertion_after_retry(self):
        lines = wrap("yarn", CommandOptions(retry=True))
        assert lines.index("build_retry yarn") < lines.index("build_assert yarn")

    def test_assert_disabled(self):
        lines = wrap("yarn", CommandOptions(retry=True, assert_=False))
        assert not any(line.startswith("build_assert") for line in lines)

    def test_assert_alias(self):
        assert CommandOptions(**{"assert": False}).assert_ is False

    def test_options_frozen(self):
        options = CommandOptions()
        with pytest.raises(ValidationError):
            options.retry = True


class TestPrelude:
    def test_retry_budget_defined_once(self):
        assert f"build_retry_attempts={RETRY_ATTEMPTS}" in PRELUDE
        assert PRELUDE.count("build_retry_attempts=") == 1

    def test_helpers_present(self):
        for helper in (
            "build_fold()",
            "build_time_start()",
            "build_time_finish()",
            "build_assert()",
            "build_retry()",
            "build_vers2int()",
        ):
            assert helper in PRELUDE

    def test_shebang(self):
        assert PRELUDE.startswith("#!/bin/sh\n")
