"""
CLI (cli/__main__.py)

Tests the `fm tree` and `fm classify` commands.
"""

import pytest
from click.testing import CliRunner

from faultmap.cli import __version__
from faultmap.cli.__main__ import build_chain, cli, parse_kind
from faultmap.core import FaultKind


@pytest.fixture
def runner():
    return CliRunner()


class TestHelpers:

    def test_parse_kind(self):
        assert parse_kind("CONNECTIVITY") is FaultKind.CONNECTIVITY
        assert parse_kind("ConnectivityFault") is FaultKind.CONNECTIVITY
        assert parse_kind("PaymentFault") == FaultKind("PaymentFault")

    def test_build_chain(self):
        root = build_chain(("GENERIC:outer", "FATAL_SIGNAL"))
        assert root.kind == FaultKind.GENERIC
        assert root.message == "outer"
        assert root.cause.kind == FaultKind.FATAL_SIGNAL
        assert root.cause.message is None


class TestCommands:

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_tree(self, runner):
        result = runner.invoke(cli, ["tree"])
        assert result.exit_code == 0
        assert "CORE:ANY" in result.output
        assert "CORE:RETRY_EXHAUSTED" in result.output
        assert "CORE:FATAL" in result.output

    def test_classify_critical(self, runner):
        result = runner.invoke(cli, ["classify", "SevereFault:AN ERROR"])
        assert result.exit_code == 0
        assert "CORE:CRITICAL" in result.output
        assert "AN ERROR (SevereFault)." in result.output
        assert "single_severe" in result.output

    def test_classify_existing_kept(self, runner):
        result = runner.invoke(cli, ["classify", "GENERIC", "-e", "TRANSFORMATION"])
        assert result.exit_code == 0
        assert "CORE:TRANSFORMATION" in result.output
        assert "existing_error" in result.output
        assert "Messaging Error Message" in result.output

    def test_classify_fatal_overrides_existing(self, runner):
        result = runner.invoke(
            cli,
            ["classify", "GENERIC", "CONNECTIVITY", "FATAL_SIGNAL:CRITICAL!!!!!!", "-e", "CORE:TRANSFORMATION"],
        )
        assert result.exit_code == 0
        assert "CORE:FATAL" in result.output
        assert "CRITICAL!!!!!! (FatalSignal)." in result.output

    def test_classify_unknown_existing(self, runner):
        result = runner.invoke(cli, ["classify", "GENERIC", "-e", "NOPE:NOPE"])
        assert result.exit_code == 2

    def test_classify_requires_links(self, runner):
        result = runner.invoke(cli, ["classify"])
        assert result.exit_code != 0

    def test_tree_draws_branches(self, runner):
        result = runner.invoke(cli, ["tree"])
        assert "├── " in result.output
        assert "└── " in result.output

    def test_classify_with_component(self, runner):
        result = runner.invoke(
            cli, ["classify", "CONNECTIVITY:refused", "--component", "http:request", "--verbose"]
        )
        assert result.exit_code == 0
        assert "CORE:CONNECTIVITY" in result.output
        assert "refused (ConnectivityFault)." in result.output
        assert "locator" in result.output
