"""Tests for CLI main module."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from hub_cli.main import app
from hub_management import __version__
from hub_management.domain.entities import NotificationHubDescription
from hub_management.infrastructure.serialization import XmlEntitySerializer
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def hub_file(tmp_path: Path) -> Path:
    data: dict[str, Any] = {
        "path": "tenants/contoso",
        "registration_ttl": "P7D",
        "credentials": {"wns": {"PackageSid": "sid", "SecretKey": "wns-secret"}},
        "authorization_rules": [
            {
                "key_name": "DefaultFullSharedAccessSignature",
                "primary_key": "full-key",
                "rights": ["Listen", "Send", "Manage"],
            },
        ],
    }
    path = tmp_path / "hub.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def xml_file(tmp_path: Path) -> Path:
    description = NotificationHubDescription("tenants/contoso")
    description.set_access_passwords("full", "full-key", "listen", "listen-key")
    description.is_disabled = True
    description._apply_server_state({"daily_operations": 42})
    path = tmp_path / "hub.xml"
    path.write_bytes(XmlEntitySerializer().serialize(description))
    return path


class TestCLICommands:
    """Test CLI commands."""

    def test_version_command(self) -> None:
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"Hub CLI version {__version__}" in result.stdout

    def test_validate_command(self, hub_file: Path) -> None:
        """Test validating a well-formed description."""
        result = runner.invoke(app, ["validate", str(hub_file)])
        assert result.exit_code == 0
        assert "Hub description 'tenants/contoso' is valid" in result.stdout

    def test_validate_reports_entity_errors(self, tmp_path: Path) -> None:
        """Test that rule violations are reported with their error code."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"path": "hub", "user_metadata": "x" * 1025}))

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Error [OUT_OF_RANGE]" in result.output

    def test_validate_reports_malformed_entries(self, tmp_path: Path) -> None:
        """Test that wrongly typed entries are reported as validation errors."""
        path = tmp_path / "typed.json"
        path.write_text(
            json.dumps(
                {"path": "hub", "authorization_rules": [{"key_name": "r", "primary_key": 123}]}
            )
        )

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Error [VALIDATION_ERROR]" in result.output
        assert "authorization_rules.0.primary_key" in result.output

    def test_validate_invalid_json(self, tmp_path: Path) -> None:
        """Test that unparsable files are reported."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "is not valid JSON" in result.output

    def test_validate_missing_file(self, tmp_path: Path) -> None:
        """Test that unreadable files are reported."""
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "cannot read" in result.output

    def test_render_command(self, hub_file: Path) -> None:
        """Test rendering the XML document."""
        result = runner.invoke(app, ["render", str(hub_file)])

        assert result.exit_code == 0
        assert result.stdout.startswith("<?xml")
        assert "<Path>tenants/contoso</Path>" in result.stdout
        assert "<RegistrationTtl>P7D</RegistrationTtl>" in result.stdout
        assert "<KeyName>DefaultFullSharedAccessSignature</KeyName>" in result.stdout

    def test_render_pretty(self, hub_file: Path) -> None:
        """Test indented rendering."""
        result = runner.invoke(app, ["render", str(hub_file), "--pretty"])

        assert result.exit_code == 0
        assert "\n  <Path>tenants/contoso</Path>" in result.stdout

    def test_render_reports_duplicate_rules(self, tmp_path: Path) -> None:
        """Test that duplicate rule names fail rendering."""
        path = tmp_path / "dup.json"
        rules = [{"key_name": "a"}, {"key_name": "a"}]
        path.write_text(json.dumps({"path": "hub", "authorization_rules": rules}))

        result = runner.invoke(app, ["render", str(path)])

        assert result.exit_code == 1
        assert "Error [CONFLICT]" in result.output

    def test_inspect_command(self, xml_file: Path) -> None:
        """Test summarizing an XML document."""
        result = runner.invoke(app, ["inspect", str(xml_file)])

        assert result.exit_code == 0
        summary = json.loads(result.stdout)
        assert summary["path"] == "tenants/contoso"
        assert summary["is_disabled"] is True
        assert summary["is_read_only"] is True
        assert summary["usage"]["daily_operations"] == 42
        assert [rule["key_name"] for rule in summary["authorization_rules"]] == ["full", "listen"]
        assert "full-key" not in result.stdout

    def test_inspect_malformed_document(self, tmp_path: Path) -> None:
        """Test that malformed XML is reported."""
        path = tmp_path / "bad.xml"
        path.write_text("<NotificationHubDescription>")

        result = runner.invoke(app, ["inspect", str(path)])

        assert result.exit_code == 1
        assert "Error [SERIALIZATION_ERROR]" in result.output

    def test_invalid_configuration(self, hub_file: Path) -> None:
        """Test that invalid environment configuration fails every command."""
        with patch.dict(os.environ, {"NOTIFICATION_HUBS_LOGGING__LEVEL": "LOUD"}, clear=False):
            result = runner.invoke(app, ["validate", str(hub_file)])

        assert result.exit_code == 1
        assert "Error [CONFIGURATION_ERROR]" in result.output

    def test_verbose_flag(self, hub_file: Path) -> None:
        """Test that verbose mode still runs the command."""
        result = runner.invoke(app, ["--verbose", "validate", str(hub_file)])

        assert result.exit_code == 0
        assert "is valid" in result.output
