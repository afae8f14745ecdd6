"""
Tests for the naming-resolve command line in social.graze.naming.resolve.__main__
"""

import json
import sys

import pytest

from social.graze.naming.resolve.__main__ import realMain, resolve_with_files
from social.graze.naming.resolve.preferred_id import (
    FailureKind,
    ResolutionFailure,
    ResolutionRequest,
    ResolutionSuccess,
)
from tests.test_helpers import (
    GTIN_OID,
    GTIN_URI,
    US_SSN_OID,
    US_SSN_URI,
    bundle_json,
    naming_system_json,
)


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "naming-systems.json"
    path.write_text(
        json.dumps(
            bundle_json(
                [
                    naming_system_json(
                        "USSocialSecurityNumber", [("uri", US_SSN_URI), ("oid", US_SSN_OID)]
                    ),
                    naming_system_json(
                        "GlobalTradeItemNumber", [("oid", GTIN_OID), ("uri", GTIN_URI)]
                    ),
                ]
            )
        )
    )
    return str(path)


class TestResolveWithFiles:
    async def test_resolves(self, registry_file):
        outcome = await resolve_with_files(
            [registry_file], ResolutionRequest(value=GTIN_OID, requested_kind="Uri")
        )
        assert outcome == ResolutionSuccess(value=GTIN_URI)

    async def test_not_found(self, registry_file):
        outcome = await resolve_with_files(
            [registry_file], ResolutionRequest(value="1.9.9", requested_kind="Uri")
        )
        assert isinstance(outcome, ResolutionFailure)
        assert outcome.kind == FailureKind.not_found


class TestRealMain:
    async def test_success(self, registry_file, monkeypatch, capsys):
        monkeypatch.setattr(
            sys, "argv", ["naming-resolve", US_SSN_URI, "oid", "--file", registry_file]
        )

        assert await realMain() == 0
        assert capsys.readouterr().out.strip() == US_SSN_OID

    async def test_failure(self, registry_file, monkeypatch, capsys):
        monkeypatch.setattr(
            sys, "argv", ["naming-resolve", US_SSN_URI, "Urs", "--file", registry_file]
        )

        assert await realMain() == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == (
            "unrecognized_kind: Requested identifier type was not recognized."
        )
