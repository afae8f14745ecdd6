"""FHIR resource payloads exchanged by the application layer.

Only the parts of Parameters, OperationOutcome, CapabilityStatement and
NamingSystem that the service reads or writes are modelled. Resolution outcomes
are turned into these resources here, never in the resolver.
"""

import json
from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from social.graze.naming.resolve.preferred_id import (
    FailureKind,
    ResolutionOutcome,
    ResolutionSuccess,
)
from social.graze.naming.resolve.registry import IdentifierRecord, build_record

FHIR_JSON_CONTENT_TYPE = "application/fhir+json"

FHIR_VERSION = "4.0.1"

FAILURE_STATUS: Dict[FailureKind, int] = {
    FailureKind.invalid_request: 400,
    FailureKind.unrecognized_kind: 400,
    FailureKind.not_found: 404,
    FailureKind.ambiguous_or_missing_representation: 404,
    FailureKind.registry_error: 500,
}


class ParametersParameter(BaseModel):
    """Named parameter. The value is carried by whichever value[x] field is present."""

    model_config = ConfigDict(extra="allow")

    name: str

    def value(self) -> Optional[str]:
        for key, item in (self.model_extra or {}).items():
            if key.startswith("value") and isinstance(item, (str, int, float, bool)):
                return str(item)
        return None


class Parameters(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    resource_type: Literal["Parameters"] = Field(alias="resourceType")
    parameter: List[ParametersParameter] = []

    def get_single(self, name: str) -> Optional[str]:
        """Return the value of the parameter called name.

        A parameter that is absent or repeated yields None.
        """
        matches = [p for p in self.parameter if p.name == name]
        if len(matches) != 1:
            return None
        return matches[0].value()


class NamingSystemUniqueId(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    value: str


class NamingSystemResource(BaseModel):
    """NamingSystem resource as found in registry import files."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    resource_type: Literal["NamingSystem"] = Field(alias="resourceType")
    name: str
    status: str = "active"
    kind: str = "identifier"
    unique_id: List[NamingSystemUniqueId] = Field(alias="uniqueId", default=[])

    def to_record(self) -> IdentifierRecord:
        """Registry record for this resource, without unique ids of unknown type."""
        return build_record(
            self.name, [(unique_id.type, unique_id.value) for unique_id in self.unique_id]
        )


def parse_naming_systems(data: Union[str, bytes]) -> List[NamingSystemResource]:
    """Parse a NamingSystem resource, or a Bundle of them, from JSON.

    Bundle entries holding other resource types are skipped.

    Raises:
        ValueError: If the document is neither a NamingSystem nor a Bundle
    """
    document = json.loads(data)
    if not isinstance(document, dict):
        raise ValueError("Expected a FHIR resource object")

    resource_type = document.get("resourceType", None)
    if resource_type == "NamingSystem":
        return [NamingSystemResource.model_validate(document)]
    if resource_type == "Bundle":
        return [
            NamingSystemResource.model_validate(entry["resource"])
            for entry in document.get("entry", [])
            if isinstance(entry.get("resource", None), dict)
            and entry["resource"].get("resourceType", None) == "NamingSystem"
        ]
    raise ValueError(f"Expected a NamingSystem or a Bundle, got {resource_type!r}")


def read_naming_systems(paths: List[str]) -> List[NamingSystemResource]:
    naming_systems: List[NamingSystemResource] = []
    for path in paths:
        with open(path, "rb") as fd:
            naming_systems.extend(parse_naming_systems(fd.read()))
    return naming_systems


def parameters_result(value: str) -> Dict[str, Any]:
    return {
        "resourceType": "Parameters",
        "parameter": [{"name": "result", "valueString": value}],
    }


def operation_outcome(diagnostics: str, code: str = "processing") -> Dict[str, Any]:
    return {
        "resourceType": "OperationOutcome",
        "issue": [
            {
                "severity": "error",
                "code": code,
                "diagnostics": diagnostics,
            }
        ],
    }


def render_outcome(outcome: ResolutionOutcome) -> Tuple[int, Dict[str, Any]]:
    """Map a resolution outcome onto an HTTP status and a FHIR resource body.

    Args:
        outcome: Result of PreferredIdResolver.resolve

    Returns:
        (status, body) where body is a Parameters resource on success and an
        OperationOutcome otherwise
    """
    if isinstance(outcome, ResolutionSuccess):
        return 200, parameters_result(outcome.value)
    return FAILURE_STATUS[outcome.kind], operation_outcome(outcome.detail)


def capability_statement(
    software_name: str, operations: List[Dict[str, str]]
) -> Dict[str, Any]:
    """Build the CapabilityStatement served from /metadata.

    Args:
        software_name: Name reported under software
        operations: {"name", "definition"} entries for enabled custom operations
    """
    rest: Dict[str, Any] = {"mode": "server"}
    if operations:
        rest["operation"] = operations
    return {
        "resourceType": "CapabilityStatement",
        "status": "active",
        "date": date.today().isoformat(),
        "kind": "instance",
        "software": {"name": software_name},
        "fhirVersion": FHIR_VERSION,
        "format": ["json"],
        "rest": [rest],
    }
