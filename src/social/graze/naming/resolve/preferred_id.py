"""NamingSystem preferred identifier resolution.

Translates an identifier value expressed in one representation (a URI, an OID,
...) into the equivalent value of another representation, using the unique ids
recorded for the matching NamingSystem in the registry.
"""

import logging
from enum import IntEnum
from typing import Optional, Union

import sentry_sdk
from pydantic import BaseModel

from social.graze.naming.app.metrics import MetricsClient, NoOpMetricsClient
from social.graze.naming.resolve.registry import (
    IdentifierRecord,
    RegistryLookup,
    RepresentationKind,
    parse_representation_kind,
)

logger = logging.getLogger(__name__)


class ResolutionRequest(BaseModel):
    """Identifier value and the representation kind it should be resolved to."""

    value: Optional[str] = None
    requested_kind: Optional[str] = None


class FailureKind(IntEnum):
    """Classified reason a resolution did not produce a value."""

    invalid_request = 1
    unrecognized_kind = 2
    not_found = 3
    ambiguous_or_missing_representation = 4
    registry_error = 5


class ResolutionSuccess(BaseModel):
    value: str


class ResolutionFailure(BaseModel):
    """Failed resolution.

    Use the static constructors so every failure of a kind carries the same detail.
    """

    kind: FailureKind
    detail: str

    @staticmethod
    def missing_arguments() -> "ResolutionFailure":
        """The identifier value or the requested type was not supplied."""
        return ResolutionFailure(
            kind=FailureKind.invalid_request,
            detail="Missing arguments in the request.",
        )

    @staticmethod
    def unrecognized_kind() -> "ResolutionFailure":
        """The requested type is not a known representation kind."""
        return ResolutionFailure(
            kind=FailureKind.unrecognized_kind,
            detail="Requested identifier type was not recognized.",
        )

    @staticmethod
    def not_found() -> "ResolutionFailure":
        """No registry record matches the identifier value."""
        return ResolutionFailure(
            kind=FailureKind.not_found,
            detail="Provided identifier was not found.",
        )

    @staticmethod
    def ambiguous_or_missing() -> "ResolutionFailure":
        """The matching record has zero or several unique ids of the requested type."""
        return ResolutionFailure(
            kind=FailureKind.ambiguous_or_missing_representation,
            detail="No, or multiple identifiers of the specified type found.",
        )

    @staticmethod
    def registry_error() -> "ResolutionFailure":
        """The registry could not be queried."""
        return ResolutionFailure(
            kind=FailureKind.registry_error,
            detail="The identifier registry could not be queried.",
        )


ResolutionOutcome = Union[ResolutionSuccess, ResolutionFailure]


def select_representation(
    record: IdentifierRecord, kind: RepresentationKind
) -> ResolutionOutcome:
    """Pick the single unique id of the requested kind from a record.

    Zero and multiple matches are reported the same way.

    Args:
        record: Registry record matching the identifier value
        kind: Representation kind to select

    Returns:
        ResolutionSuccess with the unique id value, or an ambiguous_or_missing failure
    """
    matches = record.representations_of(kind)
    if len(matches) != 1:
        return ResolutionFailure.ambiguous_or_missing()
    return ResolutionSuccess(value=matches[0].value)


class PreferredIdResolver:
    """Resolves identifier values against a NamingSystem registry.

    The resolver holds no per-request state and is safe to share between
    concurrent requests. Logging and metrics are side channels used only when a
    resolution starts, fails or completes.
    """

    def __init__(
        self,
        lookup: RegistryLookup,
        metrics_client: Optional[MetricsClient] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.lookup = lookup
        self.metrics_client = (
            metrics_client if metrics_client is not None else NoOpMetricsClient()
        )
        self.log = log if log is not None else logger

    async def resolve(self, request: ResolutionRequest) -> ResolutionOutcome:
        """Resolve a request to a single value of the requested representation kind.

        Steps: validate, normalize the kind, query the registry once, take the
        first record, select the representation. Any failing step ends the
        resolution with a classified ResolutionFailure.

        Args:
            request: Identifier value and requested representation kind

        Returns:
            ResolutionSuccess or ResolutionFailure
        """
        self.log.debug(
            "Begin preferred-id value=%r type=%r", request.value, request.requested_kind
        )
        outcome = await self._resolve(request)
        self._record_outcome(request, outcome)
        return outcome

    async def _resolve(self, request: ResolutionRequest) -> ResolutionOutcome:
        if not request.value or not request.requested_kind:
            return ResolutionFailure.missing_arguments()

        kind = parse_representation_kind(request.requested_kind)
        if kind is None:
            return ResolutionFailure.unrecognized_kind()

        try:
            records = await self.lookup.search(request.value)
        except Exception as e:
            sentry_sdk.capture_exception(e)
            self.log.exception("Registry search failed for %r", request.value)
            return ResolutionFailure.registry_error()

        if len(records) == 0:
            return ResolutionFailure.not_found()

        if len(records) > 1:
            self.log.warning(
                "%d registry records match %r, using the first (%s)",
                len(records),
                request.value,
                records[0].name,
            )

        return select_representation(records[0], kind)

    def _record_outcome(
        self, request: ResolutionRequest, outcome: ResolutionOutcome
    ) -> None:
        if isinstance(outcome, ResolutionSuccess):
            self.log.debug(
                "End preferred-id value=%r type=%r result=%r",
                request.value,
                request.requested_kind,
                outcome.value,
            )
            outcome_tag = "success"
        else:
            self.log.info(
                "End preferred-id value=%r type=%r failed: %s",
                request.value,
                request.requested_kind,
                outcome.kind.name,
            )
            outcome_tag = outcome.kind.name

        self.metrics_client.increment(
            "naming.preferred_id.outcome", 1, tag_dict={"outcome": outcome_tag}
        )
