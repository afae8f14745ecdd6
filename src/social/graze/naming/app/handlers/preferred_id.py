import logging
from typing import Optional

from aiohttp import web
from pydantic import ValidationError

from social.graze.naming.app.config import (
    HealthGaugeAppKey,
    PreferredIdResolverAppKey,
)
from social.graze.naming.app.resources import (
    FHIR_JSON_CONTENT_TYPE,
    Parameters,
    operation_outcome,
    render_outcome,
)
from social.graze.naming.resolve.preferred_id import (
    FailureKind,
    ResolutionFailure,
    ResolutionRequest,
)

logger = logging.getLogger(__name__)


def fhir_json_response(status: int, body) -> web.Response:
    return web.json_response(body, status=status, content_type=FHIR_JSON_CONTENT_TYPE)


async def preferred_id_response(
    request: web.Request, resolution_request: ResolutionRequest
) -> web.Response:
    resolver = request.app[PreferredIdResolverAppKey]

    outcome = await resolver.resolve(resolution_request)

    if (
        isinstance(outcome, ResolutionFailure)
        and outcome.kind == FailureKind.registry_error
    ):
        await request.app[HealthGaugeAppKey].record_error()

    status, body = render_outcome(outcome)
    return fhir_json_response(status, body)


def single_query_value(request: web.Request, name: str) -> Optional[str]:
    """Value of a query parameter given exactly once, None when absent or repeated."""
    values = request.query.getall(name, [])
    if len(values) != 1:
        return None
    return values[0]


async def handle_get_preferred_id(request: web.Request) -> web.Response:
    """
    Handle GET <base-url>/administration/NamingSystem/$preferred-id?id=xxx&type=yyy
    """
    resolution_request = ResolutionRequest(
        value=single_query_value(request, "id"),
        requested_kind=single_query_value(request, "type"),
    )
    return await preferred_id_response(request, resolution_request)


async def handle_post_preferred_id(request: web.Request) -> web.Response:
    """
    Handle POST <base-url>/administration/NamingSystem/$preferred-id with a Parameters body
    carrying the "id" and "type" parameters.
    """
    try:
        data = await request.read()
        parameters = Parameters.model_validate_json(data)
    except (OSError, ValidationError) as e:
        logger.info("Invalid $preferred-id payload: %s", e)
        return fhir_json_response(
            400,
            operation_outcome(
                "Request body must be a FHIR Parameters resource.", code="invalid"
            ),
        )

    resolution_request = ResolutionRequest(
        value=parameters.get_single("id"),
        requested_kind=parameters.get_single("type"),
    )
    return await preferred_id_response(request, resolution_request)
