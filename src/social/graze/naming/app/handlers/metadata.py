from typing import Dict, List

from aiohttp import web

from social.graze.naming.app.config import (
    PREFERRED_ID_OPERATION,
    PREFERRED_ID_OPERATION_DEFINITION,
    Settings,
    SettingsAppKey,
)
from social.graze.naming.app.handlers.preferred_id import fhir_json_response
from social.graze.naming.app.resources import capability_statement


def supported_operations(settings: Settings) -> List[Dict[str, str]]:
    """Operations to advertise in the rest component of the CapabilityStatement."""
    operations: List[Dict[str, str]] = []
    if settings.supports_custom_operation(PREFERRED_ID_OPERATION):
        operations.append(
            {
                "name": PREFERRED_ID_OPERATION,
                "definition": PREFERRED_ID_OPERATION_DEFINITION,
            }
        )
    return operations


async def handle_metadata(request: web.Request) -> web.Response:
    settings = request.app[SettingsAppKey]
    return fhir_json_response(
        200, capability_statement(settings.software_name, supported_operations(settings))
    )
