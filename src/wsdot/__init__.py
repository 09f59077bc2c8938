"""
wsdot - Washington State DOT Traveler API client

Typed, synchronous bindings for the WSDOT highway cameras and
Washington State Ferries endpoints.

Usage:
------
    from wsdot import WSDOTClient, CamerasClient, FerriesClient

    wsdot_client = WSDOTClient(api_key="...")

    cameras = CamerasClient(wsdot_client).get_cameras()

    ferries = FerriesClient(wsdot_client)
    for route in ferries.get_route_schedules():
        schedule = ferries.get_schedule_today_by_route(route.route_id)

Configuration:
--------------
Set these environment variables (optional when passed explicitly):

    WSDOT_API_KEY      - Access code issued by WSDOT
    WSDOT_TIMEOUT_SEC  - Per-request timeout (default: none)

Nothing is retried or cached: each call is exactly one GET request.
"""

# -----------------------------------------------------------------------------
# Configuration and errors
# -----------------------------------------------------------------------------
from .client_base import (
    WSDOTClient,
    WSDOTClientError,
    InvalidConfigurationError,
    MissingClientError,
    RequestConstructionError,
    TransportError,
    RequestTimeoutError,
    UnexpectedStatusError,
    DecodeError,
    MalformedTimestampError,
    InvalidOffsetError,
)

# -----------------------------------------------------------------------------
# Sub-API clients
# -----------------------------------------------------------------------------
from .cameras_api import CamerasClient
from .ferries_api import FerriesClient

# -----------------------------------------------------------------------------
# Date normalization ("/Date(1742713200000-0700)/" strings)
# -----------------------------------------------------------------------------
from .normalizer import (
    parse_wsdot_date,
    parse_wsdot_offset,
    parse_offset_millis,
    coerce_wsdot_date,
)

# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------
from .schema import (
    Camera,
    CameraLocation,
    VesselClass,
    VesselBasic,
    VesselLocation,
    ServiceDisruption,
    ContingencyAdjustment,
    RouteSchedule,
    SailingTime,
    TerminalCombo,
    Schedule,
)


__all__ = [
    # Configuration
    "WSDOTClient",
    # Errors
    "WSDOTClientError",
    "InvalidConfigurationError",
    "MissingClientError",
    "RequestConstructionError",
    "TransportError",
    "RequestTimeoutError",
    "UnexpectedStatusError",
    "DecodeError",
    "MalformedTimestampError",
    "InvalidOffsetError",
    # Clients
    "CamerasClient",
    "FerriesClient",
    # Dates
    "parse_wsdot_date",
    "parse_wsdot_offset",
    "parse_offset_millis",
    "coerce_wsdot_date",
    # Models
    "Camera",
    "CameraLocation",
    "VesselClass",
    "VesselBasic",
    "VesselLocation",
    "ServiceDisruption",
    "ContingencyAdjustment",
    "RouteSchedule",
    "SailingTime",
    "TerminalCombo",
    "Schedule",
]
