from __future__ import annotations

import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from .client_base import (
    DecodeError,
    MissingClientError,
    WSDOTClient,
    require_positive_id,
)
from .schema import RouteSchedule, Schedule, VesselBasic, VesselLocation


logger = logging.getLogger(__name__)


GET_VESSEL_BASICS_URL = "https://www.wsdot.wa.gov/Ferries/API/Vessels/rest/vesselbasics"
GET_VESSEL_LOCATIONS_URL = "https://www.wsdot.wa.gov/Ferries/API/Vessels/rest/vessellocations"
GET_ROUTE_SCHEDULES_URL = "https://www.wsdot.wa.gov/Ferries/API/Schedule/rest/schedroutes"
GET_SCHEDULE_TODAY_URL = (
    "https://www.wsdot.wa.gov/Ferries/API/Schedule/rest/scheduletoday/{route_id}/{only_remaining}"
)

# The ferries sub-API names its key differently from the cameras sub-API.
PARAM_FERRIES_ACCESS_CODE = "apiaccesscode"

ModelT = TypeVar("ModelT", bound=BaseModel)


class FerriesClient:
    """
    Washington State Ferries sub-API: vessels and schedules.

    Every call is a single GET; results are decoded into the models in
    wsdot.schema. Empty lists are valid results.
    """

    def __init__(self, wsdot_client: Optional[WSDOTClient]) -> None:
        if wsdot_client is None:
            raise MissingClientError("no client")
        self.wsdot = wsdot_client

    # -------------------------------------------------
    # Public methods
    # -------------------------------------------------
    def get_vessel_basics(self) -> List[VesselBasic]:
        return self._fetch_list(GET_VESSEL_BASICS_URL, VesselBasic, "get_vessel_basics")

    def get_vessel_locations(self) -> List[VesselLocation]:
        return self._fetch_list(
            GET_VESSEL_LOCATIONS_URL, VesselLocation, "get_vessel_locations"
        )

    def get_route_schedules(self) -> List[RouteSchedule]:
        return self._fetch_list(
            GET_ROUTE_SCHEDULES_URL, RouteSchedule, "get_route_schedules"
        )

    def get_schedule_today_by_route(
        self, route_id: int, only_remaining_times: bool = False
    ) -> Schedule:
        """
        Fetch today's sailings for a route.

        Args:
            route_id: Route to look up (see RouteSchedule.route_id)
            only_remaining_times: If True, sailings that already left are omitted

        ScheduleStart/ScheduleEnd and each sailing's DepartingTime/ArrivingTime
        are converted to UTC datetimes; a malformed value is logged and left as
        None rather than failing the whole schedule.
        """
        operation = "get_schedule_today_by_route"
        require_positive_id("route_id", route_id)

        url = GET_SCHEDULE_TODAY_URL.format(
            route_id=route_id,
            only_remaining="true" if only_remaining_times else "false",
        )
        data = self.wsdot.get_json(url, self._params(), operation=operation)
        if data is None:
            raise DecodeError(operation, "empty response body")

        try:
            schedule = Schedule.model_validate(data)
        except ValidationError as e:
            raise DecodeError(operation, str(e)) from e

        logger.debug(
            "Decoded schedule %s with %d terminal combos.",
            schedule.schedule_id,
            len(schedule.terminal_combos),
        )
        return schedule

    # -------------------------------------------------
    # Helpers
    # -------------------------------------------------
    def _params(self) -> dict:
        return {PARAM_FERRIES_ACCESS_CODE: self.wsdot.api_key}

    def _fetch_list(
        self, url: str, model: Type[ModelT], operation: str
    ) -> List[ModelT]:
        data: Any = self.wsdot.get_json(url, self._params(), operation=operation)
        try:
            records = TypeAdapter(List[model]).validate_python([] if data is None else data)
        except ValidationError as e:
            raise DecodeError(operation, str(e)) from e

        logger.debug("Decoded %d records for %s.", len(records), operation)
        return records
