from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .normalizer import coerce_wsdot_date


class WSDOTModel(BaseModel):
    """
    Base for every WSDOT response record.

    - Immutable once decoded
    - Unknown upstream fields are ignored
    - Attributes are snake_case; the API's PascalCase names are the aliases
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


def _none_to_empty_list(v: Any) -> Any:
    return [] if v is None else v


def _loose_string(v: Any) -> Any:
    # Upstream sends a string, null, or occasionally a bare number here.
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (bool, int, float)):
        return str(v)
    return v


# -----------------------------------------------------------------------------
# Highway cameras
# -----------------------------------------------------------------------------
class CameraLocation(WSDOTModel):
    description: Optional[str] = Field(None, alias="Description")
    direction: Optional[str] = Field(None, alias="Direction")
    latitude: Optional[float] = Field(None, alias="Latitude")
    longitude: Optional[float] = Field(None, alias="Longitude")
    mile_post: Optional[int] = Field(None, alias="MilePost")
    road_name: Optional[str] = Field(None, alias="RoadName")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v):
        return _loose_string(v)


class Camera(WSDOTModel):
    """A highway camera and the metadata of its latest image."""

    camera_id: int = Field(..., alias="CameraID")
    camera_location: Optional[CameraLocation] = Field(None, alias="CameraLocation")
    camera_owner: Optional[str] = Field(None, alias="CameraOwner")
    description: Optional[str] = Field(
        None, alias="Description", description="Free text; upstream may send null"
    )
    display_latitude: Optional[float] = Field(None, alias="DisplayLatitude")
    display_longitude: Optional[float] = Field(None, alias="DisplayLongitude")
    image_height: Optional[int] = Field(None, alias="ImageHeight")
    image_url: Optional[str] = Field(None, alias="ImageURL")
    image_width: Optional[int] = Field(None, alias="ImageWidth")
    is_active: Optional[bool] = Field(None, alias="IsActive")
    owner_url: Optional[str] = Field(None, alias="OwnerURL")
    region: Optional[str] = Field(None, alias="Region")
    sort_order: Optional[int] = Field(None, alias="SortOrder")
    title: Optional[str] = Field(None, alias="Title")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v):
        return _loose_string(v)


# -----------------------------------------------------------------------------
# Ferries: vessels
# -----------------------------------------------------------------------------
class VesselClass(WSDOTModel):
    class_id: Optional[int] = Field(None, alias="ClassID")
    class_subject_id: Optional[int] = Field(None, alias="ClassSubjectID")
    class_name: Optional[str] = Field(None, alias="ClassName")
    sort_seq: Optional[int] = Field(None, alias="SortSeq")
    drawing_img: Optional[str] = Field(None, alias="DrawingImg")
    silhouette_img: Optional[str] = Field(None, alias="SilhouetteImg")
    public_display_name: Optional[str] = Field(None, alias="PublicDisplayName")


class VesselBasic(WSDOTModel):
    vessel_id: int = Field(..., alias="VesselID")
    vessel_subject_id: Optional[int] = Field(None, alias="VesselSubjectID")
    vessel_name: Optional[str] = Field(None, alias="VesselName")
    vessel_abbrev: Optional[str] = Field(None, alias="VesselAbbrev")
    vessel_class: Optional[VesselClass] = Field(None, alias="Class")
    status: Optional[int] = Field(
        None, alias="Status", description="Operational status code (1 = in service)"
    )
    owned_by_wsf: Optional[bool] = Field(None, alias="OwnedByWSF")


class VesselLocation(WSDOTModel):
    """
    Live position of one vessel.

    LeftDock, Eta, ScheduledDeparture and TimeStamp arrive as "/Date(...)/"
    strings and are kept verbatim; the *_at properties give the parsed value.
    """

    vessel_id: int = Field(..., alias="VesselID")
    vessel_name: Optional[str] = Field(None, alias="VesselName")
    mmsi: Optional[int] = Field(None, alias="Mmsi")

    departing_terminal_id: Optional[int] = Field(None, alias="DepartingTerminalID")
    departing_terminal_name: Optional[str] = Field(None, alias="DepartingTerminalName")
    departing_terminal_abbrev: Optional[str] = Field(
        None, alias="DepartingTerminalAbbrev"
    )
    arriving_terminal_id: Optional[int] = Field(None, alias="ArrivingTerminalID")
    arriving_terminal_name: Optional[str] = Field(None, alias="ArrivingTerminalName")
    arriving_terminal_abbrev: Optional[str] = Field(None, alias="ArrivingTerminalAbbrev")

    latitude: Optional[float] = Field(None, alias="Latitude")
    longitude: Optional[float] = Field(None, alias="Longitude")
    speed: Optional[float] = Field(None, alias="Speed", description="Knots")
    heading: Optional[int] = Field(None, alias="Heading", description="Degrees")

    in_service: Optional[bool] = Field(None, alias="InService")
    at_dock: Optional[bool] = Field(None, alias="AtDock")
    left_dock: Optional[str] = Field(None, alias="LeftDock")
    eta: Optional[str] = Field(None, alias="Eta")
    eta_basis: Optional[str] = Field(None, alias="EtaBasis")
    scheduled_departure: Optional[str] = Field(None, alias="ScheduledDeparture")
    op_route_abbrev: List[str] = Field(default_factory=list, alias="OpRouteAbbrev")
    vessel_position_num: Optional[int] = Field(None, alias="VesselPositionNum")
    sort_seq: Optional[int] = Field(None, alias="SortSeq")
    managed_by: Optional[int] = Field(None, alias="ManagedBy")
    time_stamp: Optional[str] = Field(None, alias="TimeStamp")

    vessel_watch_shut_id: Optional[int] = Field(None, alias="VesselWatchShutID")
    vessel_watch_shut_msg: Optional[str] = Field(None, alias="VesselWatchShutMsg")
    vessel_watch_shut_flag: Optional[str] = Field(None, alias="VesselWatchShutFlag")
    vessel_watch_status: Optional[str] = Field(None, alias="VesselWatchStatus")
    vessel_watch_msg: Optional[str] = Field(None, alias="VesselWatchMsg")

    @field_validator("op_route_abbrev", mode="before")
    @classmethod
    def validate_lists(cls, v):
        return _none_to_empty_list(v)

    @property
    def left_dock_at(self) -> Optional[datetime]:
        return coerce_wsdot_date(self.left_dock, "LeftDock")

    @property
    def eta_at(self) -> Optional[datetime]:
        return coerce_wsdot_date(self.eta, "Eta")

    @property
    def scheduled_departure_at(self) -> Optional[datetime]:
        return coerce_wsdot_date(self.scheduled_departure, "ScheduledDeparture")

    @property
    def time_stamp_at(self) -> Optional[datetime]:
        return coerce_wsdot_date(self.time_stamp, "TimeStamp")


# -----------------------------------------------------------------------------
# Ferries: route schedules
# -----------------------------------------------------------------------------
class ServiceDisruption(WSDOTModel):
    bulletin_id: Optional[int] = Field(None, alias="BulletinID")
    bulletin_flag: Optional[bool] = Field(None, alias="BulletinFlag")
    publish_date: Optional[str] = Field(None, alias="PublishDate")
    disruption_description: Optional[str] = Field(None, alias="DisruptionDescription")


class ContingencyAdjustment(WSDOTModel):
    date_from: Optional[str] = Field(None, alias="DateFrom")
    date_thru: Optional[str] = Field(None, alias="DateThru")
    event_id: Optional[int] = Field(None, alias="EventID")
    event_description: Optional[str] = Field(None, alias="EventDescription")
    adj_type: Optional[int] = Field(None, alias="AdjType")
    replaced_by_sched_route_id: Optional[int] = Field(
        None, alias="ReplacedBySchedRouteID"
    )


class RouteSchedule(WSDOTModel):
    schedule_id: Optional[int] = Field(None, alias="ScheduleID")
    sched_route_id: Optional[int] = Field(None, alias="SchedRouteID")
    contingency_only: Optional[bool] = Field(None, alias="ContingencyOnly")
    route_id: int = Field(..., alias="RouteID")
    route_abbrev: Optional[str] = Field(None, alias="RouteAbbrev")
    description: Optional[str] = Field(None, alias="Description")
    seasonal_route_notes: Optional[str] = Field(None, alias="SeasonalRouteNotes")
    region_id: Optional[int] = Field(None, alias="RegionID")
    service_disruptions: List[ServiceDisruption] = Field(
        default_factory=list, alias="ServiceDisruptions"
    )
    contingency_adj: List[ContingencyAdjustment] = Field(
        default_factory=list, alias="ContingencyAdj"
    )

    @field_validator("service_disruptions", "contingency_adj", mode="before")
    @classmethod
    def validate_lists(cls, v):
        return _none_to_empty_list(v)


# -----------------------------------------------------------------------------
# Ferries: today's schedule
# -----------------------------------------------------------------------------
class SailingTime(WSDOTModel):
    """One scheduled departure of a vessel on a terminal combo."""

    departing_time: Optional[datetime] = Field(None, alias="DepartingTime")
    arriving_time: Optional[datetime] = Field(None, alias="ArrivingTime")
    loading_rule: Optional[int] = Field(
        None, alias="LoadingRule", description="1 = passengers, 2 = vehicles, 3 = both"
    )
    vessel_id: Optional[int] = Field(None, alias="VesselID")
    vessel_name: Optional[str] = Field(None, alias="VesselName")
    vessel_handicap_accessible: Optional[bool] = Field(
        None, alias="VesselHandicapAccessible"
    )
    vessel_position_num: Optional[int] = Field(None, alias="VesselPositionNum")
    routes: List[int] = Field(default_factory=list, alias="Routes")
    annotation_indexes: List[int] = Field(
        default_factory=list,
        alias="AnnotationIndexes",
        description="Indexes into the parent TerminalCombo.annotations",
    )

    @field_validator("departing_time", "arriving_time", mode="before")
    @classmethod
    def validate_times(cls, v, info: ValidationInfo):
        return coerce_wsdot_date(v, info.field_name)

    @field_validator("routes", "annotation_indexes", mode="before")
    @classmethod
    def validate_lists(cls, v):
        return _none_to_empty_list(v)


class TerminalCombo(WSDOTModel):
    departing_terminal_id: Optional[int] = Field(None, alias="DepartingTerminalID")
    departing_terminal_name: Optional[str] = Field(None, alias="DepartingTerminalName")
    arriving_terminal_id: Optional[int] = Field(None, alias="ArrivingTerminalID")
    arriving_terminal_name: Optional[str] = Field(None, alias="ArrivingTerminalName")
    sailing_notes: Optional[str] = Field(None, alias="SailingNotes")
    annotations: List[str] = Field(default_factory=list, alias="Annotations")
    times: List[SailingTime] = Field(default_factory=list, alias="Times")
    annotations_ivr: List[str] = Field(default_factory=list, alias="AnnotationsIVR")

    @field_validator("annotations", "times", "annotations_ivr", mode="before")
    @classmethod
    def validate_lists(cls, v):
        return _none_to_empty_list(v)

    def annotations_for(self, sailing: SailingTime) -> List[str]:
        """Resolve a sailing's annotation indexes against this combo's notes."""
        return [
            self.annotations[i]
            for i in sailing.annotation_indexes
            if 0 <= i < len(self.annotations)
        ]


class Schedule(WSDOTModel):
    """Today's sailings for one route, grouped by terminal combo."""

    schedule_id: int = Field(..., alias="ScheduleID")
    schedule_name: Optional[str] = Field(None, alias="ScheduleName")
    schedule_season: Optional[int] = Field(None, alias="ScheduleSeason")
    schedule_pdf_url: Optional[str] = Field(None, alias="SchedulePDFUrl")
    schedule_start: Optional[datetime] = Field(None, alias="ScheduleStart")
    schedule_end: Optional[datetime] = Field(None, alias="ScheduleEnd")
    all_routes: List[int] = Field(default_factory=list, alias="AllRoutes")
    terminal_combos: List[TerminalCombo] = Field(
        default_factory=list, alias="TerminalCombos"
    )

    @field_validator("schedule_start", "schedule_end", mode="before")
    @classmethod
    def validate_dates(cls, v, info: ValidationInfo):
        return coerce_wsdot_date(v, info.field_name)

    @field_validator("all_routes", "terminal_combos", mode="before")
    @classmethod
    def validate_lists(cls, v):
        return _none_to_empty_list(v)
