from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from .client_base import (
    DecodeError,
    MissingClientError,
    WSDOTClient,
    require_positive_id,
)
from .schema import Camera


logger = logging.getLogger(__name__)


GET_CAMERAS_URL = (
    "http://www.wsdot.wa.gov/Traffic/api/HighwayCameras/HighwayCamerasREST.svc/GetCamerasAsJson"
)
GET_CAMERA_URL = (
    "http://www.wsdot.wa.gov/Traffic/api/HighwayCameras/HighwayCamerasREST.svc/GetCameraAsJson"
)

PARAM_ACCESS_CODE = "AccessCode"
PARAM_CAMERA_ID = "CameraID"

_CAMERA_LIST = TypeAdapter(List[Camera])


class CamerasClient:
    """
    Highway cameras sub-API.

    Usage:
        wsdot_client = WSDOTClient(api_key="...")
        cameras = CamerasClient(wsdot_client).get_cameras()
    """

    def __init__(self, wsdot_client: Optional[WSDOTClient]) -> None:
        if wsdot_client is None:
            raise MissingClientError("no client")
        self.wsdot = wsdot_client

    def _params(self, **extra: Any) -> dict:
        params = {PARAM_ACCESS_CODE: self.wsdot.api_key}
        params.update(extra)
        return params

    # -------------------------------------------------
    # Public methods
    # -------------------------------------------------
    def get_cameras(self) -> List[Camera]:
        """Fetch every highway camera."""
        operation = "get_cameras"
        data = self.wsdot.get_json(GET_CAMERAS_URL, self._params(), operation=operation)
        try:
            cameras = _CAMERA_LIST.validate_python([] if data is None else data)
        except ValidationError as e:
            raise DecodeError(operation, str(e)) from e

        logger.debug("Decoded %d cameras.", len(cameras))
        return cameras

    def get_camera(self, camera_id: int) -> Camera:
        """Fetch a single camera by its CameraID."""
        operation = "get_camera"
        require_positive_id("camera_id", camera_id)

        data = self.wsdot.get_json(
            GET_CAMERA_URL,
            self._params(**{PARAM_CAMERA_ID: str(camera_id)}),
            operation=operation,
        )
        if data is None:
            raise DecodeError(operation, "empty response body")
        try:
            return Camera.model_validate(data)
        except ValidationError as e:
            raise DecodeError(operation, str(e)) from e
