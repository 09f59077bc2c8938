import pytest
from unittest.mock import MagicMock, patch

from wsdot.cameras_api import CamerasClient, GET_CAMERA_URL, GET_CAMERAS_URL
from wsdot.client_base import (
    DecodeError,
    MissingClientError,
    RequestConstructionError,
    UnexpectedStatusError,
    WSDOTClient,
)
from wsdot.schema import Camera


class FakeResponse:
    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json_data = json_data

    def json(self):
        return self._json_data


CAMERA_RECORD = {
    "CameraID": 9818,
    "CameraLocation": {
        "Description": None,
        "Direction": "B",
        "Latitude": 47.394,
        "Longitude": -121.39,
        "MilePost": 52,
        "RoadName": "I-90",
    },
    "CameraOwner": None,
    "Description": None,
    "DisplayLatitude": 47.394,
    "DisplayLongitude": -121.39,
    "ImageHeight": 240,
    "ImageURL": "https://images.wsdot.wa.gov/sc/090VC05200.jpg",
    "ImageWidth": 320,
    "IsActive": True,
    "OwnerURL": None,
    "Region": "SC",
    "SortOrder": 3190,
    "Title": "I-90 at MP 52: Snoqualmie Summit",
}


@pytest.fixture
def wsdot_client(monkeypatch):
    monkeypatch.delenv("WSDOT_TIMEOUT_SEC", raising=False)
    return WSDOTClient(api_key="test-key")


def sent_request(client):
    return client.session.send.call_args.args[0]


@pytest.mark.unit
def test_cameras_client_requires_wsdot_client():
    with pytest.raises(MissingClientError):
        CamerasClient(None)


@pytest.mark.unit
def test_get_cameras_decodes_list(wsdot_client):
    wsdot_client.session.send = MagicMock(
        return_value=FakeResponse(200, [CAMERA_RECORD, {"CameraID": 2}])
    )

    cameras = CamerasClient(wsdot_client).get_cameras()

    assert [c.camera_id for c in cameras] == [9818, 2]
    assert isinstance(cameras[0], Camera)
    assert cameras[0].camera_location.road_name == "I-90"
    assert cameras[0].image_url.endswith(".jpg")

    prepared = sent_request(wsdot_client)
    assert prepared.url == f"{GET_CAMERAS_URL}?AccessCode=test-key"
    assert prepared.headers["Content-Type"] == "application/json"


@pytest.mark.unit
def test_get_cameras_empty_list_is_not_an_error(wsdot_client):
    wsdot_client.session.send = MagicMock(return_value=FakeResponse(200, []))
    assert CamerasClient(wsdot_client).get_cameras() == []


@pytest.mark.unit
def test_get_cameras_wrong_shape_raises_decode_error(wsdot_client):
    wsdot_client.session.send = MagicMock(
        return_value=FakeResponse(200, {"Message": "not a list"})
    )

    with pytest.raises(DecodeError) as e:
        CamerasClient(wsdot_client).get_cameras()

    assert e.value.operation == "get_cameras"
    assert "get_cameras" in str(e.value)


@pytest.mark.unit
def test_get_cameras_unexpected_status(wsdot_client):
    wsdot_client.session.send = MagicMock(return_value=FakeResponse(401, None))

    with pytest.raises(UnexpectedStatusError) as e:
        CamerasClient(wsdot_client).get_cameras()

    assert e.value.status_code == 401


@pytest.mark.unit
def test_get_camera_sends_camera_id(wsdot_client):
    wsdot_client.session.send = MagicMock(return_value=FakeResponse(200, CAMERA_RECORD))

    camera = CamerasClient(wsdot_client).get_camera(9818)

    assert camera.camera_id == 9818
    assert camera.title == "I-90 at MP 52: Snoqualmie Summit"
    assert sent_request(wsdot_client).url == (
        f"{GET_CAMERA_URL}?AccessCode=test-key&CameraID=9818"
    )


@pytest.mark.unit
def test_get_camera_null_body_raises_decode_error(wsdot_client):
    wsdot_client.session.send = MagicMock(return_value=FakeResponse(200, None))

    with pytest.raises(DecodeError):
        CamerasClient(wsdot_client).get_camera(1)


@pytest.mark.unit
@pytest.mark.parametrize("camera_id", [0, -5, "9818", True])
def test_get_camera_rejects_bad_ids_without_network(wsdot_client, camera_id):
    wsdot_client.session.send = MagicMock()

    with pytest.raises(RequestConstructionError):
        CamerasClient(wsdot_client).get_camera(camera_id)

    wsdot_client.session.send.assert_not_called()


@pytest.mark.unit
def test_same_key_is_reused_across_calls(wsdot_client):
    with patch.object(WSDOTClient, "get_json", return_value=[]) as mock_get:
        client = CamerasClient(wsdot_client)
        client.get_cameras()
        client.get_cameras()

    keys = [c.args[1]["AccessCode"] for c in mock_get.call_args_list]
    assert keys == ["test-key", "test-key"]


@pytest.mark.unit
def test_get_cameras_null_body_is_empty_list(wsdot_client):
    wsdot_client.session.send = MagicMock(return_value=FakeResponse(200, None))
    assert CamerasClient(wsdot_client).get_cameras() == []
