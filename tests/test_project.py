import json
import time
import uuid

import numpy as np
import pytest

from rpimocap.camera import Intrinsics
from rpimocap.project import (
    ClientConfig,
    compose_markers,
    frame_from_markers,
    load_project,
    new_client_config,
    save_project,
)
from rpimocap.wand import SimMarker

CLIENT_ID = uuid.UUID("12345678-1234-5678-1234-567812345678")


def sample_config():
    return ClientConfig(
        id=CLIENT_ID,
        params=Intrinsics.rpi_camera_v1(),
        rotation=(0.1, 0.2, 0.3),
        translation=(10.0, -5.0, 2.5),
    )


def test_to_dict_fields():
    config = sample_config()
    data = config.to_dict()
    assert data["id"] == "{" + str(CLIENT_ID) + "}"
    assert (data["rx"], data["ry"], data["rz"]) == config.rotation
    assert (data["tx"], data["ty"], data["tz"]) == config.translation
    assert data["maxFPS"] == 90
    assert data["imageWidth"] == 640


def test_dict_round_trip():
    config = sample_config()
    restored = ClientConfig.from_dict(config.to_dict())
    assert restored.id == config.id
    assert restored.rotation == config.rotation
    assert restored.translation == config.translation
    assert restored.params.to_dict() == config.params.to_dict()


def test_from_empty_dict():
    config = ClientConfig.from_dict({})
    assert config.id == uuid.UUID(int=0)
    assert config.rotation == (0.0, 0.0, 0.0)
    assert config.translation == (0.0, 0.0, 0.0)


def test_save_and_load(tmp_path):
    path = tmp_path / "project.json"
    configs = [sample_config(), new_client_config()]
    save_project(path, configs)
    assert len(json.loads(path.read_text())["clients"]) == 2
    loaded = load_project(path)
    assert [c.id for c in loaded] == [c.id for c in configs]
    assert [c.translation for c in loaded] == [c.translation for c in configs]


def test_load_invalid_document(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    assert load_project(path) == []


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_project(tmp_path / "absent.json")


def test_new_client_config():
    first, second = new_client_config(), new_client_config()
    assert first.id != second.id
    assert first.rotation == (0.0, 0.0, 0.0)
    assert first.params.to_dict() == Intrinsics.rpi_camera_v1().to_dict()


def test_compose_markers_hidden():
    assert compose_markers(None, None) == []


def test_compose_markers_wand_identity():
    markers = compose_markers(np.eye(4), None)
    positions = [m.translation.tolist() for m in markers]
    assert positions == [[-25.0, 0.0, 0.0], [10.0, 0.0, 0.0], [25.0, 0.0, 0.0]]


def test_compose_markers_both():
    shift = np.eye(4)
    shift[:3, 3] = [1.0, 2.0, 3.0]
    markers = compose_markers(np.eye(4), shift)
    assert len(markers) == 8
    assert markers[3].translation.tolist() == [1.0, 2.0, 3.0]


def test_frame_from_markers():
    markers = [SimMarker(translation=[1.0, 2.0, 3.0]), SimMarker(translation=[4.0, 5.0, 6.0])]
    before = time.time_ns()
    frame = frame_from_markers(markers)
    after = time.time_ns()
    assert before <= frame.time <= after
    assert frame.lines == []
    assert [m.id for m in frame.markers] == [0, 0]
    assert [m.position.tolist() for m in frame.markers] == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]