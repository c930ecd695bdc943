# rpimocap

Building blocks for a camera client in a marker-based motion capture system.

A client watches a scene with a camera, finds bright reflective markers in each
image, and publishes their pixel centres over MQTT whenever a trigger message
arrives. For development without hardware, a simulated scene and camera render
virtual markers (for example a calibration wand) into synthetic images.

## What is inside

| Module | Purpose |
| --- | --- |
| `rpimocap.camera` | `Intrinsics`: camera matrix, its inverse, distortion, image size and frame rate, with presets `rpi_camera_v1` and `rpi_camera_v2` and conversion with `to_dict` / `from_dict` (distortion is written but not read back). |
| `rpimocap.geometry` | `Line3D` rays, `closest_points` between two rays (None when parallel or behind an origin) and `line_angle` between two vectors. |
| `rpimocap.topics` | MQTT topic names: `TRIGGER`, `uuid_string`, `client_prefix`, `pixels`. |
| `rpimocap.settings` | `MQTTSettings` (broker address, port, QoS; defaults `127.0.0.1`, `1883`, exactly once) and the `MQTTQoS` levels. |
| `rpimocap.frame` | `Frame`, `Marker` and `LineSegment`: one captured moment of 3D data, with time in nanoseconds since the epoch. |
| `rpimocap.serialization` | MessagePack encoding of point lists and frames, with MessagePack timestamps in 32, 64 or 96 bit form: `encode_timestamp`, `decode_timestamp`, `pack_points`, `unpack_points`, `pack_frame`, `unpack_frame`. Malformed payloads raise `ValueError`. |
| `rpimocap.discovery` | `parse_services` reads `avahi-browse -atpr` style text into `ServiceInfo` records, filtered by `IPVersion`. |
| `rpimocap.wand` | `VirtualWand` and `VirtualFloorWand` produce `SimMarker` positions for a 4x4 or 3x4 affine transform. |
| `rpimocap.mqtt` | `MQTTPublisher` and `MQTTSubscriber` wrap a paho-mqtt connection for one topic and log broker events; `log_level_for` maps broker log levels to Python logging levels. |
| `rpimocap.markers` | `MarkerDetector` thresholds a greyscale image, traces blob contours and returns their mean positions; `DetectorParams` holds the threshold and contour size limits. |
| `rpimocap.simscene` | `SimScene` projects 3D markers into a synthetic camera image as filled discs; `rodrigues` and `project_points` are the underlying math. |
| `rpimocap.cameras` | The abstract `Camera` interface and `SimCamera`, which renders a `SimScene` paced to the camera's frame rate. |
| `rpimocap.client` | `Client` ties a camera, the detector and MQTT together; `find_mqtt_service` picks the broker among discovered services, `service_description` builds the client's JSON announcement text and `persistent_client_id` keeps a stable id in a JSON settings file. |
| `rpimocap.project` | Saving and loading simulation projects (`ClientConfig`, `save_project`, `load_project`, `new_client_config`) and turning wand markers into a `Frame` (`compose_markers`, `frame_from_markers`). |

## Examples

Topic names for a client:

```python
import uuid
from rpimocap import topics

client_id = uuid.uuid4()
print(topics.client_prefix(client_id))   # /client-<uuid>
print(topics.pixels(client_id))          # /client-<uuid>/pixels
```

Simulating a camera that looks at a single marker 2 m in front of it:

```python
from rpimocap.camera import Intrinsics
from rpimocap.simscene import SimScene
from rpimocap.wand import SimMarker

params = Intrinsics.rpi_camera_v1()
scene = SimScene()
scene.set_markers([SimMarker(translation=(0.0, 0.0, 200.0))])

image = scene.project_scene(params, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
print(image[240, 320])   # 255: the marker lands on the principal point
```

Detecting markers in that image:

```python
from rpimocap.markers import DetectorParams, MarkerDetector

detector = MarkerDetector(DetectorParams())
print(detector.detect_markers(image))
```

Packing detected points for the wire and reading them back:

```python
from rpimocap.serialization import pack_points, unpack_points

payload = pack_points([(320.0, 240.0)])
print(unpack_points(payload))
```

Finding a broker among discovered services:

```python
from rpimocap.client import find_mqtt_service
from rpimocap.discovery import IPVersion, parse_services

services = parse_services(browse_output, IPVersion.IPV4)
broker = find_mqtt_service(services)
```

## What this package does not do

- It has no command-line program; everything is used as a library.
- It does not capture from a physical camera. `SimCamera` is the only camera
  provided; other sources can be added by implementing `Camera`.
- It does not browse or announce zeroconf services itself. `parse_services`
  reads browse output that you supply, and `Client` only computes its service
  name, type, port and description; announcing them is left to the caller.
- It has no graphical interface for the simulation; projects are read and
  written as JSON files with `load_project` and `save_project`.

## Requirements

Python 3.10 or newer, with `numpy`, `msgpack` and `paho-mqtt`. The tests use
`pytest` and are available through the `test` extra.