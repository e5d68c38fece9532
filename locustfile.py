"""
Load test for the check-in lifecycle.

Each simulated phone hammers one group with rapid check-ins, accommodation
toggles and member reads, the mix that races on the deactivate-then-insert
path. After a run, every device should have at most one active check-in:

    locust -f locustfile.py --host http://localhost:8000
"""
import random
import uuid

import requests
from locust import HttpUser, task, between, events

PLACES = [
    ("101", "Yamabiko Restaurant"),
    ("102", "Oyu Onsen"),
    ("103", "Hikage Gondola Base"),
    ("104", "Nagasaka Gondola Top"),
]
ACCOMMODATIONS = [
    ("acc-1", "Nozawa House", [138.442, 36.922]),
    ("acc-2", "Pension Schnee", [138.446, 36.919]),
]

GROUP_CODE = None


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    global GROUP_CODE
    response = requests.post(f"{environment.host}/api/v1/groups")
    if response.status_code != 201:
        raise RuntimeError(f"Failed to create group: {response.status_code} {response.text}")
    GROUP_CODE = response.json()["code"]
    print(f"Load testing group {GROUP_CODE}")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    response = requests.get(f"{environment.host}/api/v1/groups/{GROUP_CODE}/checkins/active")
    active = response.json()["checkins"]
    per_device = {}
    for checkin in active:
        per_device[checkin["device_id"]] = per_device.get(checkin["device_id"], 0) + 1
    duplicates = {device: n for device, n in per_device.items() if n > 1}
    if duplicates:
        print(f"Devices with more than one active check-in: {duplicates}")
    else:
        print(f"OK: {len(per_device)} devices, one active check-in each")


class GroupMember(HttpUser):
    wait_time = between(0.1, 1)

    def on_start(self):
        self.device_id = f"load-{uuid.uuid4().hex[:12]}"
        self.user_name = f"Skier {random.randint(1, 999)}"

    @task(5)
    def check_in(self):
        place_id, place_name = random.choice(PLACES)
        payload = {
            "deviceId": self.device_id,
            "userName": self.user_name,
            "placeId": place_id,
            "placeName": place_name,
        }
        if random.random() < 0.3:
            acc_id, acc_name, coords = random.choice(ACCOMMODATIONS)
            payload.update({
                "accommodationPlaceId": acc_id,
                "accommodationName": acc_name,
                "accommodationCoords": coords,
                "displayAccommodationToGroup": True,
            })
        self.client.post(f"/api/v1/groups/{GROUP_CODE}/checkin", json=payload, name="checkin")

    @task(2)
    def toggle_accommodation(self):
        with self.client.put(
            f"/api/v1/groups/{GROUP_CODE}/members/{self.device_id}/accommodation",
            json={"share": random.random() < 0.5},
            name="accommodation",
            catch_response=True,
        ) as response:
            # Devices that have not checked in yet get 404
            if response.status_code in (200, 404):
                response.success()

    @task(8)
    def members(self):
        self.client.get(f"/api/v1/groups/{GROUP_CODE}/members", name="members")

    @task(1)
    def leave(self):
        self.client.post(
            f"/api/v1/groups/{GROUP_CODE}/checkout",
            json={"deviceId": self.device_id},
            name="checkout",
        )
