from datetime import datetime, timezone


def _utc(h, m=0):
    return datetime(2024, 6, 10, h, m, tzinfo=timezone.utc)


def test_create_and_list_rooms(client):
    r = client.post("/rooms", json={
        "id": "alpha",
        "name": "Alpha",
        "capacity": 8,
        "building": "HQ",
        "amenities": ["Whiteboard", " Projector", "Whiteboard", ""],
    })
    assert r.status_code == 201
    assert r.json()["amenities"] == ["Projector", "Whiteboard"]

    rooms = client.get("/rooms").json()
    assert [room["id"] for room in rooms] == ["alpha"]
    assert rooms[0]["building"] == "HQ"


def test_create_room_generates_id(client):
    r = client.post("/rooms", json={"name": "Beta", "capacity": 4})
    assert r.status_code == 201
    assert r.json()["id"]


def test_duplicate_room_id_rejected(client, make_room):
    make_room(room_id="alpha")
    r = client.post("/rooms", json={"id": "alpha", "name": "Again", "capacity": 2})
    assert r.status_code == 400


def test_capacity_must_be_positive(client):
    assert client.post("/rooms", json={"name": "Closet", "capacity": 0}).status_code == 400


def test_listing_is_cached_until_a_write(client, make_room, room_cache):
    make_room(room_id="r-1", name="Alpha")
    assert len(client.get("/rooms").json()) == 1
    assert room_cache.is_warm

    # written behind the API's back, so the cached listing still wins
    make_room(room_id="r-2", name="Beta")
    assert len(client.get("/rooms").json()) == 1

    client.post("/rooms", json={"id": "r-3", "name": "Gamma", "capacity": 3})
    assert not room_cache.is_warm
    assert [r["id"] for r in client.get("/rooms").json()] == ["r-1", "r-2", "r-3"]


def test_update_room(client, make_room, room_cache):
    make_room(room_id="r-1", name="Alpha")
    client.get("/rooms")

    r = client.put("/rooms/r-1", json={"name": "Alpha XL", "capacity": 12, "floor": 2})
    assert r.status_code == 200
    assert r.json()["name"] == "Alpha XL"
    assert r.json()["floor"] == 2
    assert client.get("/rooms").json()[0]["name"] == "Alpha XL"


def test_unknown_room_is_not_found(client):
    assert client.get("/rooms/nope").status_code == 404
    assert client.put("/rooms/nope", json={"name": "X", "capacity": 1}).status_code == 404
    assert client.delete("/rooms/nope").status_code == 404


def test_delete_room_removes_its_reservations(client, make_reservation):
    res = make_reservation(_utc(9), _utc(10))

    r = client.delete("/rooms/r-1")
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert client.get(f"/reservations/{res.id}").status_code == 404


def test_availability_marks_taken_slots(client, make_reservation):
    # 09:30-10:30 Lisbon (UTC+1 in June)
    res = make_reservation(_utc(8, 30), _utc(9, 30), title="Standup")

    r = client.get("/rooms/r-1/availability", params={"date": "2024-06-10"})
    assert r.status_code == 200
    body = r.json()
    assert body["roomId"] == "r-1"
    assert body["day"] == "2024-06-10"

    slots = body["slots"]
    assert len(slots) == 19
    assert slots[0]["label"] == "09:30"
    assert slots[0]["start"] == "2024-06-10T08:30:00Z"
    assert slots[-1]["label"] == "18:30"

    taken = [s["label"] for s in slots if not s["isAvailable"]]
    assert taken == ["09:30", "10:00"]
    assert slots[0]["reservation"]["id"] == res.id
    assert slots[2]["reservation"] is None


def test_availability_ignores_other_days(client, make_room, make_reservation):
    make_room()
    make_reservation(datetime(2024, 6, 11, 9, tzinfo=timezone.utc), datetime(2024, 6, 11, 10, tzinfo=timezone.utc))

    slots = client.get("/rooms/r-1/availability", params={"date": "2024-06-10"}).json()["slots"]
    assert all(s["isAvailable"] for s in slots)


def test_availability_requires_date(client, make_room):
    make_room()
    assert client.get("/rooms/r-1/availability").status_code == 400
    assert client.get("/rooms/nope/availability", params={"date": "2024-06-10"}).status_code == 404


def test_availability_lists_bookable_durations(client, make_reservation):
    # 11:00-12:00 Lisbon
    make_reservation(_utc(10), _utc(11))

    slots = {s["label"]: s for s in client.get("/rooms/r-1/availability", params={"date": "2024-06-10"}).json()["slots"]}
    assert slots["10:00"]["durations"] == [30, 60]
    assert slots["11:00"]["durations"] == []
