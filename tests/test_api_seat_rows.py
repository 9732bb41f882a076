import json
import uuid

API = "/api/v1"


def create_row(client, headers, name, seats, row_type="Ground", visible=True):
    response = client.post(
        f"{API}/admin/seat-rows/",
        json={"name": name, "type": row_type, "seats": seats, "visible": visible},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_admin_routes_require_token(client):
    response = client.post(f"{API}/admin/seat-rows/", json={"name": "A", "seats": [1]})
    assert response.status_code == 401

    response = client.post(
        f"{API}/admin/seat-rows/",
        json={"name": "A", "seats": [1]},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


def test_create_and_list_rows(client, admin_headers):
    create_row(client, admin_headers, "B", [3, 1, 2])
    create_row(client, admin_headers, "A", [1, 2])

    response = client.get(f"{API}/seat-rows/")
    assert response.status_code == 200
    rows = response.json()
    assert [r["name"] for r in rows] == ["A", "B"]
    assert rows[1]["seats"] == [1, 2, 3]


def test_duplicate_row_name_conflicts(client, admin_headers):
    create_row(client, admin_headers, "A", [1, 2, 3])

    response = client.post(
        f"{API}/admin/seat-rows/", json={"name": "A", "seats": [9]}, headers=admin_headers
    )
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


def test_add_seat(client, admin_headers):
    row = create_row(client, admin_headers, "A", [1, 3])

    response = client.patch(
        f"{API}/admin/seat-rows/{row['id']}/add-seat", json={"seat_number": 2}, headers=admin_headers
    )
    assert response.status_code == 200
    body = response.json()
    assert body["row"]["seats"] == [1, 2, 3]
    assert body["added_seat"] == 2
    assert body["total_seats"] == 3

    response = client.patch(
        f"{API}/admin/seat-rows/{row['id']}/add-seat", json={"seat_number": 2}, headers=admin_headers
    )
    assert response.status_code == 409


def test_add_seat_rejects_seat_held_by_booking(client, admin_headers):
    row = create_row(client, admin_headers, "A", [1, 2])
    passenger = {"seat_row_id": row["id"], "seat_number": 1, "first_name": "Alice", "last_name": "Smith"}
    response = client.post(
        f"{API}/bookings/",
        data={"name": "Alice", "email": "alice@example.com", "seats": json.dumps([passenger])},
    )
    assert response.status_code == 201

    response = client.patch(
        f"{API}/admin/seat-rows/{row['id']}/add-seat", json={"seat_number": 1}, headers=admin_headers
    )
    assert response.status_code == 409
    assert client.get(f"{API}/seat-rows/{row['id']}").json()["seats"] == [2]

    response = client.post(
        f"{API}/bookings/",
        data={"name": "Bob", "email": "bob@example.com", "seats": json.dumps([passenger])},
    )
    assert response.status_code == 409

    bookings = client.get(f"{API}/admin/bookings/", headers=admin_headers).json()
    assert [b["user"]["email"] for b in bookings["data"]] == ["alice@example.com"]


def test_add_seat_to_missing_row(client, admin_headers):
    response = client.patch(
        f"{API}/admin/seat-rows/{uuid.uuid4()}/add-seat", json={"seat_number": 2}, headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Seat row not found"


def test_hidden_rows_only_for_admin_listing(client, admin_headers):
    row = create_row(client, admin_headers, "A", [1])
    create_row(client, admin_headers, "B", [1])

    response = client.patch(f"{API}/admin/seat-rows/{row['id']}", json={"visible": False}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["visible"] is False

    assert [r["name"] for r in client.get(f"{API}/seat-rows/").json()] == ["B"]
    assert [r["name"] for r in client.get(f"{API}/seat-rows/?include_hidden=true").json()] == ["A", "B"]


def test_available_seats_breakdown(client, admin_headers):
    row = create_row(client, admin_headers, "A", [1, 2])

    response = client.get(f"{API}/seat-rows/{row['id']}/available-seats")
    assert response.status_code == 200
    body = response.json()
    assert body["total_seats"] == [1, 2]
    assert body["available_seats"] == [1, 2]
    assert body["booked_seats"] == []


def test_delete_row(client, admin_headers):
    row = create_row(client, admin_headers, "A", [1])

    response = client.delete(f"{API}/admin/seat-rows/{row['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"id": row["id"], "deleted": True}
    assert client.get(f"{API}/seat-rows/{row['id']}").status_code == 404


def test_balcony_visibility_toggle(client, admin_headers):
    create_row(client, admin_headers, "A", [1])
    create_row(client, admin_headers, "C", [1], row_type="Balcony")

    assert client.get(f"{API}/settings/balcony-visibility").json() == {"visible": True}

    response = client.post(
        f"{API}/admin/settings/balcony-visibility", json={"visible": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert client.get(f"{API}/settings/balcony-visibility").json() == {"visible": False}
    assert [r["name"] for r in client.get(f"{API}/seat-rows/").json()] == ["A"]

    response = client.post(f"{API}/admin/settings/balcony-visibility", json={"visible": True})
    assert response.status_code == 401
