import pytest
from bson import ObjectId


def add(client, **body):
    return client.post("/users", json=body)


def test_create_then_list(client):
    response = add(client, name="Ann", age=30, city="Lyon")

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User added successfully"
    user = data["user"]
    assert isinstance(user["id"], str)
    assert user["name"] == "Ann"
    assert user["age"] == 30
    assert user["city"] == "Lyon"
    assert user["createdAt"].endswith("Z")
    assert user["updatedAt"] == user["createdAt"]

    listing = client.get("/users")
    assert listing.status_code == 200
    matching = [u for u in listing.json() if u["id"] == user["id"]]
    assert len(matching) == 1
    assert matching[0]["name"] == "Ann"


def test_create_trims_and_coerces_numeric_age(client):
    response = add(client, name="  Ann  ", age="30", city=" Lyon ")

    assert response.status_code == 201
    user = response.json()["user"]
    assert (user["name"], user["age"], user["city"]) == ("Ann", 30, "Lyon")


@pytest.mark.parametrize("body, message", [
    ({"name": "", "age": 5, "city": "Lyon"}, "All fields required: name, age, city"),
    ({"name": "Ann", "city": "Lyon"}, "All fields required: name, age, city"),
    ({"name": "Ann", "age": 5}, "All fields required: name, age, city"),
    ({"name": "Ann", "age": "", "city": "Lyon"}, "All fields required: name, age, city"),
    ({"name": 42, "age": 5, "city": "Lyon"}, "All fields required: name, age, city"),
    ({"name": "Ann", "age": "abc", "city": "Lyon"}, "Age must be a number"),
    ({"name": "Ann", "age": True, "city": "Lyon"}, "Age must be a number"),
    ({"name": "Ann", "age": 10 ** 20, "city": "Lyon"}, "Age must be a number"),
    ({"name": "Ann", "age": 1e20, "city": "Lyon"}, "Age must be a number"),
    ({"name": "Ann", "age": -3, "city": "Lyon"}, "Age must be a non-negative number"),
])
def test_create_validation_errors(client, body, message):
    response = client.post("/users", json=body)

    assert response.status_code == 400
    assert response.json() == {"message": message}
    assert client.get("/users").json() == []


@pytest.mark.parametrize("raw", ["not json", "[1, 2]"])
def test_create_rejects_unparseable_body(client, raw):
    response = client.post("/users", content=raw, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request body"}


def test_list_is_in_creation_order_with_search(client):
    for name, city in [("Ann", "Lyon"), ("Bob", "Paris"), ("Cleo", "Lyon")]:
        add(client, name=name, age=20, city=city)

    assert [u["name"] for u in client.get("/users").json()] == ["Ann", "Bob", "Cleo"]
    assert [u["name"] for u in client.get("/users", params={"search": "lyon"}).json()] == ["Ann", "Cleo"]


def test_update_user(client):
    user = add(client, name="Ann", age=30, city="Lyon").json()["user"]

    response = client.put(f"/users/{user['id']}", json={"name": "Anne", "age": 31, "city": "Paris"})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "User updated successfully"
    assert data["user"]["id"] == user["id"]
    assert (data["user"]["name"], data["user"]["age"], data["user"]["city"]) == ("Anne", 31, "Paris")

    listing = client.get("/users").json()
    assert len(listing) == 1
    assert listing[0]["name"] == "Anne"


@pytest.mark.parametrize("unknown_id", [str(ObjectId()), "unknown-id"])
def test_update_unknown_id_is_404(client, unknown_id):
    response = client.put(f"/users/{unknown_id}", json={"name": "X", "age": 1, "city": "Y"})

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}
    assert client.get("/users").json() == []


def test_update_validation_runs_before_lookup(client):
    response = client.put(f"/users/{ObjectId()}", json={"name": "X", "age": "old", "city": "Y"})

    assert response.status_code == 400
    assert response.json() == {"message": "Age must be a number"}


def test_delete_user(client):
    ann = add(client, name="Ann", age=30, city="Lyon").json()["user"]
    bob = add(client, name="Bob", age=40, city="Paris").json()["user"]

    response = client.delete(f"/users/{ann['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "User deleted successfully"
    assert data["user"]["id"] == ann["id"]
    assert client.get("/users").json() == [bob]


def test_delete_unknown_id_is_404(client):
    add(client, name="Ann", age=30, city="Lyon")

    response = client.delete(f"/users/{ObjectId()}")

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}
    assert len(client.get("/users").json()) == 1


@pytest.mark.parametrize("method, path, body, message", [
    ("GET", "/users", None, "Error fetching users"),
    ("POST", "/users", {"name": "Ann", "age": 30, "city": "Lyon"}, "Error adding user"),
    ("PUT", f"/users/{ObjectId()}", {"name": "Ann", "age": 30, "city": "Lyon"}, "Error updating user"),
    ("DELETE", f"/users/{ObjectId()}", None, "Error deleting user"),
])
def test_storage_failures_are_generic_500s(unavailable_client, method, path, body, message):
    response = unavailable_client.request(method, path, json=body)

    assert response.status_code == 500
    assert response.json() == {"message": message}


def test_invalid_input_never_reaches_unavailable_store(unavailable_client):
    response = unavailable_client.post("/users", json={"name": "", "age": 1, "city": "Lyon"})

    assert response.status_code == 400


def test_cors_allows_local_frontend(client):
    response = client.options(
        "/users",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "PUT",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_health_probes(client):
    assert client.get("/live").json() == {"status": "alive"}
    assert client.get("/ready").json() == {"status": "ready"}

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["checks"]["storage"] == "healthy"
    assert "X-Process-Time" in health.headers


def test_health_degraded_when_store_unhealthy(client, data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text("garbage")

    assert client.get("/health").status_code == 503
    assert client.get("/ready").status_code == 503
