from campus_events.errors import Conflict, Unauthorized


def test_register_success(client, mocker):
    mock_register = mocker.patch(
        "campus_events.auth_service.routes.register_user",
        return_value=({"_id": 1, "name": "A", "email": "a@x.com"}, "signed.jwt.token"),
    )

    payload = {"name": "A", "email": "a@x.com", "password": "123456"}
    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 201
    data = response.get_json()
    assert data["success"] is True
    assert data["token"] == "signed.jwt.token"
    assert data["user"] == {"_id": 1, "name": "A", "email": "a@x.com"}

    args, _ = mock_register.call_args
    assert args[1:] == ("A", "a@x.com", "123456")


def test_register_missing_fields(client):
    response = client.post("/api/auth/register", json={})
    assert response.status_code == 400
    data = response.get_json()
    assert data["success"] is False
    assert {e["field"] for e in data["errors"]} == {"name", "email", "password"}


def test_register_non_json_body(client):
    response = client.post("/api/auth/register", data="name=A", content_type="text/plain")
    assert response.status_code == 400


def test_register_duplicate_email(client, mocker):
    mocker.patch(
        "campus_events.auth_service.routes.register_user",
        side_effect=Conflict("An account with that email already exists."),
    )

    payload = {"name": "A", "email": "a@x.com", "password": "123456"}
    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 400
    assert response.get_json() == {
        "success": False,
        "message": "An account with that email already exists.",
    }


def test_register_server_error(client, mocker):
    mocker.patch("campus_events.auth_service.routes.register_user", side_effect=RuntimeError("db down"))

    payload = {"name": "A", "email": "a@x.com", "password": "123456"}
    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 500
    assert response.get_json()["message"] == "Server error during registration."


def test_login_success(client, mocker):
    mocker.patch(
        "campus_events.auth_service.routes.login_user",
        return_value=({"_id": 1, "name": "A", "email": "a@x.com"}, "signed.jwt.token"),
    )

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "123456"})

    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["token"] == "signed.jwt.token"
    assert data["user"]["_id"] == 1


def test_login_invalid_credentials(client, mocker):
    mocker.patch(
        "campus_events.auth_service.routes.login_user",
        side_effect=Unauthorized("Invalid email or password."),
    )

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong1"})

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "message": "Invalid email or password."}


def test_login_malformed_email(client):
    response = client.post("/api/auth/login", json={"email": "nope", "password": "123456"})
    assert response.status_code == 400
    assert response.get_json()["errors"][0]["field"] == "email"
