import pytest
import jwt
from datetime import datetime, timedelta, timezone

from campus_events.auth_service.utils import create_token, verify_token, verify_token_from_request
from campus_events.errors import Unauthorized


def test_create_token(settings):
    token = create_token(123, settings)

    assert isinstance(token, str)

    # Decode to verify contents using the same secret
    payload = jwt.decode(token, "test_secret", algorithms=["HS256"])
    assert payload["sub"] == "123"
    assert "exp" in payload
    assert "iat" in payload
    assert payload["exp"] - payload["iat"] == 7 * 24 * 3600


def test_verify_token(settings):
    token = create_token(456, settings)
    assert verify_token(token, settings) == 456


def test_verify_token_invalid(settings):
    with pytest.raises(Unauthorized) as exc:
        verify_token("invalid.token.here", settings)
    assert exc.value.message == "Invalid or expired token."


def test_verify_token_wrong_secret(settings):
    token = jwt.encode({"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
                       "other_secret", algorithm="HS256")
    with pytest.raises(Unauthorized):
        verify_token(token, settings)


def test_verify_token_expired(settings):
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode({"sub": "1", "iat": past - timedelta(days=7), "exp": past},
                       "test_secret", algorithm="HS256")
    with pytest.raises(Unauthorized):
        verify_token(token, settings)


def test_verify_token_non_numeric_subject(settings):
    token = jwt.encode({"sub": "alice", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
                       "test_secret", algorithm="HS256")
    with pytest.raises(Unauthorized):
        verify_token(token, settings)


def test_verify_token_from_request_valid(app, settings, mock_db, mocker):
    mock_conn, mock_cursor = mock_db
    mocker.patch("campus_events.auth_service.utils.get_db", return_value=mock_conn)
    mock_cursor.fetchone.return_value = {"user_id": 789, "name": "A", "email": "a@x.com"}
    token = create_token(789, settings)

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        user, err, code = verify_token_from_request()

    assert user == {"_id": 789, "name": "A", "email": "a@x.com"}
    assert err is None
    assert code is None
    args, _ = mock_cursor.execute.call_args
    assert args[1] == (789,)


def test_verify_token_from_request_missing_header(app):
    with app.test_request_context():
        user, err, code = verify_token_from_request()
        assert user is None
        assert code == 401
        assert err.json["message"] == "Not authorised. Please log in."


def test_verify_token_from_request_invalid_format(app):
    with app.test_request_context(headers={"Authorization": "InvalidFormat"}):
        user, err, code = verify_token_from_request()
        assert user is None
        assert code == 401
        assert err.json["message"] == "Not authorised. Please log in."


def test_verify_token_from_request_bad_token(app):
    with app.test_request_context(headers={"Authorization": "Bearer not-a-jwt"}):
        user, err, code = verify_token_from_request()
        assert user is None
        assert code == 401
        assert err.json["message"] == "Invalid or expired token."


def test_verify_token_from_request_deleted_user(app, settings, mock_db, mocker):
    mock_conn, mock_cursor = mock_db
    mocker.patch("campus_events.auth_service.utils.get_db", return_value=mock_conn)
    mock_cursor.fetchone.return_value = None
    token = create_token(5, settings)

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        user, err, code = verify_token_from_request()
        assert user is None
        assert code == 401
        assert err.json["message"] == "User no longer exists."
