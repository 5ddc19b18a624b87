from datetime import datetime, timedelta

from conftest import login

from dormdash.core.config import get_settings
from dormdash.core.security import get_password_hash, verify_password
from dormdash.models.user_session import UserSession


def test_password_hash_round_trip():
    hashed = get_password_hash("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_login_persists_session_row(user_client, db_session):
    user_client("ann@students.towson.edu")
    [row] = db_session.query(UserSession).all()
    assert row.expires_at > datetime.utcnow()


def test_expired_session_is_rejected_and_removed(user_client, db_session):
    c = user_client("ann@students.towson.edu")

    row = db_session.query(UserSession).one()
    row.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db_session.commit()

    assert c.get("/api/user/profile").status_code == 401
    db_session.expire_all()
    assert db_session.query(UserSession).count() == 0


def test_unknown_cookie_is_anonymous(client):
    cookie = f"{get_settings().session_cookie_name}=not-a-session"
    assert client.get("/api/user", headers={"Cookie": cookie}).json() == {"loggedIn": False}


def test_each_login_gets_its_own_session(user_client, make_client, db_session):
    user_client("ann@students.towson.edu")
    other = make_client()
    assert login(other, "ann@students.towson.edu").status_code == 200
    assert db_session.query(UserSession).count() == 2


def test_new_login_sweeps_expired_sessions(user_client, make_client, db_session):
    user_client("ann@students.towson.edu")

    stale = db_session.query(UserSession).one()
    stale.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db_session.commit()
    stale_token = stale.token

    other = make_client()
    assert login(other, "ann@students.towson.edu").status_code == 200

    db_session.expire_all()
    tokens = [row.token for row in db_session.query(UserSession).all()]
    assert len(tokens) == 1
    assert stale_token not in tokens
