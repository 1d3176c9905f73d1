"""API endpoint tests."""

from datetime import datetime, timedelta

from src.models.user import User
from src.services.exceptions import MailDeliveryError
from src.services.tides import upsert_tide


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_home_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "signup-form" in response.text


def test_modal_script_is_served(client):
    response = client.get("/assets/js/modal.js")
    assert response.status_code == 200
    assert "submitSignup" in response.text


def test_sign_up(client, db, mailer):
    """Signup creates an unverified user and emails a verification link."""
    response = client.post("/signup", json={"email": "rider@example.com"})

    assert response.status_code == 200
    assert response.text == "Verification email sent!"

    user = db.query(User).filter(User.email == "rider@example.com").one()
    assert user.is_verified is False
    assert user.is_subscribed is False
    mailer.send_verification_email.assert_awaited_once_with(
        "rider@example.com",
        f"http://testserver/verify?token={user.verification_token}",
    )


def test_sign_up_invalid_email(client, mailer):
    response = client.post("/signup", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert response.text == "Please provide a valid email address."
    assert response.headers["content-type"].startswith("text/plain")
    mailer.send_verification_email.assert_not_awaited()


def test_sign_up_missing_body(client, mailer):
    response = client.post("/signup", json={})
    assert response.status_code == 400


def test_sign_up_verified_email_conflict(client, make_user, mailer):
    make_user("rider@example.com", is_verified=True, is_subscribed=True)

    response = client.post("/signup", json={"email": "rider@example.com"})

    assert response.status_code == 409
    assert response.text == "Email already registered and verified"
    mailer.send_verification_email.assert_not_awaited()


def test_sign_up_again_before_verifying(client, db, make_user, mailer):
    """Signing up twice before verifying re-sends a fresh token."""
    user = make_user("rider@example.com", token="old-token")

    response = client.post("/signup", json={"email": "rider@example.com"})

    assert response.status_code == 200
    db.refresh(user)
    assert user.verification_token != "old-token"
    assert db.query(User).count() == 1


def test_sign_up_mail_failure(client, mailer):
    mailer.send_verification_email.side_effect = MailDeliveryError("Mailgun send failed")

    response = client.post("/signup", json={"email": "rider@example.com"})

    assert response.status_code == 500
    assert response.text == "Failed to send verification email."


def test_verify(client, db, make_user):
    """Verifying a token verifies and subscribes the user."""
    user = make_user(token="good-token")

    response = client.get("/verify", params={"token": "good-token"})

    assert response.status_code == 200
    assert response.text == "Email verified and subscribed!"
    db.refresh(user)
    assert user.is_verified is True
    assert user.is_subscribed is True


def test_verify_invalid_token(client):
    response = client.get("/verify", params={"token": "invalid_token"})

    assert response.status_code == 400
    assert response.text == "Invalid or already used verification token"


def test_unsubscribe(client, db, make_user):
    user = make_user(is_verified=True, is_subscribed=True)
    token = user.generate_unsubscribe_token("test-secret")

    response = client.get("/unsubscribe", params={"id": user.id, "token": token})

    assert response.status_code == 200
    db.refresh(user)
    assert user.is_subscribed is False


def test_unsubscribe_forged_token(client, db, make_user):
    user = make_user(is_verified=True, is_subscribed=True)

    response = client.get("/unsubscribe", params={"id": user.id, "token": "forged"})

    assert response.status_code == 400
    db.refresh(user)
    assert user.is_subscribed is True


def test_signup_verify_flow(client, db, mailer):
    """A new signup reaches the mailing list only after verification."""
    from src.services.subscribers import list_mailing_list

    client.post("/signup", json={"email": "a@example.com"})
    assert list_mailing_list(db) == []

    link = mailer.send_verification_email.await_args.args[1]
    response = client.get(link.replace("http://testserver", ""))
    assert response.status_code == 200

    assert [e.email for e in list_mailing_list(db)] == ["a@example.com"]


def test_get_floods(client, db):
    soon = (datetime.now() + timedelta(days=2)).replace(hour=14, minute=30, second=0, microsecond=0)
    upsert_tide(db, soon, 6.9, "High")
    upsert_tide(db, soon + timedelta(hours=6), 1.0, "Low")

    response = client.get("/api/v1/floods")

    assert response.status_code == 200
    data = response.json()
    assert data["flood_threshold"] == 6.4
    assert data["forecast_days"] == 30
    assert len(data["predictions"]) == 1
    assert data["predictions"][0]["height"] == "6.90"


def test_not_found_is_plain_text(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.text == "Not Found"
