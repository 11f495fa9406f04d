from lotus_browser.services.auth_service import USER_SLOT, AuthService, display_name
from lotus_browser.services.storage import BrowserSlotStorage


def test_login_records_user_named_after_email():
    storage = BrowserSlotStorage()
    auth = AuthService(storage)

    result = auth.login("ada@example.org", "secret")

    assert result.success
    assert result.user["email"] == "ada@example.org"
    assert result.user["name"] == "ada"
    assert "secret" not in storage.data[USER_SLOT]
    assert auth.current_user() == result.user
    assert auth.is_authenticated()


def test_register_uses_given_name():
    auth = AuthService(BrowserSlotStorage())

    result = auth.register("ada@example.org", "secret", "  Ada Lovelace ")

    assert result.user["name"] == "Ada Lovelace"
    assert display_name(auth.current_user()) == "Ada Lovelace"


def test_missing_credentials_are_rejected():
    auth = AuthService(BrowserSlotStorage())

    assert not auth.login("", "secret").success
    assert not auth.login("ada@example.org", "").success
    assert auth.login(" ", "x").error == "Email and password are required."
    assert auth.current_user() is None


def test_logout_clears_user():
    storage = BrowserSlotStorage()
    auth = AuthService(storage)
    auth.login("ada@example.org", "secret")

    auth.logout()

    assert USER_SLOT not in storage.data
    assert not auth.is_authenticated()


def test_garbled_user_slot_means_signed_out():
    assert AuthService(BrowserSlotStorage({USER_SLOT: "{oops"})).current_user() is None
    assert AuthService(BrowserSlotStorage({USER_SLOT: "[1, 2]"})).current_user() is None


def test_display_name_falls_back_to_email():
    assert display_name({"email": "ada@example.org"}) == "ada@example.org"
    assert display_name(None) == ""
