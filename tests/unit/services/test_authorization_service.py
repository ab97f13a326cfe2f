"""Tests for AuthorizationService."""
import pytest


@pytest.fixture
def authorization():
    from src.services.authorization_service import AuthorizationService

    return AuthorizationService()


def make_user(features):
    from src.models.user import User

    return User(username="someone", email="someone@example.com", features=features)


@pytest.mark.parametrize(
    "feature,expected",
    [
        ("create:recovery_token:email", True),
        ("read:recovery_token", True),
        ("update:recovery_token", True),
        ("create:recovery_token:username", False),
    ],
)
def test_anonymous_features(authorization, feature, expected):
    assert authorization.can(None, feature) is expected


def test_user_with_feature(authorization):
    user = make_user(["create:recovery_token:username"])

    assert authorization.can(user, "create:recovery_token:username") is True


def test_user_without_feature(authorization):
    assert authorization.can(make_user([]), "create:recovery_token:username") is False


def test_nuked_user_holds_nothing(authorization):
    user = make_user(["create:recovery_token:username", "nuked"])

    assert authorization.can(user, "create:recovery_token:username") is False
    assert authorization.can(user, "read:recovery_token") is False
