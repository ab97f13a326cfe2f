"""Tests for RecoveryService."""
import pytest
from unittest.mock import Mock
from uuid import uuid4


def make_user(features=None):
    from src.models.user import User

    return User(
        id=uuid4(),
        username="someone",
        email="someone@example.com",
        features=list(features or []),
    )


class TestResolveTarget:
    """Tests for resolve_target."""

    def test_none_is_no_such_user(self):
        from src.services.recovery_service import NoSuchUser, resolve_target

        assert isinstance(resolve_target(None), NoSuchUser)

    def test_nuked_user(self):
        from src.services.recovery_service import NukedUser, resolve_target

        user = make_user(["nuked"])
        target = resolve_target(user)

        assert isinstance(target, NukedUser)
        assert target.user is user

    def test_active_user(self):
        from src.services.recovery_service import ActiveUser, resolve_target

        user = make_user()

        assert resolve_target(user) == ActiveUser(user)


class TestRecoveryService:
    """Test suite for RecoveryService."""

    @pytest.fixture
    def mock_user_repo(self):
        return Mock()

    @pytest.fixture
    def mock_token_service(self):
        from src.services.recovery_token_service import TokenIssue

        service = Mock()
        service.issue_for_user.return_value = TokenIssue(token=Mock(), should_notify=True)
        service.simulate.return_value = TokenIssue(token=Mock(), should_notify=False)
        return service

    @pytest.fixture
    def service(self, mock_user_repo, mock_token_service):
        from src.services.authorization_service import AuthorizationService
        from src.services.recovery_service import RecoveryService

        return RecoveryService(
            user_repository=mock_user_repo,
            token_service=mock_token_service,
            authorization_service=AuthorizationService(),
        )

    @pytest.fixture
    def privileged_caller(self):
        return make_user(["create:recovery_token:username"])

    # --- email flow ---

    def test_email_active_user_issues_token(self, service, mock_user_repo, mock_token_service):
        user = make_user()
        mock_user_repo.find_by_email.return_value = user

        result = service.request_recovery(caller=None, email=user.email)

        assert result.notify_user is user
        assert result.token is mock_token_service.issue_for_user.return_value.token
        mock_token_service.issue_for_user.assert_called_once_with(user.id)

    def test_email_existing_token_does_not_notify(
        self, service, mock_user_repo, mock_token_service
    ):
        from src.services.recovery_token_service import TokenIssue

        user = make_user()
        mock_user_repo.find_by_email.return_value = user
        mock_token_service.issue_for_user.return_value = TokenIssue(
            token=Mock(), should_notify=False
        )

        result = service.request_by_email(user.email)

        assert result.notify_user is None

    def test_email_unknown_user_simulates(self, service, mock_user_repo, mock_token_service):
        mock_user_repo.find_by_email.return_value = None

        result = service.request_by_email("nobody@example.com")

        assert result.notify_user is None
        assert result.token is mock_token_service.simulate.return_value.token
        mock_token_service.issue_for_user.assert_not_called()

    def test_email_nuked_user_simulates(self, service, mock_user_repo, mock_token_service):
        mock_user_repo.find_by_email.return_value = make_user(["nuked"])

        result = service.request_by_email("someone@example.com")

        assert result.notify_user is None
        mock_token_service.simulate.assert_called_once()
        mock_token_service.issue_for_user.assert_not_called()

    # --- username flow ---

    def test_username_anonymous_forbidden_before_lookup(self, service, mock_user_repo):
        from src.errors import ForbiddenError

        with pytest.raises(ForbiddenError) as exc_info:
            service.request_recovery(caller=None, username="someone")

        assert exc_info.value.error_location_code == (
            "CONTROLLER:RECOVERY:POST_HANDLER:CAN_NOT_CREATE_RECOVERY_TOKEN_USERNAME"
        )
        mock_user_repo.find_by_username.assert_not_called()

    def test_username_caller_without_feature_forbidden(self, service, mock_user_repo):
        from src.errors import ForbiddenError

        with pytest.raises(ForbiddenError):
            service.request_by_username(make_user(), "someone")

        mock_user_repo.find_by_username.assert_not_called()

    def test_username_nuked_caller_forbidden(self, service):
        from src.errors import ForbiddenError

        caller = make_user(["create:recovery_token:username", "nuked"])

        with pytest.raises(ForbiddenError):
            service.request_by_username(caller, "someone")

    def test_username_found(
        self, service, mock_user_repo, mock_token_service, privileged_caller
    ):
        user = make_user()
        mock_user_repo.find_by_username.return_value = user

        result = service.request_by_username(privileged_caller, "someone")

        assert result.notify_user is user
        mock_token_service.issue_for_user.assert_called_once_with(user.id)

    @pytest.mark.parametrize("found", [None, "nuked"])
    def test_username_missing_or_nuked_not_found(
        self, service, mock_user_repo, mock_token_service, privileged_caller, found
    ):
        from src.errors import NotFoundError

        mock_user_repo.find_by_username.return_value = (
            make_user(["nuked"]) if found else None
        )

        with pytest.raises(NotFoundError) as exc_info:
            service.request_by_username(privileged_caller, "someone")

        error = exc_info.value
        assert error.key == "username"
        assert error.error_location_code == "MODEL:USER:FIND_ONE_BY_USERNAME:NOT_FOUND"
        assert error.message == 'O "username" informado não foi encontrado no sistema.'
        mock_token_service.issue_for_user.assert_not_called()
        mock_token_service.simulate.assert_not_called()

    def test_request_recovery_requires_one_input(self, service):
        with pytest.raises(ValueError):
            service.request_recovery(caller=None)
