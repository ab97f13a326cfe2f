"""Tests for RecoveryTokenService."""
import pytest
from datetime import timedelta
from unittest.mock import Mock
from uuid import uuid4


class TestRecoveryTokenConfig:
    """Tests for RecoveryTokenConfig."""

    def test_defaults_to_fifteen_minutes(self):
        from src.services.recovery_token_service import RecoveryTokenConfig

        assert RecoveryTokenConfig().expires_in == timedelta(minutes=15)

    def test_rejects_non_positive_expiration(self):
        from src.services.recovery_token_service import RecoveryTokenConfig

        with pytest.raises(ValueError):
            RecoveryTokenConfig(expiration_minutes=0)

    def test_from_mapping(self):
        from src.services.recovery_token_service import RecoveryTokenConfig

        config = RecoveryTokenConfig.from_mapping({"RECOVERY_TOKEN_EXPIRATION_MINUTES": "30"})

        assert config.expiration_minutes == 30

    def test_from_mapping_uses_default(self):
        from src.services.recovery_token_service import RecoveryTokenConfig

        assert RecoveryTokenConfig.from_mapping({}).expiration_minutes == 15


class TestRecoveryTokenService:
    """Test suite for RecoveryTokenService."""

    @pytest.fixture
    def mock_token_repo(self):
        """Create mock recovery token repository."""
        return Mock()

    @pytest.fixture
    def service(self, mock_token_repo):
        from src.services.recovery_token_service import (
            RecoveryTokenConfig,
            RecoveryTokenService,
        )

        return RecoveryTokenService(
            token_repository=mock_token_repo,
            config=RecoveryTokenConfig(expiration_minutes=15),
        )

    def test_reuses_valid_token_without_notifying(self, service, mock_token_repo):
        """Existing valid token is returned, no new token, no email."""
        user_id = uuid4()
        existing = Mock()
        mock_token_repo.find_one_valid_by_user_id.return_value = existing

        issue = service.issue_for_user(user_id)

        assert issue.token is existing
        assert issue.should_notify is False
        mock_token_repo.find_one_valid_by_user_id.assert_called_once_with(user_id)
        mock_token_repo.create.assert_not_called()

    def test_creates_token_when_none_valid(self, service, mock_token_repo):
        """New token with configured lifetime, user must be notified."""
        user_id = uuid4()
        created = Mock()
        mock_token_repo.find_one_valid_by_user_id.return_value = None
        mock_token_repo.create.return_value = created

        issue = service.issue_for_user(user_id)

        assert issue.token is created
        assert issue.should_notify is True
        mock_token_repo.create.assert_called_once_with(user_id, timedelta(minutes=15))

    def test_simulate_never_touches_storage(self, service, mock_token_repo):
        issue = service.simulate()

        assert issue.should_notify is False
        assert issue.token.user_id is None
        assert issue.token.used is False
        assert issue.token.created_at == issue.token.updated_at
        assert issue.token.expires_at - issue.token.created_at == timedelta(minutes=15)
        mock_token_repo.create.assert_not_called()
        mock_token_repo.find_one_valid_by_user_id.assert_not_called()
