from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.schemas.analytics import ChatSessionRecord, OptimizationRecord, PromptRecord
from app.schemas.email import (
    NewFeaturesEmail,
    NotificationEmailRequest,
    PasswordResetEmail,
    VerificationEmailRequest,
)


class TestPromptRecord:
    def test_naive_timestamp_is_utc(self):
        record = PromptRecord(id="p", provider="openai", model="gpt-4o", created_at=datetime(2026, 10, 19, 8, 30))
        assert record.created_at.tzinfo == timezone.utc
        assert record.created_at.hour == 8

    def test_score_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            PromptRecord(id="p", score=1.2, provider="openai", model="gpt-4o", created_at=datetime.now(timezone.utc))
        with pytest.raises(ValidationError):
            PromptRecord(id="p", score=-0.1, provider="openai", model="gpt-4o", created_at=datetime.now(timezone.utc))

    def test_records_are_frozen(self):
        record = PromptRecord(id="p", provider="openai", model="gpt-4o", created_at=datetime.now(timezone.utc))
        with pytest.raises(ValidationError):
            record.score = 0.5


class TestOptimizationRecord:
    def test_negative_tokens_rejected(self):
        with pytest.raises(ValidationError):
            OptimizationRecord(tokens_used=-1, created_at=datetime.now(timezone.utc))

    def test_nulls_allowed(self):
        record = OptimizationRecord(created_at=datetime.now(timezone.utc))
        assert record.tokens_used is None
        assert record.generation_time_ms is None


class TestChatSessionRecord:
    def test_message_count_defaults_to_zero(self):
        assert ChatSessionRecord(id="s", created_at=datetime.now(timezone.utc)).message_count == 0


class TestVerificationEmailRequest:
    def test_discriminates_on_type(self):
        payload = VerificationEmailRequest.model_validate(
            {"type": "password_reset", "email": "ada@example.com", "code": "424242"}
        )
        assert isinstance(payload.root, PasswordResetEmail)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            VerificationEmailRequest.model_validate({"type": "magic_link", "email": "ada@example.com", "code": "1"})

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            VerificationEmailRequest.model_validate({"type": "signup", "email": "not-an-email", "code": "1"})


class TestNotificationEmailRequest:
    def test_camel_case_data(self):
        payload = NotificationEmailRequest.model_validate(
            {
                "type": "new_features",
                "email": "ada@example.com",
                "subject": "What's new",
                "data": {"featureDescription": "Autopilot", "features": ["Agents"], "appUrl": "https://x.test"},
            }
        )
        assert isinstance(payload.root, NewFeaturesEmail)
        assert payload.root.data.feature_description == "Autopilot"
        assert payload.root.data.app_url == "https://x.test"

    def test_data_is_optional(self):
        payload = NotificationEmailRequest.model_validate(
            {"type": "weekly_digest", "email": "ada@example.com", "subject": "Your week"}
        )
        assert payload.root.data is None
