"""Contract tests for REST and notification payloads (camelCase wire format)."""

import pytest
from pydantic import TypeAdapter, ValidationError

from hooker.contracts.v1 import (
    AccessTokenDto,
    AppConfigDto,
    AttachmentMetaDto,
    AttachmentType,
    BodyJsonSelector,
    ChangePasswordBody,
    ColumnType,
    EventDto,
    Filter,
    ForwardAttemptDto,
    ForwardDto,
    ForwardRuleDto,
    ForwardStatus,
    HookDto,
    HookUrlCreateBody,
    HookVisibility,
    LoginErrorCode,
    LoginErrorDto,
    LoginResultDto,
    LoginSuccessDto,
    MatchType,
    MqttJwtConfigDto,
    ResetPasswordBody,
    UserDto,
)
from hooker.contracts.v1.hook import VERIFY_ALPHABET, new_verify

USER = {
    "id": "u1",
    "email": "dev@example.com",
    "name": None,
    "avatarUrl": None,
    "emailVerified": True,
    "createdAt": "2024-01-01T00:00:00.000Z",
    "updatedAt": "2024-01-01T00:00:00.000Z",
}


@pytest.mark.contract
class TestHookContracts:
    def test_hook_from_wire(self):
        hook = HookDto.model_validate(
            {
                "id": "h1",
                "timestamp": 1700000000000,
                "createdBy": None,
                "ownerVerify": "x" * 25,
                "visibility": "Public",
                "name": None,
                "node": "eu1",
                "url": "https://h1.eu1.hooker.monster",
                "addedByNewerServer": 1,
            }
        )

        assert hook.owner_verify == "x" * 25
        assert hook.visibility is HookVisibility.PUBLIC
        assert "addedByNewerServer" not in hook.to_wire()

    def test_hook_to_wire_uses_camel_case(self):
        hook = HookDto(
            id="h1", timestamp=1, created_by="u1", visibility=HookVisibility.PRIVATE, node="eu1", url="u"
        )

        assert hook.to_wire() == {
            "id": "h1",
            "timestamp": 1,
            "createdBy": "u1",
            "visibility": "Private",
            "node": "eu1",
            "url": "u",
        }

    @pytest.mark.parametrize("name", ["orders", "a_b-1", "x" * 50])
    def test_hook_url_name_accepted(self, name):
        assert HookUrlCreateBody(name=name).name == name

    @pytest.mark.parametrize("name", ["", "Orders", "with space", "x" * 51])
    def test_hook_url_name_rejected(self, name):
        with pytest.raises(ValidationError):
            HookUrlCreateBody(name=name)

    def test_new_verify(self):
        token = new_verify()

        assert len(token) == 25
        assert set(token) <= set(VERIFY_ALPHABET)
        assert new_verify() != token


@pytest.mark.contract
class TestEventAndForwardContracts:
    def test_event_from_notification(self):
        event = EventDto.model_validate(
            {
                "id": "e1",
                "hookId": "h1",
                "path": "/orders",
                "querystring": "a=1",
                "method": "POST",
                "body": '{"id": 1}',
                "headers": {"content-type": "application/json"},
                "timestamp": 1700000000000,
                "ip": "10.0.0.1",
                "contentType": "application/json",
            }
        )

        assert event.hook_id == "h1"
        assert event.bookmarked is False

    def test_forward_status_values(self):
        assert [status.value for status in ForwardStatus] == [
            "pending",
            "running",
            "completed",
            "failed",
            "pendingReattempt",
        ]

    def test_forward_from_wire(self):
        forward = ForwardDto.model_validate(
            {
                "id": "f1",
                "hookId": "h1",
                "forwardRuleId": "r1",
                "eventId": "e1",
                "targetUrl": "https://target.test",
                "timestamp": 1,
                "status": "pendingReattempt",
            }
        )

        assert forward.status is ForwardStatus.PENDING_REATTEMPT
        assert forward.status_updated_at is None

    def test_forward_attempt_from_wire(self):
        attempt = ForwardAttemptDto.model_validate(
            {"id": "a1", "forwardId": "f1", "timestamp": 1, "statusCode": 502, "durationMs": 12.5}
        )

        assert attempt.status_code == 502
        assert attempt.response_body is None

    def test_filter_selector_discriminated_by_type(self):
        rule = ForwardRuleDto.model_validate(
            {
                "id": "r1",
                "hookId": "h1",
                "targetUrl": "https://target.test",
                "isActive": False,
                "timestamp": 1,
                "failFilters": [
                    {
                        "selector": {"type": "body-json", "path": "$.type"},
                        "matchType": "regex",
                        "matchValue": "^test",
                        "invert": True,
                    }
                ],
            }
        )

        selector = rule.fail_filters[0].selector
        assert isinstance(selector, BodyJsonSelector)
        assert selector.path == "$.type"
        assert rule.fail_filters[0].match_type is MatchType.REGEX
        assert rule.pass_filters is None

    def test_unknown_selector_type_rejected(self):
        with pytest.raises(ValidationError):
            Filter.model_validate(
                {"selector": {"type": "cookie", "name": "x"}, "matchType": "equals", "matchValue": "1"}
            )


@pytest.mark.contract
class TestConfigContracts:
    def test_app_config(self):
        config = AppConfigDto.model_validate(
            {"mqtt": {"brokerUrl": "wss://broker.test/mqtt", "clientIdPrefix": "hooker-"}}
        )

        assert config.mqtt.client_id_prefix == "hooker-"
        assert config.smtp_base_domain is None

    def test_mqtt_credentials_redacted(self):
        creds = MqttJwtConfigDto.model_validate(
            {"username": "u1", "password": "header.payload.signature", "expiresAt": 1}
        )

        assert "header.payload.signature" not in repr(creds)
        assert "header.payload.signature" not in str(creds)


@pytest.mark.contract
class TestAccountContracts:
    def test_login_result_union(self):
        adapter = TypeAdapter(LoginResultDto)

        ok = adapter.validate_python({"success": True, "user": USER})
        failed = adapter.validate_python({"success": False, "errorCode": "needsVerified"})

        assert isinstance(ok, LoginSuccessDto)
        assert isinstance(ok.user, UserDto)
        assert isinstance(failed, LoginErrorDto)
        assert failed.error_code is LoginErrorCode.NEEDS_VERIFIED

    def test_change_password_optional_current(self):
        body = ChangePasswordBody(new_password="Correct-Horse-42x")

        assert body.to_wire() == {"newPassword": "Correct-Horse-42x"}

    @pytest.mark.parametrize("code", ["abcdefgh", "ABCDEFG", "ABCDEFG1"])
    def test_reset_code_format(self, code):
        with pytest.raises(ValidationError):
            ResetPasswordBody(code=code, new_password="x")

    def test_access_token_redacted(self):
        token = AccessTokenDto(id="t1", token="secret-value", description="ci", timestamp=1)

        assert "secret-value" not in repr(token)


@pytest.mark.contract
class TestColumnContracts:
    def test_column_types(self):
        assert ColumnType("forwardStatus") is ColumnType.FORWARD_STATUS

    def test_attachment_meta(self):
        meta = AttachmentMetaDto.model_validate(
            {"id": "a1", "name": "invoice.pdf", "length": 2048, "type": "eml-attachment", "mimeType": "application/pdf"}
        )

        assert meta.type is AttachmentType.EML_ATTACHMENT
        assert meta.source_id is None
