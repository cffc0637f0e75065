"""Hooker REST and notification payload contracts (v1)."""

from .account import (
    AccessTokenBody,
    AccessTokenDto,
    ChangePasswordBody,
    DeleteAccountBody,
    LoginBody,
    LoginErrorCode,
    LoginErrorDto,
    LoginResultDto,
    LoginSuccessDto,
    RegisterBody,
    ResetPasswordBody,
    UserDto,
    VerifyEmailBody,
)
from .columns import AttachmentMetaDto, AttachmentType, ColumnDto, ColumnType, SaveColumnsBody
from .common import HookerModel, Id, MqttDeletedDto
from .config import AppConfigDto, MqttBrokerConfig, MqttJwtConfigDto
from .event import EventBookmarkBody, EventDto, EventListItemDto, EventsListCursor, EventsListDto
from .forward import (
    BodyJsonSelector,
    BodyTextSelector,
    Filter,
    ForwardAttemptDto,
    ForwardDto,
    ForwardRuleDto,
    ForwardStatus,
    HeaderSelector,
    MatchType,
    QuerySelector,
    ValueSelector,
)
from .hook import (
    HookClaimBody,
    HookCreateBody,
    HookDto,
    HookNameUpdateBody,
    HookUrlCreateBody,
    HookUrlDto,
    HookVisibility,
    HookVisibilityUpdateBody,
    new_verify,
)

__all__ = [
    "AccessTokenBody",
    "AccessTokenDto",
    "AppConfigDto",
    "AttachmentMetaDto",
    "AttachmentType",
    "BodyJsonSelector",
    "BodyTextSelector",
    "ChangePasswordBody",
    "ColumnDto",
    "ColumnType",
    "DeleteAccountBody",
    "EventBookmarkBody",
    "EventDto",
    "EventListItemDto",
    "EventsListCursor",
    "EventsListDto",
    "Filter",
    "ForwardAttemptDto",
    "ForwardDto",
    "ForwardRuleDto",
    "ForwardStatus",
    "HeaderSelector",
    "HookClaimBody",
    "HookCreateBody",
    "HookDto",
    "HookNameUpdateBody",
    "HookUrlCreateBody",
    "HookUrlDto",
    "HookVisibility",
    "HookVisibilityUpdateBody",
    "HookerModel",
    "Id",
    "LoginBody",
    "LoginErrorCode",
    "LoginErrorDto",
    "LoginResultDto",
    "LoginSuccessDto",
    "MatchType",
    "MqttBrokerConfig",
    "MqttDeletedDto",
    "MqttJwtConfigDto",
    "QuerySelector",
    "RegisterBody",
    "ResetPasswordBody",
    "SaveColumnsBody",
    "UserDto",
    "ValueSelector",
    "VerifyEmailBody",
    "new_verify",
]
