"""Ports the client depends on."""

from .ports import CredentialSource, MessageCallback, ReconnectCallback, Transport

__all__ = ["CredentialSource", "MessageCallback", "ReconnectCallback", "Transport"]
