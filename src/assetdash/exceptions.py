"""Custom exception hierarchy for assetdash."""

from __future__ import annotations

from typing import Any


class AssetDashError(Exception):
    """Base exception for all assetdash errors."""


class AssetDashConfigError(AssetDashError):
    """Invalid or missing configuration."""


class AssetDashParseError(AssetDashError):
    """Response JSON did not match the expected model."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class AssetDashTransportError(AssetDashError):
    """HTTP-level failure (network, non-2xx, invalid JSON).

    ``body`` holds the decoded JSON error body when the server sent one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class AssetNotFoundError(AssetDashTransportError):
    """The server answered 404 for the requested resource.

    For configuration reads this is an expected outcome: an asset simply
    has no stored configuration yet.
    """


class ConfigurationValidationError(AssetDashTransportError):
    """The server rejected a configuration save.

    ``messages`` holds the flattened, human-readable list produced by
    :func:`assetdash._api.configuration.validation_messages`.
    """

    def __init__(
        self,
        messages: list[str],
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: Any = None,
    ) -> None:
        self.messages = list(messages)
        super().__init__(
            "; ".join(self.messages),
            status_code=status_code,
            endpoint=endpoint,
            body=body,
        )
