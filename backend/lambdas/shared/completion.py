"""
Thin client for OpenAI-compatible chat completion APIs.

Each call sends one system instruction plus one user message and returns the
text of the first choice. Credentials are resolved once per container from
the environment or AWS Secrets Manager and injected into the client.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import requests
from requests import RequestException

from .config import get_env, get_float_env
from .exceptions import ConfigurationError, ServiceError
from .logging import get_logger


LOGGER = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT_SECONDS = 60.0

_KEY_CACHE: dict[str, str] = {}


@dataclass(frozen=True)
class CompletionSettings:
    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class CompletionPrompt:
    system: str
    user: str

    def to_messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def resolve_api_key(
    *,
    inline_key: Optional[str],
    secret_name: Optional[str],
    secrets_manager_client=None,
) -> str:
    """
    Return the inline key when set, otherwise the key stored in ``secret_name``.

    Secrets may hold the bare key or a JSON object with an ``api_key`` field.
    Keys read from Secrets Manager are cached per secret for the container.
    """
    if inline_key and inline_key.strip():
        return inline_key.strip()
    if not secret_name:
        raise ConfigurationError("OPENAI_API_KEY or OPENAI_API_KEY_SECRET_NAME must be configured")
    if secret_name in _KEY_CACHE:
        return _KEY_CACHE[secret_name]

    client = secrets_manager_client or boto3.client("secretsmanager", region_name=get_env("AWS_REGION"))
    try:
        secret = client.get_secret_value(SecretId=secret_name).get("SecretString") or ""
    except (ClientError, BotoCoreError) as exc:
        raise ServiceError(f"Failed to load API key secret: {exc}") from exc

    api_key = _key_from_secret(secret)
    if not api_key:
        raise ConfigurationError(f"API key secret {secret_name} is empty")
    _KEY_CACHE[secret_name] = api_key
    return api_key


def _key_from_secret(secret: str) -> str:
    secret = secret.strip()
    if not secret.startswith("{"):
        return secret
    try:
        value = json.loads(secret).get("api_key")
    except (json.JSONDecodeError, AttributeError):
        return ""
    return value.strip() if isinstance(value, str) else ""


def load_settings(secrets_manager_client=None) -> CompletionSettings:
    api_key = resolve_api_key(
        inline_key=get_env("OPENAI_API_KEY"),
        secret_name=get_env("OPENAI_API_KEY_SECRET_NAME"),
        secrets_manager_client=secrets_manager_client,
    )
    return CompletionSettings(
        api_key=api_key,
        model=get_env("OPENAI_MODEL", DEFAULT_MODEL),
        base_url=get_env("OPENAI_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout_seconds=get_float_env("OPENAI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
    )


def _error_detail(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text[:200]


class CompletionClient:
    """Issues single-choice chat completion requests."""

    def __init__(self, settings: CompletionSettings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.settings.base_url}/chat/completions"

    def complete(self, system: str, text: str) -> str:
        prompt = CompletionPrompt(system=system, user=text)
        payload: Dict[str, Any] = {
            "model": self.settings.model,
            "messages": prompt.to_messages(),
        }
        try:
            response = self.session.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.settings.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.settings.timeout_seconds,
            )
        except RequestException as exc:
            raise ServiceError(f"Completion request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ServiceError(
                f"Completion service returned HTTP {response.status_code}: {_error_detail(response)}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ServiceError(f"Completion service returned non-JSON payload: {exc}") from exc

        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices:
            raise ServiceError("Completion response missing choices")

        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            LOGGER.warning("Completion response had no text content (model=%s)", self.settings.model)
            return ""
        return content


def build_client(session: Optional[requests.Session] = None) -> CompletionClient:
    return CompletionClient(load_settings(), session=session)


__all__ = [
    "CompletionClient",
    "CompletionPrompt",
    "CompletionSettings",
    "build_client",
    "load_settings",
    "resolve_api_key",
]
