"""Resolution of the Cloud Director user credentials of a cluster."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from fleet_reconcile.utils.errors import FleetReconcileError, MalformedDocumentError

if TYPE_CHECKING:
    from fleet_reconcile.clients.base import K8sClient
    from fleet_reconcile.models.common import ObjectReference

logger = logging.getLogger(__name__)

SECRET_FIELDS = {
    "username": "username",
    "password": "password",
    "refreshToken": "refresh_token",
}


class UserCredentials(BaseModel):
    """Credentials used to reach Cloud Director."""

    username: str = Field("", description="User name")
    password: str = Field("", repr=False, description="Password")
    refresh_token: str = Field("", repr=False, description="API refresh token")


def resolve_user_credentials(
    k8s: K8sClient,
    declared: UserCredentials,
    secret_ref: ObjectReference | None = None,
) -> UserCredentials:
    """Merge declared credentials with those stored in a Secret.

    Every field present in the Secret overrides the declared value, after
    trailing newlines are trimmed.

    Raises:
        NotFoundError: If the referenced Secret does not exist.
        MalformedDocumentError: If a Secret value is not valid base64.
    """
    if secret_ref is None:
        return declared

    namespace = secret_ref.namespace or "default"
    try:
        secret = k8s.get_secret(secret_ref.name, namespace)
    except FleetReconcileError as e:
        raise e.with_context(operation="resolve_credentials", kind="Secret", name=secret_ref.name)

    data = secret.data or {}
    overrides: dict[str, str] = {}
    for key, field_name in SECRET_FIELDS.items():
        if key in data:
            overrides[field_name] = _decode(data[key], key, secret_ref.name).rstrip("\n")

    if overrides:
        logger.debug(f"Using {sorted(overrides)} from secret {namespace}/{secret_ref.name}")
    return declared.model_copy(update=overrides)


def _decode(value: Any, key: str, secret_name: str) -> str:
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, TypeError) as e:
        raise MalformedDocumentError(
            f"Secret key '{key}' is not valid base64 text",
            operation="resolve_credentials",
            kind="Secret",
            name=secret_name,
        ) from e
