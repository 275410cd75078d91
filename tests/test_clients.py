"""
Tests for the Keycloak directory and image registry HTTP clients.

Uses httpx.MockTransport so no network is touched.
"""

import httpx
import pytest

from topology_registry.errors import (
    IdentityServiceError,
    ImageNotFoundError,
    ImageRegistryError,
    UserNotFoundError,
)
from topology_registry.utils.images import ImageRegistry
from topology_registry.utils.keycloak import KeycloakDirectory

from conftest import IMAGE_UUID, OWNER_UUID

KEYCLOAK_URL = "http://keycloak.test"
REGISTRY_URL = "http://images.test"


def keycloak_handler(users: dict, token_status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/realms/master/protocol/openid-connect/token":
            if token_status != 200:
                return httpx.Response(token_status, text="invalid credentials")
            return httpx.Response(200, json={"access_token": "admin-token"})

        assert request.headers["Authorization"] == "Bearer admin-token"
        prefix = "/admin/realms/topology/users/"
        user_id = request.url.path[len(prefix):]
        if user_id in users:
            return httpx.Response(200, json=users[user_id])
        return httpx.Response(404, json={"error": "User not found"})

    return handler


class TestKeycloakDirectory:

    @pytest.mark.asyncio
    async def test_get_user_should_return_user(self) -> None:
        user = {"id": OWNER_UUID, "username": "admin"}
        directory = KeycloakDirectory(
            KEYCLOAK_URL, "topology", transport=httpx.MockTransport(keycloak_handler({OWNER_UUID: user}))
        )

        assert await directory.get_user(OWNER_UUID) == user

    @pytest.mark.asyncio
    async def test_get_unknown_user_should_raise_user_not_found(self) -> None:
        directory = KeycloakDirectory(
            KEYCLOAK_URL, "topology", transport=httpx.MockTransport(keycloak_handler({}))
        )

        with pytest.raises(UserNotFoundError):
            await directory.get_user(OWNER_UUID)

    @pytest.mark.asyncio
    async def test_token_failure_should_raise_identity_service_error(self) -> None:
        directory = KeycloakDirectory(
            KEYCLOAK_URL, "topology", transport=httpx.MockTransport(keycloak_handler({}, token_status=401))
        )

        with pytest.raises(IdentityServiceError) as exc_info:
            await directory.get_user(OWNER_UUID)
        assert not isinstance(exc_info.value, UserNotFoundError)


class TestImageRegistry:

    @pytest.mark.asyncio
    async def test_get_image_should_return_metadata(self) -> None:
        image = {"uuid": IMAGE_UUID, "name": "base64"}

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == f"/images/{IMAGE_UUID}"
            return httpx.Response(200, json=image)

        registry = ImageRegistry(REGISTRY_URL, transport=httpx.MockTransport(handler))
        assert await registry.get_image(IMAGE_UUID) == image

    @pytest.mark.asyncio
    async def test_missing_image_should_raise_image_not_found(self) -> None:
        registry = ImageRegistry(
            REGISTRY_URL, transport=httpx.MockTransport(lambda request: httpx.Response(404))
        )
        with pytest.raises(ImageNotFoundError):
            await registry.get_image(IMAGE_UUID)

    @pytest.mark.asyncio
    async def test_server_error_should_raise_image_registry_error(self) -> None:
        registry = ImageRegistry(
            REGISTRY_URL, transport=httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable"))
        )
        with pytest.raises(ImageRegistryError) as exc_info:
            await registry.get_image(IMAGE_UUID)
        assert not isinstance(exc_info.value, ImageNotFoundError)
