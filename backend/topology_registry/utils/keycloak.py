"""Keycloak Admin API client used to look up owners."""
import httpx
from typing import Any, Dict, Optional

from topology_registry.errors import IdentityServiceError, UserNotFoundError


class KeycloakDirectory:
    """Resolves user ids against a Keycloak realm through the admin API."""

    def __init__(
        self,
        base_url: str,
        realm: str,
        admin_user: str = "admin",
        admin_password: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.realm = realm
        self.admin_user = admin_user
        self.admin_password = admin_password
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    async def _get_admin_token(self) -> str:
        """Get admin access token, always fetch fresh to avoid expiration."""
        token_url = f"{self.base_url}/realms/master/protocol/openid-connect/token"

        async with self._client() as client:
            response = await client.post(
                token_url,
                data={
                    "grant_type": "password",
                    "client_id": "admin-cli",
                    "username": self.admin_user,
                    "password": self.admin_password,
                }
            )

            if response.status_code != 200:
                raise IdentityServiceError(f"Failed to get admin token: {response.text}")

            return response.json()["access_token"]

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        """Return the user representation for ``user_id``.

        Raises UserNotFoundError when the realm has no such user and
        IdentityServiceError for any other failure.
        """
        token = await self._get_admin_token()
        url = f"{self.base_url}/admin/realms/{self.realm}/users/{user_id}"

        async with self._client() as client:
            response = await client.get(
                url,
                headers={"Authorization": f"Bearer {token}"}
            )

            if response.status_code == 404:
                raise UserNotFoundError(f"User {user_id} not found")
            if response.status_code != 200:
                raise IdentityServiceError(f"Failed to get user {user_id}: {response.text}")

            return response.json()
