"""Image registry client."""
import httpx
from typing import Any, Dict, Optional

from topology_registry.errors import ImageNotFoundError, ImageRegistryError


class ImageRegistry:
    """Looks up image metadata by uuid."""

    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    async def get_image(self, image_uuid: str) -> Dict[str, Any]:
        url = f"{self.base_url}/images/{image_uuid}"

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.get(url, headers={"Accept": "application/json"})

            if response.status_code == 404:
                raise ImageNotFoundError(f"Image {image_uuid} not found")
            if response.status_code != 200:
                raise ImageRegistryError(f"Failed to get image {image_uuid}: {response.text}")

            return response.json()
