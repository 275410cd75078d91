"""Assembly of the flat parameter set for a deployed instance."""
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def assemble_params(
    application: Dict[str, Any],
    service: Dict[str, Any],
    instance: Dict[str, Any],
) -> Dict[str, Any]:
    """Merge the params of an application, service and instance.

    The instance's parameters are determined first by the parameters of its
    application, then by those of its service, and finally by its own; later
    levels win on key collisions. ``owner_uuid``, ``image_uuid`` and ``uuid``
    always come from the records themselves, never from user params.
    """
    params: Dict[str, Any] = {}

    for record in (application, service, instance):
        params.update(record.get("params") or {})

    params["owner_uuid"] = application["owner_uuid"]
    params["image_uuid"] = service["image_uuid"]
    params["uuid"] = instance["uuid"]

    logger.debug(f"Assembled parameters for instance {instance['uuid']}: {params}")
    return params
