"""Request body serialization.

Request models are written with only their ``EXPOSED_FIELDS`` and only the
fields that are set. Droplet creation is shaped by its own policy function,
since the API expects slugs and ids where the model holds nested objects.
"""

import json
from typing import Any

from pydantic import BaseModel

from .types import Droplet


def droplet_create_payload(droplet: Droplet) -> dict[str, Any]:
    """Build the ``POST /droplets`` body from a droplet model.

    ``image`` is sent as the numeric id when known, otherwise as the slug.
    SSH keys are flattened to ids, falling back to fingerprints; the list is
    omitted when empty.
    """
    payload: dict[str, Any] = {
        "name": droplet.name,
        "region": droplet.region.slug if droplet.region else None,
        "size": droplet.resolved_size_slug,
    }

    image = droplet.image
    if image is not None:
        payload["image"] = image.id if image.id is not None else image.slug

    optional_flags = {
        "backups": droplet.enable_backup,
        "ipv6": droplet.enable_ipv6,
        "private_networking": droplet.enable_private_networking,
    }
    payload.update({k: v for k, v in optional_flags.items() if v is not None})

    ssh_keys = [
        key.id if key.id is not None else key.fingerprint
        for key in droplet.keys
        if key.id is not None or key.fingerprint
    ]
    if ssh_keys:
        payload["ssh_keys"] = ssh_keys

    if droplet.user_data:
        payload["user_data"] = droplet.user_data

    return payload


def exposed_payload(model: BaseModel) -> dict[str, Any]:
    """Dump the exposed, non-null fields of a request model."""
    exposed = getattr(type(model), "EXPOSED_FIELDS", None)
    return model.model_dump(
        mode="json",
        include=set(exposed) if exposed is not None else None,
        exclude_none=True,
    )


def serialize_payload(model: BaseModel) -> str:
    """Serialize a request body model to JSON text."""
    if isinstance(model, Droplet):
        return json.dumps(droplet_create_payload(model))
    return json.dumps(exposed_payload(model))
