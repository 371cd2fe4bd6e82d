"""Resource types for the DigitalOcean v2 REST API.

Pydantic models representing the structure of data exchanged with the API.
Singular resources arrive nested under an element name (``{"droplet": {...}}``);
collections arrive unwrapped at the top level together with pagination
``links`` and ``meta``.

Models that are also sent as request bodies declare ``EXPOSED_FIELDS``: only
those fields, and only when set, are written to the wire.
"""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


class Pages(BaseModel):
    """Absolute URLs of neighbouring result pages."""

    first: str | None = None
    prev: str | None = None
    next: str | None = None
    last: str | None = None


class Links(BaseModel):
    pages: Pages | None = None


class Meta(BaseModel):
    total: int = 0


class PagedCollection(BaseModel):
    """Common envelope of every list endpoint."""

    links: Links | None = None
    meta: Meta | None = None


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class Region(BaseModel):
    """Datacenter region, identified by its slug (e.g. ``nyc3``)."""

    slug: str | None = None
    name: str | None = None
    sizes: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    available: bool | None = None


class Size(BaseModel):
    """Droplet flavor. Memory in MB, disk in GB, transfer in TB."""

    slug: str | None = None
    memory: int = 0
    vcpus: int = 0
    disk: int = 0
    transfer: float = 0.0
    price_monthly: float = 0.0
    price_hourly: float = 0.0
    regions: list[str] = Field(default_factory=list)
    available: bool | None = None


class Kernel(BaseModel):
    id: int | None = None
    name: str | None = None
    version: str | None = None


class Image(BaseModel):
    """Distribution image, snapshot or backup.

    Only ``name`` is sent on update; images are addressed by ``id`` in the
    URL and by ``id`` or ``slug`` when creating droplets.
    """

    EXPOSED_FIELDS: ClassVar[frozenset[str]] = frozenset({"name"})

    id: int | None = None
    name: str | None = None
    distribution: str | None = None
    slug: str | None = None
    public: bool | None = None
    regions: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    min_disk_size: int | None = None
    type: str | None = None


class Network(BaseModel):
    ip_address: str | None = None
    netmask: str | int | None = None
    gateway: str | None = None
    type: str | None = None


class Networks(BaseModel):
    v4: list[Network] = Field(default_factory=list)
    v6: list[Network] = Field(default_factory=list)


class Key(BaseModel):
    """SSH public key registered with the account."""

    EXPOSED_FIELDS: ClassVar[frozenset[str]] = frozenset({"name", "public_key"})

    id: int | None = None
    name: str | None = None
    fingerprint: str | None = None
    public_key: str | None = None


class Droplet(BaseModel):
    """Virtual compute instance.

    The ``enable_*``, ``keys`` and ``user_data`` fields only exist on the
    create side; the API never returns them.
    """

    id: int | None = None
    name: str | None = None
    memory: int | None = None
    vcpus: int | None = None
    disk: int | None = None
    locked: bool | None = None
    status: str | None = None
    created_at: datetime | None = None
    backup_ids: list[int] = Field(default_factory=list)
    snapshot_ids: list[int] = Field(default_factory=list)
    action_ids: list[int] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    region: Region | None = None
    image: Image | None = None
    size: Size | None = None
    size_slug: str | None = None
    kernel: Kernel | None = None
    networks: Networks | None = None

    # Create-only
    keys: list[Key] = Field(default_factory=list)
    enable_backup: bool | None = None
    enable_ipv6: bool | None = None
    enable_private_networking: bool | None = None
    user_data: str | None = None

    @property
    def resolved_size_slug(self) -> str | None:
        """Slug of the droplet size, whichever way it was given."""
        if self.size_slug:
            return self.size_slug
        if self.size is not None:
            return self.size.slug
        return None


class Action(BaseModel):
    """Asynchronous operation record, polled by id."""

    id: int | None = None
    status: str | None = None
    type: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    resource_id: int | None = None
    resource_type: str | None = None
    region: str | Region | None = None


class Domain(BaseModel):
    """DNS zone. ``ip_address`` is only used on create for the apex A record."""

    EXPOSED_FIELDS: ClassVar[frozenset[str]] = frozenset({"name", "ip_address"})

    name: str | None = None
    ttl: int | None = None
    zone_file: str | None = None
    ip_address: str | None = None


class DomainRecord(BaseModel):
    """Single DNS record inside a domain."""

    EXPOSED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"type", "name", "data", "priority", "port", "weight"},
    )

    id: int | None = None
    type: str | None = None
    name: str | None = None
    data: str | None = None
    priority: int | None = None
    port: int | None = None
    weight: int | None = None


# ---------------------------------------------------------------------------
# Request-only payloads
# ---------------------------------------------------------------------------


class DropletAction(BaseModel):
    """Body of ``POST /droplets/{id}/actions``."""

    EXPOSED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"type", "name", "size", "image", "kernel"},
    )

    type: str
    name: str | None = None
    size: str | None = None
    image: int | None = None
    kernel: int | None = None


class ImageAction(BaseModel):
    """Body of ``POST /images/{id}/actions``."""

    EXPOSED_FIELDS: ClassVar[frozenset[str]] = frozenset({"type", "region"})

    type: str
    region: str | None = None


class Delete(BaseModel):
    """Result of a delete call; the API answers 204 with no body."""

    request_success: bool = False


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


class Droplets(PagedCollection):
    droplets: list[Droplet] = Field(default_factory=list)


class Kernels(PagedCollection):
    kernels: list[Kernel] = Field(default_factory=list)


class Snapshots(PagedCollection):
    snapshots: list[Image] = Field(default_factory=list)


class Backups(PagedCollection):
    backups: list[Image] = Field(default_factory=list)


class Actions(PagedCollection):
    actions: list[Action] = Field(default_factory=list)


class Images(PagedCollection):
    images: list[Image] = Field(default_factory=list)


class Regions(PagedCollection):
    regions: list[Region] = Field(default_factory=list)


class Sizes(PagedCollection):
    sizes: list[Size] = Field(default_factory=list)


class Domains(PagedCollection):
    domains: list[Domain] = Field(default_factory=list)


class DomainRecords(PagedCollection):
    domain_records: list[DomainRecord] = Field(default_factory=list)


class Keys(PagedCollection):
    ssh_keys: list[Key] = Field(default_factory=list)
