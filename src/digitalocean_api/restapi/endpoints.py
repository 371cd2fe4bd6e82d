"""Endpoint catalog for the DigitalOcean v2 REST API.

Every supported operation is a member of :class:`ApiAction` carrying its
URL path template, HTTP verb, the JSON element name wrapping singular
responses, and the pydantic model the response decodes into. The client
consults this table for the shape of every request.
"""

from enum import Enum

from pydantic import BaseModel

from . import types


class RequestMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class ActionType(str, Enum):
    """Values of the ``type`` field in droplet and image action bodies."""

    REBOOT = "reboot"
    POWER_CYCLE = "power_cycle"
    SHUTDOWN = "shutdown"
    POWER_OFF = "power_off"
    POWER_ON = "power_on"
    PASSWORD_RESET = "password_reset"
    RESIZE = "resize"
    SNAPSHOT = "snapshot"
    RESTORE = "restore"
    REBUILD = "rebuild"
    DISABLE_BACKUPS = "disable_backups"
    RENAME = "rename"
    CHANGE_KERNEL = "change_kernel"
    ENABLE_IPV6 = "enable_ipv6"
    ENABLE_PRIVATE_NETWORKING = "enable_private_networking"
    TRANSFER = "transfer"


_DROPLET_ACTIONS_PATH = "/droplets/{}/actions"


def _droplet_action(action_type: ActionType) -> tuple:
    return (_DROPLET_ACTIONS_PATH, "action", types.Action, RequestMethod.POST, action_type)


class ApiAction(Enum):
    """Supported API operations.

    Path templates use positional ``{}`` placeholders, filled in order from
    the request's path parameters. The API version prefix is added by the
    client.
    """

    # Droplets
    AVAILABLE_DROPLETS = ("/droplets", "droplets", types.Droplets)
    AVAILABLE_DROPLETS_KERNELS = ("/droplets/{}/kernels", "kernels", types.Kernels)
    GET_DROPLET_SNAPSHOTS = ("/droplets/{}/snapshots", "snapshots", types.Snapshots)
    GET_DROPLET_BACKUPS = ("/droplets/{}/backups", "backups", types.Backups)
    GET_DROPLET_INFO = ("/droplets/{}", "droplet", types.Droplet)
    CREATE_DROPLET = ("/droplets", "droplet", types.Droplet, RequestMethod.POST)
    DELETE_DROPLET = ("/droplets/{}", "response", types.Delete, RequestMethod.DELETE)

    # Droplet actions
    REBOOT_DROPLET = _droplet_action(ActionType.REBOOT)
    POWER_CYCLE_DROPLET = _droplet_action(ActionType.POWER_CYCLE)
    SHUTDOWN_DROPLET = _droplet_action(ActionType.SHUTDOWN)
    POWER_OFF_DROPLET = _droplet_action(ActionType.POWER_OFF)
    POWER_ON_DROPLET = _droplet_action(ActionType.POWER_ON)
    RESET_DROPLET_PASSWORD = _droplet_action(ActionType.PASSWORD_RESET)
    RESIZE_DROPLET = _droplet_action(ActionType.RESIZE)
    SNAPSHOT_DROPLET = _droplet_action(ActionType.SNAPSHOT)
    RESTORE_DROPLET = _droplet_action(ActionType.RESTORE)
    REBUILD_DROPLET = _droplet_action(ActionType.REBUILD)
    DISABLE_DROPLET_BACKUPS = _droplet_action(ActionType.DISABLE_BACKUPS)
    RENAME_DROPLET = _droplet_action(ActionType.RENAME)
    CHANGE_DROPLET_KERNEL = _droplet_action(ActionType.CHANGE_KERNEL)
    ENABLE_DROPLET_IPV6 = _droplet_action(ActionType.ENABLE_IPV6)
    ENABLE_DROPLET_PRIVATE_NETWORKING = _droplet_action(ActionType.ENABLE_PRIVATE_NETWORKING)

    # Actions
    AVAILABLE_ACTIONS = ("/actions", "actions", types.Actions)
    GET_ACTION_INFO = ("/actions/{}", "action", types.Action)
    GET_DROPLET_ACTIONS = (_DROPLET_ACTIONS_PATH, "actions", types.Actions)
    GET_IMAGE_ACTIONS = ("/images/{}/actions", "actions", types.Actions)

    # Images
    AVAILABLE_IMAGES = ("/images", "images", types.Images)
    GET_IMAGE_INFO = ("/images/{}", "image", types.Image)
    UPDATE_IMAGE_INFO = ("/images/{}", "image", types.Image, RequestMethod.PUT)
    DELETE_IMAGE = ("/images/{}", "response", types.Delete, RequestMethod.DELETE)
    TRANSFER_IMAGE = (
        "/images/{}/actions",
        "action",
        types.Action,
        RequestMethod.POST,
        ActionType.TRANSFER,
    )

    # Regions and sizes
    AVAILABLE_REGIONS = ("/regions", "regions", types.Regions)
    AVAILABLE_SIZES = ("/sizes", "sizes", types.Sizes)

    # Domains
    AVAILABLE_DOMAINS = ("/domains", "domains", types.Domains)
    GET_DOMAIN_INFO = ("/domains/{}", "domain", types.Domain)
    CREATE_DOMAIN = ("/domains", "domain", types.Domain, RequestMethod.POST)
    DELETE_DOMAIN = ("/domains/{}", "response", types.Delete, RequestMethod.DELETE)

    # Domain records
    GET_DOMAIN_RECORDS = ("/domains/{}/records", "domain_records", types.DomainRecords)
    GET_DOMAIN_RECORD_INFO = ("/domains/{}/records/{}", "domain_record", types.DomainRecord)
    CREATE_DOMAIN_RECORD = (
        "/domains/{}/records",
        "domain_record",
        types.DomainRecord,
        RequestMethod.POST,
    )
    UPDATE_DOMAIN_RECORD = (
        "/domains/{}/records/{}",
        "domain_record",
        types.DomainRecord,
        RequestMethod.PUT,
    )
    DELETE_DOMAIN_RECORD = (
        "/domains/{}/records/{}",
        "response",
        types.Delete,
        RequestMethod.DELETE,
    )

    # SSH keys
    AVAILABLE_KEYS = ("/account/keys", "ssh_keys", types.Keys)
    GET_KEY_INFO = ("/account/keys/{}", "ssh_key", types.Key)
    CREATE_KEY = ("/account/keys", "ssh_key", types.Key, RequestMethod.POST)
    UPDATE_KEY = ("/account/keys/{}", "ssh_key", types.Key, RequestMethod.PUT)
    DELETE_KEY = ("/account/keys/{}", "response", types.Delete, RequestMethod.DELETE)

    def __init__(
        self,
        path: str,
        element_name: str,
        result_type: type[BaseModel],
        method: RequestMethod = RequestMethod.GET,
        action_type: ActionType | None = None,
    ):
        self.path = path
        self.element_name = element_name
        self.result_type = result_type
        self.method = method
        # Body "type" for action endpoints
        self.action_type = action_type

    @property
    def is_collection(self) -> bool:
        """Whether the response is a top-level collection (no unwrapping)."""
        return self.element_name.endswith("s")
