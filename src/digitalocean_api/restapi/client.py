"""DigitalOcean v2 REST API client.

Provides an HTTP client with bearer-token authentication, thread-local
connection pools, and response decoding into Pydantic models. Every public
operation follows the same path: validate arguments, build an
:class:`ApiRequest`, execute it, decode the body.
"""

import json
import threading
import time
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from .. import __version__
from . import types
from .endpoints import ApiAction, RequestMethod
from .errors import DigitalOceanError, RequestUnsuccessfulError, ResponseDecodeError
from .request import ApiRequest, ApiResponse
from .serializers import serialize_payload

logger = structlog.get_logger(__name__)

# Only v2 of the API is supported.
DEFAULT_API_VERSION = "v2"

DEFAULT_API_HOST = "api.digitalocean.com"

DEFAULT_TIMEOUT = 30.0

PAGE_PARAM = "page"
# Characters left unescaped inside a single path segment.
PATH_SEGMENT_SAFE = ":@"
JSON_CONTENT_TYPE = "application/json"
FORM_URLENCODED_CONTENT_TYPE = "application/x-www-form-urlencoded"
USER_AGENT = f"digitalocean-api-client/{__version__}"

_SUCCESS_STATUS_CODES = frozenset({200, 201, 202})
_NO_CONTENT = 204

# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


def _check_not_none(value: Any, msg: str) -> None:
    if value is None:
        logger.error(msg)
        raise ValueError(msg)


def _check_not_empty(value: str | None, msg: str) -> None:
    if not value:
        logger.error(msg)
        raise ValueError(msg)


def _check_identifier(value: int | str | None, name: str) -> None:
    """Identifiers may be numeric ids or non-empty strings (slug, fingerprint)."""
    msg = f"Missing required parameter - {name}."
    if isinstance(value, str):
        _check_not_empty(value, msg)
    else:
        _check_not_none(value, msg)


def _validate_droplet_id(droplet_id: int | None) -> None:
    _check_not_none(droplet_id, "Missing required parameter - droplet_id.")


def _validate_page_no(page_no: int | None) -> None:
    _check_not_none(page_no, "Missing required parameter - page_no.")


def _validate_droplet_id_and_page_no(droplet_id: int | None, page_no: int | None) -> None:
    _validate_droplet_id(droplet_id)
    _validate_page_no(page_no)


# ---------------------------------------------------------------------------
# Response decoding
# ---------------------------------------------------------------------------


def decode_response(action: ApiAction, raw: str) -> bool | BaseModel:
    """Decode a response body into the action's result type.

    A body of exactly ``true`` or ``false`` decodes to a boolean whatever the
    declared type. Collection actions (element name ending in ``s``) decode
    the whole body; singular actions decode the object stored under the
    element name.

    Raises:
        ResponseDecodeError: If the body is not valid JSON, lacks the element,
            or does not validate against the result type.
    """
    if raw in ("true", "false"):
        return raw == "true"

    try:
        if action.is_collection:
            return action.result_type.model_validate_json(raw)

        payload = json.loads(raw)
        if not isinstance(payload, dict) or action.element_name not in payload:
            msg = f"Response has no '{action.element_name}' element"
            raise ResponseDecodeError(msg)
        return action.result_type.model_validate(payload[action.element_name])
    except (ValueError, ValidationError) as exc:
        msg = f"Failed to decode response for {action.name}"
        raise ResponseDecodeError(msg) from exc


class DigitalOceanClient:
    """HTTP client for the DigitalOcean v2 REST API.

    Instances are immutable once constructed; use :meth:`with_auth_token` to
    obtain a client for a different token. Thread-safe through thread-local
    storage of httpx.Client instances. Can be used as a context manager for
    automatic cleanup.
    """

    def __init__(
        self,
        auth_token: str,
        api_version: str = DEFAULT_API_VERSION,
        *,
        api_host: str = DEFAULT_API_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the REST API client.

        Args:
            auth_token: OAuth token sent as ``Authorization: Bearer``.
            api_version: API version (only "v2" is accepted).
            api_host: API host name (default: api.digitalocean.com).
            timeout: Request timeout in seconds (default: 30.0).
            transport: Optional httpx transport, shared by all thread-local
                clients and by clients derived through :meth:`with_auth_token`
                (e.g. ``httpx.MockTransport`` in tests). The caller owns it:
                closing any client sharing it closes the transport too.
                Without one, every httpx.Client opens its own pool.

        Raises:
            ValueError: If the token is empty, the API version is not v2 or
                timeout is not positive.
        """
        if not auth_token:
            msg = "auth_token cannot be empty"
            raise ValueError(msg)
        if api_version.lower() != DEFAULT_API_VERSION:
            msg = "Only API version 2 is supported."
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self._auth_token = auth_token
        self._api_version = api_version.lower()
        self._api_host = api_host
        self._timeout = timeout
        self._transport = transport

        self._headers = {
            "User-Agent": USER_AGENT,
            "Accept": JSON_CONTENT_TYPE,
            "Content-Type": JSON_CONTENT_TYPE,
            "Authorization": f"Bearer {auth_token}",
        }

        # Use thread-local storage for httpx.Client (thread safety)
        self._local = threading.local()
        self._clients: list[httpx.Client] = []
        self._clients_lock = threading.Lock()

    @property
    def auth_token(self) -> str:
        return self._auth_token

    @property
    def api_version(self) -> str:
        return self._api_version

    @property
    def api_host(self) -> str:
        return self._api_host

    def with_auth_token(self, auth_token: str) -> "DigitalOceanClient":
        """Return a new client identical to this one but for the token."""
        return DigitalOceanClient(
            auth_token,
            self._api_version,
            api_host=self._api_host,
            timeout=self._timeout,
            transport=self._transport,
        )

    @property
    def client(self) -> httpx.Client:
        """Get or create thread-local httpx client.

        Each thread gets its own httpx.Client instance for thread safety.
        Clients are created lazily and reused within the same thread.

        Returns:
            Thread-local httpx.Client instance.
        """
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            http_client = httpx.Client(
                base_url=f"https://{self._api_host}",
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
            with self._clients_lock:
                self._clients = [c for c in self._clients if not c.is_closed]
                self._clients.append(http_client)
            self._local.client = http_client
        return self._local.client

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def __repr__(self) -> str:
        return (
            f"DigitalOceanClient(api_host={self._api_host!r}, "
            f"api_version={self._api_version!r})"
        )

    def close(self):
        """Close the HTTP clients opened by every thread."""
        with self._clients_lock:
            clients, self._clients = self._clients, []
        for http_client in clients:
            if not http_client.is_closed:
                http_client.close()

    # -----------------------------------------------------------------------
    # Request dispatch
    # -----------------------------------------------------------------------

    def create_url(self, request: ApiRequest) -> httpx.URL:
        """Build the absolute URL for a request.

        Path parameters are percent-encoded and fill the action's template in
        order, each staying within its own path segment. The page number is
        appended as a query parameter only when set.
        """
        path = f"/{self._api_version}{request.action.path}"
        if request.params:
            path = path.format(*(quote(str(p), safe=PATH_SEGMENT_SAFE) for p in request.params))

        params = {PAGE_PARAM: request.page_no} if request.page_no is not None else None
        return httpx.URL(f"https://{self._api_host}{path}", params=params)

    def perform_action(self, request: ApiRequest) -> ApiResponse:
        """Execute a request and decode its response.

        Args:
            request: Descriptor of the call to make.

        Returns:
            Response envelope holding the decoded payload.

        Raises:
            DigitalOceanError: If the API returns an error response.
            RequestUnsuccessfulError: If the request fails in transit or the
                response cannot be interpreted.
        """
        url = self.create_url(request)
        content = None
        if request.method in (RequestMethod.POST, RequestMethod.PUT) and request.data is not None:
            content = serialize_payload(request.data)

        raw = self._execute(request.method, url, content)
        return ApiResponse(
            action=request.action,
            request_success=True,
            data=decode_response(request.action, raw),
        )

    def _invoke(self, request: ApiRequest) -> Any:
        return self.perform_action(request).data

    def _execute(self, method: RequestMethod, url: httpx.URL, content: str | None) -> str:
        """Send the HTTP request and return the response body as text.

        A 204 response is reported as the literal body ``"true"``.
        """
        headers = None
        if method is RequestMethod.DELETE:
            headers = {"Content-Type": FORM_URLENCODED_CONTENT_TYPE}

        start_time = time.time()
        try:
            logger.debug("Making API request", method=method.value, url=str(url))
            response = self.client.request(method.value, url, content=content, headers=headers)
        except httpx.HTTPError as exc:
            duration = time.time() - start_time
            logger.exception(
                "API request failed",
                method=method.value,
                url=str(url),
                duration_seconds=round(duration, 3),
            )
            raise RequestUnsuccessfulError(str(exc)) from exc

        duration = time.time() - start_time
        logger.debug(
            "API request completed",
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )
        return self._evaluate_response(response)

    def _evaluate_response(self, response: httpx.Response) -> str:
        status_code = response.status_code
        if status_code in _SUCCESS_STATUS_CODES:
            return response.text
        if status_code == _NO_CONTENT:
            return "true"
        if 400 <= status_code < 510:  # noqa: PLR2004
            self._raise_provider_error(response)

        msg = f"Unexpected HTTP status code {status_code}"
        logger.error("Unexpected API response", status_code=status_code)
        raise RequestUnsuccessfulError(msg)

    def _raise_provider_error(self, response: httpx.Response) -> None:
        status_code = response.status_code
        try:
            payload = response.json()
            if payload["id"] is None or payload["message"] is None:
                msg = "error id and message must not be null"
                raise ValueError(msg)
            error_id = str(payload["id"])
            message = str(payload["message"])
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Undecodable API error response", status_code=status_code)
            msg = f"HTTP {status_code} with undecodable error body"
            raise RequestUnsuccessfulError(msg) from exc

        logger.error(
            "API error response",
            status_code=status_code,
            error_id=error_id,
            error_message=message,
        )
        raise DigitalOceanError(message, error_id, status_code)

    def _droplet_action(self, action: ApiAction, droplet_id: int, **fields: Any) -> types.Action:
        _validate_droplet_id(droplet_id)
        body = types.DropletAction(type=action.action_type.value, **fields)
        return self._invoke(ApiRequest(action, (droplet_id,), data=body))

    # -----------------------------------------------------------------------
    # Droplets
    # -----------------------------------------------------------------------

    def get_available_droplets(self, page_no: int) -> types.Droplets:
        _validate_page_no(page_no)
        return self._invoke(ApiRequest(ApiAction.AVAILABLE_DROPLETS, page_no=page_no))

    def get_available_kernels(self, droplet_id: int, page_no: int) -> types.Kernels:
        _validate_droplet_id_and_page_no(droplet_id, page_no)
        return self._invoke(
            ApiRequest(ApiAction.AVAILABLE_DROPLETS_KERNELS, (droplet_id,), page_no),
        )

    def get_available_snapshots(self, droplet_id: int, page_no: int) -> types.Snapshots:
        _validate_droplet_id_and_page_no(droplet_id, page_no)
        return self._invoke(ApiRequest(ApiAction.GET_DROPLET_SNAPSHOTS, (droplet_id,), page_no))

    def get_available_backups(self, droplet_id: int, page_no: int) -> types.Backups:
        _validate_droplet_id_and_page_no(droplet_id, page_no)
        return self._invoke(ApiRequest(ApiAction.GET_DROPLET_BACKUPS, (droplet_id,), page_no))

    def get_droplet_info(self, droplet_id: int) -> types.Droplet:
        _validate_droplet_id(droplet_id)
        return self._invoke(ApiRequest(ApiAction.GET_DROPLET_INFO, (droplet_id,)))

    def create_droplet(self, droplet: types.Droplet) -> types.Droplet:
        """Create a droplet.

        Name, region slug, size slug and an image id or slug are required.
        """
        if (
            droplet is None
            or not droplet.name
            or droplet.region is None
            or not droplet.region.slug
            or not droplet.resolved_size_slug
            or droplet.image is None
            or (droplet.image.id is None and not droplet.image.slug)
        ):
            msg = (
                "Missing required parameters [Name, Region Slug, Size Slug, Image Id/Slug] "
                "for create droplet."
            )
            logger.error(msg)
            raise ValueError(msg)

        return self._invoke(ApiRequest(ApiAction.CREATE_DROPLET, data=droplet))

    def delete_droplet(self, droplet_id: int) -> bool:
        _validate_droplet_id(droplet_id)
        return self._invoke(ApiRequest(ApiAction.DELETE_DROPLET, (droplet_id,)))

    # -----------------------------------------------------------------------
    # Droplet actions
    # -----------------------------------------------------------------------

    def reboot_droplet(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.REBOOT_DROPLET, droplet_id)

    def power_cycle_droplet(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.POWER_CYCLE_DROPLET, droplet_id)

    def shutdown_droplet(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.SHUTDOWN_DROPLET, droplet_id)

    def power_off_droplet(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.POWER_OFF_DROPLET, droplet_id)

    def power_on_droplet(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.POWER_ON_DROPLET, droplet_id)

    def reset_droplet_password(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.RESET_DROPLET_PASSWORD, droplet_id)

    def resize_droplet(self, droplet_id: int, size: str) -> types.Action:
        _validate_droplet_id(droplet_id)
        _check_not_empty(size, "Missing required parameter - size.")
        return self._droplet_action(ApiAction.RESIZE_DROPLET, droplet_id, size=size)

    def take_droplet_snapshot(
        self,
        droplet_id: int,
        snapshot_name: str | None = None,
    ) -> types.Action:
        """Snapshot a droplet, optionally naming the resulting image."""
        return self._droplet_action(ApiAction.SNAPSHOT_DROPLET, droplet_id, name=snapshot_name)

    def restore_droplet(self, droplet_id: int, image_id: int) -> types.Action:
        _validate_droplet_id(droplet_id)
        _check_not_none(image_id, "Missing required parameter - image_id.")
        return self._droplet_action(ApiAction.RESTORE_DROPLET, droplet_id, image=image_id)

    def rebuild_droplet(self, droplet_id: int, image_id: int) -> types.Action:
        _validate_droplet_id(droplet_id)
        _check_not_none(image_id, "Missing required parameter - image_id.")
        return self._droplet_action(ApiAction.REBUILD_DROPLET, droplet_id, image=image_id)

    def disable_droplet_backups(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.DISABLE_DROPLET_BACKUPS, droplet_id)

    def rename_droplet(self, droplet_id: int, name: str) -> types.Action:
        _validate_droplet_id(droplet_id)
        _check_not_empty(name, "Missing required parameter - name.")
        return self._droplet_action(ApiAction.RENAME_DROPLET, droplet_id, name=name)

    def change_droplet_kernel(self, droplet_id: int, kernel_id: int) -> types.Action:
        _validate_droplet_id(droplet_id)
        _check_not_none(kernel_id, "Missing required parameter - kernel_id.")
        return self._droplet_action(ApiAction.CHANGE_DROPLET_KERNEL, droplet_id, kernel=kernel_id)

    def enable_droplet_ipv6(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.ENABLE_DROPLET_IPV6, droplet_id)

    def enable_droplet_private_networking(self, droplet_id: int) -> types.Action:
        return self._droplet_action(ApiAction.ENABLE_DROPLET_PRIVATE_NETWORKING, droplet_id)

    # -----------------------------------------------------------------------
    # Actions
    # -----------------------------------------------------------------------

    def get_available_actions(self, page_no: int) -> types.Actions:
        _validate_page_no(page_no)
        return self._invoke(ApiRequest(ApiAction.AVAILABLE_ACTIONS, page_no=page_no))

    def get_action_info(self, action_id: int) -> types.Action:
        _check_not_none(action_id, "Missing required parameter - action_id.")
        return self._invoke(ApiRequest(ApiAction.GET_ACTION_INFO, (action_id,)))

    def get_available_droplet_actions(self, droplet_id: int, page_no: int) -> types.Actions:
        _validate_droplet_id_and_page_no(droplet_id, page_no)
        return self._invoke(ApiRequest(ApiAction.GET_DROPLET_ACTIONS, (droplet_id,), page_no))

    def get_available_image_actions(self, image_id: int, page_no: int) -> types.Actions:
        _check_not_none(image_id, "Missing required parameter - image_id.")
        _validate_page_no(page_no)
        return self._invoke(ApiRequest(ApiAction.GET_IMAGE_ACTIONS, (image_id,), page_no))

    # -----------------------------------------------------------------------
    # Images
    # -----------------------------------------------------------------------

    def get_available_images(self, page_no: int) -> types.Images:
        _validate_page_no(page_no)
        return self._invoke(ApiRequest(ApiAction.AVAILABLE_IMAGES, page_no=page_no))

    def get_image_info(self, image: int | str) -> types.Image:
        """Fetch an image by numeric id or by slug."""
        _check_identifier(image, "image id or slug")
        return self._invoke(ApiRequest(ApiAction.GET_IMAGE_INFO, (image,)))

    def update_image(self, image: types.Image) -> types.Image:
        """Rename an image. Only the name is sent."""
        if image is None or image.id is None or not image.name:
            msg = "Missing required parameter - image id and name."
            logger.error(msg)
            raise ValueError(msg)
        return self._invoke(ApiRequest(ApiAction.UPDATE_IMAGE_INFO, (image.id,), data=image))

    def delete_image(self, image_id: int) -> bool:
        _check_not_none(image_id, "Missing required parameter - image_id.")
        return self._invoke(ApiRequest(ApiAction.DELETE_IMAGE, (image_id,)))

    def transfer_image(self, image_id: int, region_slug: str) -> types.Action:
        """Copy an image to another region."""
        _check_not_none(image_id, "Missing required parameter - image_id.")
        _check_not_empty(region_slug, "Missing required parameter - region_slug.")
        body = types.ImageAction(
            type=ApiAction.TRANSFER_IMAGE.action_type.value,
            region=region_slug,
        )
        return self._invoke(ApiRequest(ApiAction.TRANSFER_IMAGE, (image_id,), data=body))

    # -----------------------------------------------------------------------
    # Regions and sizes
    # -----------------------------------------------------------------------

    def get_available_regions(self, page_no: int) -> types.Regions:
        _validate_page_no(page_no)
        return self._invoke(ApiRequest(ApiAction.AVAILABLE_REGIONS, page_no=page_no))

    def get_available_sizes(self, page_no: int) -> types.Sizes:
        _validate_page_no(page_no)
        return self._invoke(ApiRequest(ApiAction.AVAILABLE_SIZES, page_no=page_no))

    # -----------------------------------------------------------------------
    # Domains
    # -----------------------------------------------------------------------

    def get_available_domains(self, page_no: int | None = None) -> types.Domains:
        return self._invoke(ApiRequest(ApiAction.AVAILABLE_DOMAINS, page_no=page_no))

    def get_domain_info(self, domain_name: str) -> types.Domain:
        _check_not_empty(domain_name, "Missing required parameter - domain_name.")
        return self._invoke(ApiRequest(ApiAction.GET_DOMAIN_INFO, (domain_name,)))

    def create_domain(self, domain: types.Domain) -> types.Domain:
        """Create a domain with an apex A record pointing at ``ip_address``."""
        _check_not_none(domain, "Missing required parameter - domain.")
        _check_not_empty(domain.name, "Missing required parameter - domain_name.")
        _check_not_empty(domain.ip_address, "Missing required parameter - ip_address.")
        return self._invoke(ApiRequest(ApiAction.CREATE_DOMAIN, data=domain))

    def delete_domain(self, domain_name: str) -> bool:
        _check_not_empty(domain_name, "Missing required parameter - domain_name.")
        return self._invoke(ApiRequest(ApiAction.DELETE_DOMAIN, (domain_name,)))

    def get_domain_records(self, domain_name: str) -> types.DomainRecords:
        _check_not_empty(domain_name, "Missing required parameter - domain_name.")
        return self._invoke(ApiRequest(ApiAction.GET_DOMAIN_RECORDS, (domain_name,)))

    def get_domain_record_info(self, domain_name: str, record_id: int) -> types.DomainRecord:
        _check_not_empty(domain_name, "Missing required parameter - domain_name.")
        _check_not_none(record_id, "Missing required parameter - record_id.")
        return self._invoke(
            ApiRequest(ApiAction.GET_DOMAIN_RECORD_INFO, (domain_name, record_id)),
        )

    def create_domain_record(
        self,
        domain_name: str,
        domain_record: types.DomainRecord,
    ) -> types.DomainRecord:
        _check_not_empty(domain_name, "Missing required parameter - domain_name.")
        _check_not_none(domain_record, "Missing required parameter - domain_record.")
        return self._invoke(
            ApiRequest(ApiAction.CREATE_DOMAIN_RECORD, (domain_name,), data=domain_record),
        )

    def update_domain_record(
        self,
        domain_name: str,
        record_id: int,
        name: str,
    ) -> types.DomainRecord:
        """Rename a domain record."""
        _check_not_empty(domain_name, "Missing required parameter - domain_name.")
        _check_not_none(record_id, "Missing required parameter - record_id.")
        _check_not_empty(name, "Missing required parameter - name.")
        return self._invoke(
            ApiRequest(
                ApiAction.UPDATE_DOMAIN_RECORD,
                (domain_name, record_id),
                data=types.DomainRecord(name=name),
            ),
        )

    def delete_domain_record(self, domain_name: str, record_id: int) -> bool:
        _check_not_empty(domain_name, "Missing required parameter - domain_name.")
        _check_not_none(record_id, "Missing required parameter - record_id.")
        return self._invoke(ApiRequest(ApiAction.DELETE_DOMAIN_RECORD, (domain_name, record_id)))

    # -----------------------------------------------------------------------
    # SSH keys
    # -----------------------------------------------------------------------

    def get_available_keys(self, page_no: int | None = None) -> types.Keys:
        return self._invoke(ApiRequest(ApiAction.AVAILABLE_KEYS, page_no=page_no))

    def get_key_info(self, key: int | str) -> types.Key:
        """Fetch an SSH key by numeric id or by fingerprint."""
        _check_identifier(key, "ssh key id or fingerprint")
        return self._invoke(ApiRequest(ApiAction.GET_KEY_INFO, (key,)))

    def create_key(self, key: types.Key) -> types.Key:
        _check_not_none(key, "Missing required parameter - key.")
        _check_not_empty(key.name, "Missing required parameter - name.")
        _check_not_empty(key.public_key, "Missing required parameter - public_key.")
        return self._invoke(ApiRequest(ApiAction.CREATE_KEY, data=key))

    def update_key(self, key: int | str, new_name: str) -> types.Key:
        """Rename an SSH key addressed by id or fingerprint."""
        _check_identifier(key, "ssh key id or fingerprint")
        _check_not_empty(new_name, "Missing required parameter - new_name.")
        body = types.Key(name=new_name)
        return self._invoke(ApiRequest(ApiAction.UPDATE_KEY, (key,), data=body))

    def delete_key(self, key: int | str) -> bool:
        _check_identifier(key, "ssh key id or fingerprint")
        return self._invoke(ApiRequest(ApiAction.DELETE_KEY, (key,)))
