"""
HTTP client for the Tempify backend.

Covers the three collaborators the editor talks to: the template/frame
catalog, saved design persistence, and authentication. Calls are never
retried; failures raise ApiError for the caller to report.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import requests

from .config import ConfigManager
from .constants import DEFAULT_REQUEST_TIMEOUT, VERSION
from .design.models import DesignDocument, ElementIdGenerator, document_from_dict, element_to_dict
from .design.presets import FramePreset, frame_preset_from_dict

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    """Anything that can hand out the current bearer token."""

    def get_token(self) -> Optional[str]:
        ...


class StaticCredentialProvider:
    """Fixed token, or anonymous when token is None."""

    def __init__(self, token: Optional[str] = None):
        self.token = token

    def get_token(self) -> Optional[str]:
        return self.token


class ConfigCredentialProvider:
    """Reads the token stored in the user's config each time it is needed."""

    def __init__(self, config: ConfigManager):
        self.config = config

    def get_token(self) -> Optional[str]:
        return self.config.get_auth_token()


class ApiError(Exception):
    """A failed call to the backend."""

    def __init__(self, message: str, status: int = 0, data: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data

    @property
    def is_network_error(self) -> bool:
        return self.status == 0

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


@dataclass(frozen=True)
class TemplateInfo:
    """Catalog data needed to seed a design from a template."""

    id: str
    display_name: str
    background_image_url: str


@dataclass(frozen=True)
class SavedDesignSummary:
    id: str
    name: str
    template_id: str = ""
    thumbnail: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class SavedDesign:
    id: str
    name: str
    template_id: str
    document: DesignDocument


def design_payload(
    document: DesignDocument,
    display_name: str,
    template_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build the saved-design request body for a document."""
    payload: Dict[str, Any] = {
        "name": display_name,
        "thumbnail": document.background_image or "",
        "backgroundImage": document.background_image or "",
        "backgroundColor": document.background_color,
        "elements": [element_to_dict(e, include_id=False) for e in document.elements],
    }
    if template_id is not None:
        payload["templateId"] = str(template_id)
    return payload


class TempifyApiClient:
    """
    Client for the Tempify REST API.

    Usage:
        client = TempifyApiClient("http://localhost:3000", StaticCredentialProvider(token))
        template = client.get_template("64f0c0ffee")
        design_id = client.save_design(model.document, "My Flyer", template.id)
    """

    def __init__(
        self,
        base_url: str,
        credentials: Optional[CredentialProvider] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: Server root, e.g. http://localhost:3000
            credentials: Provider for the bearer token attached to requests
            timeout: Request timeout in seconds
            session: requests.Session to use (one is created if omitted)
        """
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials or StaticCredentialProvider()
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": f"Tempify/{VERSION}",
        })
        logger.info(f"API client initialized with base URL: {self.base_url}")

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}/api{endpoint}"
        headers = dict(kwargs.pop("headers", None) or {})
        token = self.credentials.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise ApiError(f"Request to {endpoint} timed out", 0) from e
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Network error: {e}", 0) from e

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}

        if not response.ok:
            message = f"HTTP {response.status_code}"
            if isinstance(data, dict):
                message = data.get("message") or data.get("error") or message
            logger.error(f"{method} {endpoint} failed: {message}")
            raise ApiError(message, response.status_code, data)

        if not isinstance(data, dict):
            raise ApiError("Invalid response format", response.status_code, data)
        return data

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> str:
        """Authenticate and return the bearer token."""
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        token = data.get("token") or (data.get("data") or {}).get("token")
        if not token:
            raise ApiError("Login response did not include a token", 200, data)
        logger.info(f"Logged in as {email}")
        return token

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def get_template(self, template_id: str) -> TemplateInfo:
        data = self._request("GET", f"/templates/{template_id}")
        template = data.get("template") or data.get("data") or data
        image_url = template.get("imageUrl") or template.get("cloudinaryUrl") or ""
        if not image_url and template.get("imagePath"):
            image_url = f"{self.base_url}/Template_images/{template['imagePath']}"
        return TemplateInfo(
            id=str(template.get("_id") or template.get("id") or template_id),
            display_name=template.get("name") or "Custom Template",
            background_image_url=image_url,
        )

    def get_frames_with_elements(self) -> List[FramePreset]:
        data = self._request("GET", "/frames/all-with-elements")
        entries = data.get("data") or data.get("frames") or []
        presets = [frame_preset_from_dict(entry, self.base_url) for entry in entries]
        logger.info(f"Fetched {len(presets)} frame presets")
        return presets

    # ------------------------------------------------------------------
    # Saved designs
    # ------------------------------------------------------------------

    def save_design(self, document: DesignDocument, display_name: str, template_id: Optional[str]) -> str:
        """Persist a new design and return its id."""
        data = self._request(
            "POST", "/saved-designs",
            json=design_payload(document, display_name, template_id or ""),
        )
        design = data.get("design") or data.get("data") or data
        design_id = design.get("_id") or design.get("id")
        if not design_id:
            raise ApiError("Save response did not include a design id", 201, data)
        logger.info(f"Saved design {display_name!r} as {design_id}")
        return str(design_id)

    def update_design(self, design_id: str, document: DesignDocument, display_name: str) -> None:
        self._request("PUT", f"/saved-designs/{design_id}", json=design_payload(document, display_name))
        logger.info(f"Updated design {design_id}")

    def _saved_design_entries(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/saved-designs")
        entries = data.get("designs") or data.get("data") or []
        if not isinstance(entries, list):
            raise ApiError("Invalid saved design list", 200, data)
        return [entry for entry in entries if isinstance(entry, dict)]

    def get_saved_design(self, design_id: str, id_generator: Optional[ElementIdGenerator] = None) -> SavedDesign:
        """
        Fetch one saved design.

        The service has no single-design route, so the design is picked out
        of the full documents returned by the list endpoint.
        """
        for design in self._saved_design_entries():
            if str(design.get("_id") or design.get("id") or "") != str(design_id):
                continue
            try:
                document = document_from_dict(design, id_generator)
            except ValueError as e:
                raise ApiError(f"Saved design {design_id} is malformed: {e}", 200, design) from e
            return SavedDesign(
                id=str(design_id),
                name=design.get("name") or "",
                template_id=str(design.get("templateId") or ""),
                document=document,
            )
        raise ApiError("Design not found", 404)

    def list_saved_designs(self) -> List[SavedDesignSummary]:
        return [
            SavedDesignSummary(
                id=str(d.get("_id") or d.get("id") or ""),
                name=d.get("name") or "",
                template_id=str(d.get("templateId") or ""),
                thumbnail=d.get("thumbnail") or d.get("thumbnailPath") or "",
                updated_at=str(d.get("updatedAt") or ""),
            )
            for d in self._saved_design_entries()
        ]

    def delete_saved_design(self, design_id: str) -> None:
        self._request("DELETE", f"/saved-designs/{design_id}")
        logger.info(f"Deleted design {design_id}")
