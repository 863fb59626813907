"""
HTTP client for the backend REST surface.

Wraps a requests.Session. Create calls send multipart form-data when files
are attached and JSON otherwise; update calls always send JSON.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from .exceptions import ApiError

logger = logging.getLogger(__name__)

LOGIN_FAILED = "login failed"

FilePart = Tuple[str, bytes, str]


def _error_message(response: requests.Response) -> str:
    """Best user-facing message for a failed response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        for key in ('message', 'error', 'detail'):
            if payload.get(key):
                return str(payload[key])

    text = (response.text or "").strip()
    if text and len(text) < 300:
        return text
    return f"Request failed with status {response.status_code}"


def _as_list(payload: Any) -> List[Dict[str, Any]]:
    return payload if isinstance(payload, list) else []


class ApiClient:
    """Client for the exhibition-management backend."""

    def __init__(self, base_url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        """
        Args:
            base_url: Backend root, e.g. http://localhost:8000
            timeout: Per-request timeout in seconds
            session: Optional requests session (injected in tests)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, api_config: Dict[str, Any]) -> "ApiClient":
        return cls(api_config['base_url'], timeout=api_config.get('timeout_seconds', 30))

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, FilePart]] = None,
    ) -> Any:
        url = self.url(path)
        logger.debug(f"{method} {path}")
        try:
            response = self.session.request(
                method, url, json=json, data=data, files=files, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"Could not reach the server: {e}") from e

        if not response.ok:
            message = _error_message(response)
            logger.error(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code, payload=response.text)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _create(self, path: str, data: Dict[str, Any], files: Optional[Dict[str, FilePart]]) -> Any:
        attached = {name: part for name, part in (files or {}).items() if part is not None}
        if attached:
            form = {key: "" if value is None else str(value) for key, value in data.items()}
            return self._request('POST', path, data=form, files=attached)
        return self._request('POST', path, json=data)

    # Organisers

    def list_organisers(self, admin: bool = False) -> List[Dict[str, Any]]:
        return _as_list(self._request('GET', '/api/admin/signup' if admin else '/api/signup'))

    def get_organiser(self, organiser_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/api/find/signup/{organiser_id}')

    def create_organiser(self, payload: Dict[str, Any]) -> Any:
        return self._request('POST', '/api/signup', json=payload)

    # Exhibitions

    def list_exhibitions(self, admin: bool = False) -> List[Dict[str, Any]]:
        return _as_list(self._request('GET', '/api/admin/exhibition' if admin else '/api/exhibition'))

    def get_exhibition(self, exhibition_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/api/find/exhibition/{exhibition_id}')

    def create_exhibition(self, data: Dict[str, Any], files: Optional[Dict[str, FilePart]] = None) -> Any:
        return self._create('/api/exhibition', data, files)

    def update_exhibition(self, exhibition_id: str, data: Dict[str, Any]) -> Any:
        return self._request('PUT', f'/api/admin/updateexhibitions/{exhibition_id}', json=data)

    def delete_exhibition(self, exhibition_id: str) -> Any:
        return self._request('DELETE', f'/api/delete/exhibition/{exhibition_id}')

    def delete_all_exhibitions(self) -> Any:
        return self._request('DELETE', '/api/admin/deleteallexhibition')

    # Companies

    def list_companies(self, admin: bool = False) -> List[Dict[str, Any]]:
        return _as_list(self._request('GET', '/api/admin/company' if admin else '/api/company'))

    def list_companies_for_exhibition(self, exhibition_id: str) -> List[Dict[str, Any]]:
        return _as_list(self._request('GET', f'/api/company/{exhibition_id}'))

    def get_company(self, company_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/api/companydetail/{company_id}')

    def get_company_for_products(self, company_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/api/company/addproduct/{company_id}')

    def create_company(self, data: Dict[str, Any], files: Optional[Dict[str, FilePart]] = None) -> Any:
        return self._create('/api/company', data, files)

    def update_company(self, company_id: str, data: Dict[str, Any]) -> Any:
        return self._request('PUT', f'/api/admin/updatecompany/{company_id}', json=data)

    def delete_all_companies(self) -> Any:
        return self._request('DELETE', '/api/admin/deleteallcompany')

    def brochure_url(self, company_id: str) -> str:
        return self.url(f'/api/brochure/{company_id}')

    # Products

    def list_products(self, admin: bool = False) -> List[Dict[str, Any]]:
        return _as_list(self._request('GET', '/api/admin/product' if admin else '/api/product'))

    def list_products_for_company(self, company_id: str) -> List[Dict[str, Any]]:
        return _as_list(self._request('GET', f'/api/product/{company_id}'))

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/api/product/detail/{product_id}')

    def create_product(self, data: Dict[str, Any], files: Optional[Dict[str, FilePart]] = None) -> Any:
        return self._create('/api/product', data, files)

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Any:
        return self._request('PUT', f'/api/admin/updateproduct/{product_id}', json=data)

    def delete_product(self, product_id: str) -> Any:
        return self._request('DELETE', f'/api/product/delete/{product_id}')

    def delete_all_products(self) -> Any:
        return self._request('DELETE', '/api/admin/deleteallproduct')

    # Services

    def list_services(self) -> List[Dict[str, Any]]:
        return _as_list(self._request('GET', '/api/get/service'))

    def create_service(self, payload: Dict[str, Any]) -> Any:
        return self._request('POST', '/api/add/service', json=payload)

    # Auth

    def login(self, email: str, password: str, remember_me: bool = False) -> Dict[str, Any]:
        payload = {'email': email, 'password': password, 'rememberMe': remember_me}
        response = self._request('POST', '/api/login', json=payload)
        return response if isinstance(response, dict) else {'message': LOGIN_FAILED}
