"""Read-only connector for the SQCB REST API."""
import requests
from typing import Any, Dict, List, Optional
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
import logging

from src.config.settings import settings
from src.transformers.sqcb_transformer import unwrap_payload

logger = logging.getLogger(__name__)

HANDLER_ROLES = ('hd', 'admin')


class SqcbApiError(Exception):
    """Raised when an SQCB API request fails."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class SqcbApiConnector:
    """
    Connector for the SQCB REST API.
    Handles authentication, retries, and error handling for the reads the
    dashboard needs: the SQCB record list and the handler (HD/Admin) list.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[int] = None,
        retry_attempts: Optional[int] = None,
        retry_delay: Optional[int] = None,
    ):
        """
        Initialize SQCB API connector.

        Args:
            base_url: Base URL for the API (default: settings.SQCB_API_BASE_URL)
            api_token: Optional bearer token (default: settings.SQCB_API_TOKEN)
            timeout: Request timeout in seconds
            retry_attempts: Number of retry attempts
            retry_delay: Backoff factor between retries in seconds
        """
        self.name = 'sqcb_api'
        self.base_url = (base_url or settings.SQCB_API_BASE_URL).rstrip('/')
        self.api_token = settings.SQCB_API_TOKEN if api_token is None else api_token
        self.timeout = settings.SQCB_API_TIMEOUT if timeout is None else timeout
        self.retry_attempts = settings.SQCB_API_RETRY_ATTEMPTS if retry_attempts is None else retry_attempts
        self.retry_delay = settings.SQCB_API_RETRY_DELAY if retry_delay is None else retry_delay
        self.logger = logging.getLogger(f'{__name__}.{self.name}')
        self.session = requests.Session()
        self._setup_retry_strategy()

    def _setup_retry_strategy(self) -> None:
        """Configure retry strategy for the session."""
        retry_strategy = Retry(
            total=self.retry_attempts,
            backoff_factor=self.retry_delay,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=['GET'],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)

    def authenticate(self) -> bool:
        """
        Authenticate with the API.
        For token auth, this just sets headers.
        """
        self.session.headers.update({'Accept': 'application/json'})
        if self.api_token:
            self.session.headers.update({'Authorization': f'Bearer {self.api_token}'})
        self.logger.info(f'Authenticated with {self.base_url}')
        return True

    def validate_connection(self) -> bool:
        """Validate API connection by requesting the record list."""
        try:
            response = self.session.get(
                f'{self.base_url}/sqcb',
                timeout=self.timeout,
            )
            is_valid = response.status_code < 400
            if is_valid:
                self.logger.info(f'Connection to {self.base_url} validated')
            else:
                self.logger.warning(
                    f'Connection validation failed: {response.status_code}'
                )
            return is_valid
        except requests.RequestException as e:
            self.logger.error(f'Connection validation error: {str(e)}')
            return False

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make a GET request.

        Args:
            endpoint: API endpoint (relative to base_url)
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            SqcbApiError: If the request fails or the body is not JSON
        """
        url = f'{self.base_url}/{endpoint.lstrip("/")}'
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise SqcbApiError(
                f'GET {endpoint} failed with HTTP {status_code}',
                endpoint=endpoint,
                status_code=status_code,
            ) from e
        except requests.RequestException as e:
            raise SqcbApiError(f'GET {endpoint} failed: {str(e)}', endpoint=endpoint) from e
        except ValueError as e:
            raise SqcbApiError(f'GET {endpoint} returned invalid JSON', endpoint=endpoint) from e

    def list_records(self) -> List[Dict[str, Any]]:
        """
        Fetch every SQCB record.

        Returns:
            Raw record dicts as returned by the API
        """
        records = unwrap_payload(self.get('/sqcb'))
        self.logger.info(f'Fetched {len(records)} SQCB records')
        return records

    def list_handlers(self) -> List[Dict[str, Any]]:
        """
        Fetch users who can be assigned as HD-incharge.

        Returns:
            Users whose role is HD or Admin (case-insensitive)
        """
        users = self.get('/users')
        if not isinstance(users, list):
            self.logger.warning(f'Unexpected /users payload: {type(users).__name__}')
            return []

        handlers = [
            user for user in users
            if isinstance(user, dict)
            and isinstance(user.get('role'), str)
            and user['role'].lower() in HANDLER_ROLES
        ]
        self.logger.info(f'Fetched {len(handlers)} handlers out of {len(users)} users')
        return handlers

    def close(self) -> None:
        """Close the session."""
        self.session.close()
        self.logger.info(f'Closed connection to {self.base_url}')

    def __enter__(self):
        """Context manager entry."""
        self.authenticate()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
