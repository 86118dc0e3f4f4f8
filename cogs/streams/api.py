import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import aiohttp

log = logging.getLogger(__name__)


class AbsentReason(enum.Enum):
    TRANSPORT = 'transport'
    STATUS = 'status'
    MALFORMED = 'malformed'


@dataclass(frozen=True)
class Present:
    data: Any


@dataclass(frozen=True)
class Absent:
    reason: AbsentReason
    detail: str = ''


ApiResult = Union[Present, Absent]


def first_item(result: ApiResult, key: str = 'data') -> Optional[dict]:
    """First entry of the result's list under ``key``, or None."""
    if not isinstance(result, Present) or not isinstance(result.data, dict):
        return None
    items = result.data.get(key)
    if not isinstance(items, list) or not items:
        return None
    return items[0]


class APIClient:
    """Authenticated GET against one REST host.

    Never raises for HTTP or network trouble: every failure comes back as an
    ``Absent`` result so a polling loop can simply try again next tick.
    """

    base_url = ''
    platform = 'api'

    def __init__(self, timeout: float = 10.0, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def auth_headers(self) -> Optional[dict]:
        """Headers for the next request, or None when the client cannot authenticate."""
        return {}

    def auth_params(self) -> dict:
        return {}

    def on_status(self, status: int):
        """Hook for subclasses reacting to a non-200 status."""

    async def call(self, path: str, params: Optional[dict] = None) -> ApiResult:
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = dict(params or {})
        query.update(self.auth_params())

        try:
            headers = await self.auth_headers()
            if headers is None:
                return Absent(AbsentReason.STATUS, 'no access token')
            session = await self.get_session()
            async with session.get(url, params=query, headers=headers, timeout=self.timeout) as response:
                if response.status != 200:
                    log.warning(f"{self.platform} API returned {response.status} for {path}")
                    self.on_status(response.status)
                    return Absent(AbsentReason.STATUS, str(response.status))
                try:
                    return Present(await response.json(content_type=None))
                except ValueError as e:
                    log.error(f"An error occurred parsing the {self.platform} API response for {path}: {e}")
                    return Absent(AbsentReason.MALFORMED, str(e))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.error(f"Error occurred while polling the {self.platform} API ({path}): {e!r}")
            return Absent(AbsentReason.TRANSPORT, repr(e))


class TwitchClient(APIClient):
    base_url = 'https://api.twitch.tv/helix'
    token_url = 'https://id.twitch.tv/oauth2/token'
    platform = 'Twitch'

    def __init__(self, client_id: str, client_secret: str, **kwargs):
        super().__init__(**kwargs)
        self.client_id = client_id
        self.client_secret = client_secret
        self.access_token = None
        self.token_expires_at = None

    async def get_access_token(self) -> Optional[str]:
        if self.access_token and self.token_expires_at and datetime.now(timezone.utc) < self.token_expires_at:
            return self.access_token

        data = {
            'client_id': self.client_id,
            'client_secret': self.client_secret,
            'grant_type': 'client_credentials'
        }

        session = await self.get_session()
        async with session.post(self.token_url, data=data, timeout=self.timeout) as response:
            if response.status != 200:
                log.error(f"Failed to get Twitch access token: {response.status}")
                return None
            try:
                token_data = await response.json(content_type=None)
                access_token = token_data['access_token']
            except (ValueError, KeyError, TypeError) as e:
                log.error(f"Malformed Twitch token response: {e!r}")
                return None

        self.access_token = access_token
        expires_in = token_data.get('expires_in', 3600)
        self.token_expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in - 300)
        return self.access_token

    async def auth_headers(self) -> Optional[dict]:
        access_token = await self.get_access_token()
        if not access_token:
            return None
        return {'Client-ID': self.client_id, 'Authorization': f'Bearer {access_token}'}

    def on_status(self, status: int):
        if status == 401:
            self.access_token = None
            self.token_expires_at = None


class YouTubeClient(APIClient):
    base_url = 'https://www.googleapis.com/youtube/v3'
    platform = 'YouTube'

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key

    def auth_params(self) -> dict:
        return {'key': self.api_key}
