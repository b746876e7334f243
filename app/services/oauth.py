"""
OAuth 2.0 clients for Google and LinkedIn sign-in
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.core.exceptions import ExternalServiceException
from app.models.enums import SocialProvider
from app.schemas.auth import SocialProfile

logger = logging.getLogger(__name__)


class OAuthProvider:
    """Authorization-code flow: build the consent URL, exchange the code, fetch the profile"""

    provider: SocialProvider
    authorization_url: str
    token_url: str
    scopes = ("openid", "profile", "email")
    extra_authorize_params: Dict[str, str] = {}

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        callback_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.transport = transport

        if not self.is_configured:
            logger.warning(
                f"{self.provider.value} OAuth credentials not configured; "
                f"{self.provider.value} login will not work"
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.OAUTH_TIMEOUT_SECONDS, transport=self.transport)

    def get_authorization_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id or "",
            "redirect_uri": self.callback_url,
            "scope": " ".join(self.scopes),
            "state": state,
            **self.extra_authorize_params,
        }
        return f"{self.authorization_url}?{urlencode(params)}"

    async def exchange_code(self, client: httpx.AsyncClient, code: str) -> str:
        response = await client.post(
            self.token_url,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.callback_url,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            headers={"Accept": "application/json"},
        )
        if response.status_code != 200:
            raise ExternalServiceException(
                self.provider.value, f"Token exchange failed with status {response.status_code}"
            )

        access_token = response.json().get("access_token")
        if not access_token:
            raise ExternalServiceException(self.provider.value, "Token response missing access_token")
        return access_token

    async def fetch_profile(self, client: httpx.AsyncClient, access_token: str) -> SocialProfile:
        raise NotImplementedError

    async def authenticate(self, code: str) -> SocialProfile:
        """Run the code exchange and return the provider's profile"""
        if not self.is_configured:
            raise ExternalServiceException(self.provider.value, "OAuth credentials not configured")

        async with self._client() as client:
            try:
                access_token = await self.exchange_code(client, code)
                return await self.fetch_profile(client, access_token)
            except httpx.HTTPError as e:
                raise ExternalServiceException(self.provider.value, str(e))
            except ValueError as e:
                # Non-JSON body on a 200 response
                raise ExternalServiceException(self.provider.value, f"Invalid provider response: {e}")


def _bearer(access_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access_token}", "Content-Type": "application/json"}


class GoogleOAuthProvider(OAuthProvider):
    provider = SocialProvider.GOOGLE
    authorization_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://openidconnect.googleapis.com/v1/userinfo"
    extra_authorize_params = {"prompt": "select_account", "access_type": "offline"}

    async def fetch_profile(self, client: httpx.AsyncClient, access_token: str) -> SocialProfile:
        response = await client.get(self.userinfo_url, headers=_bearer(access_token))
        response.raise_for_status()
        return self.profile_from_userinfo(response.json())

    @staticmethod
    def profile_from_userinfo(data: Dict[str, Any]) -> SocialProfile:
        if not data.get("sub"):
            raise ExternalServiceException("google", "Google userinfo missing user ID")

        name = data.get("name")
        if not name:
            parts = [part for part in (data.get("given_name"), data.get("family_name")) if part]
            name = " ".join(parts) or None

        return SocialProfile(
            provider=SocialProvider.GOOGLE,
            provider_user_id=str(data["sub"]),
            email=data.get("email") or None,
            name=name,
            avatar_url=data.get("picture") or None,
        )


class LinkedInOAuthProvider(OAuthProvider):
    provider = SocialProvider.LINKEDIN
    authorization_url = "https://www.linkedin.com/oauth/v2/authorization"
    token_url = "https://www.linkedin.com/oauth/v2/accessToken"
    userinfo_url = "https://api.linkedin.com/v2/userinfo"
    me_url = "https://api.linkedin.com/v2/me"
    email_url = "https://api.linkedin.com/v2/emailAddress?q=members&projection=(elements*(handle~))"

    async def fetch_profile(self, client: httpx.AsyncClient, access_token: str) -> SocialProfile:
        response = await client.get(self.userinfo_url, headers=_bearer(access_token))
        if response.status_code == 200:
            return self.profile_from_userinfo(response.json())

        logger.warning(
            "LinkedIn userinfo endpoint failed, falling back to profile endpoint",
            extra={"status": response.status_code},
        )
        return await self._fetch_legacy_profile(client, access_token)

    async def _fetch_legacy_profile(self, client: httpx.AsyncClient, access_token: str) -> SocialProfile:
        response = await client.get(self.me_url, headers=_bearer(access_token))
        if response.status_code != 200:
            raise ExternalServiceException(
                "linkedin", f"LinkedIn API error: {response.status_code} - {response.reason_phrase}"
            )
        me = response.json()

        email = None
        email_response = await client.get(self.email_url, headers=_bearer(access_token))
        if email_response.status_code == 200:
            elements = email_response.json().get("elements") or []
            if elements:
                email = (elements[0].get("handle~") or {}).get("emailAddress")
        else:
            logger.warning("LinkedIn email endpoint failed", extra={"status": email_response.status_code})

        picture = None
        images = ((me.get("profilePicture") or {}).get("displayImage~") or {}).get("elements") or []
        if images:
            identifiers = images[0].get("identifiers") or []
            if identifiers:
                picture = identifiers[0].get("identifier")

        name = f"{me.get('localizedFirstName') or ''} {me.get('localizedLastName') or ''}".strip()
        return self.profile_from_userinfo(
            {"id": me.get("id"), "name": name, "email": email, "picture": picture}
        )

    @staticmethod
    def profile_from_userinfo(data: Dict[str, Any]) -> SocialProfile:
        user_id = data.get("sub") or data.get("id")
        if not user_id:
            raise ExternalServiceException("linkedin", "LinkedIn userinfo missing user ID")

        name = data.get("name")
        if not name:
            given, family = data.get("given_name"), data.get("family_name")
            name = f"{given} {family}" if given and family else (given or family or None)

        return SocialProfile(
            provider=SocialProvider.LINKEDIN,
            provider_user_id=str(user_id),
            email=data.get("email") or None,
            name=name,
            avatar_url=data.get("picture") or None,
        )


def get_google_provider() -> GoogleOAuthProvider:
    return GoogleOAuthProvider(
        settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET, settings.GOOGLE_CALLBACK_URL
    )


def get_linkedin_provider() -> LinkedInOAuthProvider:
    return LinkedInOAuthProvider(
        settings.LINKEDIN_CLIENT_ID, settings.LINKEDIN_CLIENT_SECRET, settings.LINKEDIN_CALLBACK_URL
    )
