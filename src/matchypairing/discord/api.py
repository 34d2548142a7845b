"""Utilities for talking with the Discord REST API.

A small synchronous client covering what pairing needs: finding a role and
channels by name, listing the members holding a role, reading a channel's
message history, posting and editing messages and sending direct messages.
"""

# Matchy Pairing
# Copyright (C) 2025  Matchy Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import time
from typing import Any, Dict, Iterator, List, Optional

import httpx

from matchypairing.constants import (
    API_BASE_URL,
    MAX_HISTORY_MESSAGES,
    MEMBER_MAX_PAGES,
    MEMBER_PAGE_LIMIT,
    MESSAGE_LINK_STUB,
    MESSAGE_PAGE_LIMIT,
    REQUEST_TIMEOUT,
)
from matchypairing.exceptions import DiscordAPIError
from matchypairing.type_hints import UserId
from matchypairing.utils import setup_logger

logger = setup_logger(__name__)

# attempts per request when Discord answers 429
MAX_RATE_LIMIT_RETRIES = 3

# seconds to wait when a 429 does not say how long
DEFAULT_RETRY_AFTER = 1.0


def retry_after(resp: httpx.Response) -> float:
    """Seconds to wait before retrying a rate limited request.

    The ``Retry-After`` header wins, then ``retry_after`` from a JSON body.
    Proxies in front of Discord may answer 429 with HTML, which falls back to
    ``DEFAULT_RETRY_AFTER``.
    """
    header = resp.headers.get("Retry-After")
    if header is not None:
        try:
            return float(header)
        except ValueError:
            logger.debug("unreadable Retry-After header %r", header)
    try:
        body = resp.json()
    except ValueError:
        return DEFAULT_RETRY_AFTER
    if not isinstance(body, dict):
        return DEFAULT_RETRY_AFTER
    try:
        return float(body.get("retry_after", DEFAULT_RETRY_AFTER))
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER


def message_link(guild_id: int, channel_id: int, message_id: int) -> str:
    return f"{MESSAGE_LINK_STUB}{guild_id}/{channel_id}/{message_id}"


class DiscordClient:
    """Thin wrapper over an ``httpx.Client`` authenticated as a bot.

    Examples
    --------
        >>> with DiscordClient(token) as client:
        ...     role = client.find_role(guild_id, "matchy-meetups")
    """

    def __init__(
        self,
        token: str,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bot {token}"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "DiscordClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body.

        Raises
        ------
        DiscordAPIError
            on a transport failure or a non 2xx answer
        """
        for attempt in range(MAX_RATE_LIMIT_RETRIES + 1):
            try:
                resp = self._client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                logger.error("%s %s failed: %s", method, path, e)
                raise DiscordAPIError(f"HTTP error: {e}") from e

            if resp.status_code == 429 and attempt < MAX_RATE_LIMIT_RETRIES:
                wait = retry_after(resp)
                logger.warning("rate limited on %s, retrying in %ss", path, wait)
                time.sleep(wait)
                continue

            try:
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error("%s %s returned %d: %s", method, path, resp.status_code, resp.text)
                raise DiscordAPIError(
                    f"Discord API returned {resp.status_code} for {method} {path}",
                    status_code=resp.status_code,
                ) from e

            if resp.status_code == 204 or not resp.content:
                return None
            return resp.json()

        # only reachable when every attempt was rate limited
        raise DiscordAPIError(f"Rate limited on {method} {path}", status_code=429)

    # --- guilds ---

    def get_guild_roles(self, guild_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/guilds/{guild_id}/roles")

    def find_role(self, guild_id: int, name: str) -> Optional[Dict[str, Any]]:
        """First role of the guild called ``name``, None if there is none."""
        return next((r for r in self.get_guild_roles(guild_id) if r["name"] == name), None)

    def get_guild_channels(self, guild_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/guilds/{guild_id}/channels")

    def find_channel(self, guild_id: int, name: str) -> Optional[Dict[str, Any]]:
        """First channel of the guild called ``name``, None if there is none."""
        return next(
            (c for c in self.get_guild_channels(guild_id) if c.get("name") == name), None
        )

    def iter_guild_members(
        self,
        guild_id: int,
        page_limit: int = MEMBER_PAGE_LIMIT,
        max_pages: int = MEMBER_MAX_PAGES,
    ) -> Iterator[Dict[str, Any]]:
        """Yield guild members page by page.

        Stops at the first short page, or after ``max_pages`` pages so a change
        in the end-of-page behaviour can not loop forever.
        """
        after: Optional[str] = None
        for _ in range(max_pages):
            params: Dict[str, Any] = {"limit": page_limit}
            if after is not None:
                params["after"] = after
            page = self._request("GET", f"/guilds/{guild_id}/members", params=params)
            yield from page
            if len(page) < page_limit:
                return
            after = page[-1]["user"]["id"]
        logger.warning("stopped listing members of %s after %d pages", guild_id, max_pages)

    def members_with_role(self, guild_id: int, role_id: Any) -> List[UserId]:
        """Ids of all guild members holding ``role_id``."""
        role_id = str(role_id)
        return [
            int(member["user"]["id"])
            for member in self.iter_guild_members(guild_id)
            if role_id in member.get("roles", [])
        ]

    # --- channels and messages ---

    def iter_channel_messages(
        self, channel_id: int, max_messages: int = MAX_HISTORY_MESSAGES
    ) -> Iterator[Dict[str, Any]]:
        """Yield up to ``max_messages`` messages, newest first."""
        before: Optional[str] = None
        remaining = max_messages
        while remaining > 0:
            params: Dict[str, Any] = {"limit": min(MESSAGE_PAGE_LIMIT, remaining)}
            if before is not None:
                params["before"] = before
            page = self._request("GET", f"/channels/{channel_id}/messages", params=params)
            yield from page[:remaining]
            remaining -= len(page)
            if len(page) < params["limit"]:
                return
            before = page[-1]["id"]

    def create_message(self, channel_id: int, content: str) -> Dict[str, Any]:
        return self._request(
            "POST", f"/channels/{channel_id}/messages", json={"content": content}
        )

    def edit_message(self, channel_id: int, message_id: int, content: str) -> Dict[str, Any]:
        return self._request(
            "PATCH",
            f"/channels/{channel_id}/messages/{message_id}",
            json={"content": content},
        )

    # --- users ---

    def get_user(self, user_id: UserId) -> Dict[str, Any]:
        return self._request("GET", f"/users/{user_id}")

    def display_name(self, user_id: UserId) -> str:
        user = self.get_user(user_id)
        return user.get("global_name") or user["username"]

    def create_dm(self, user_id: UserId) -> Dict[str, Any]:
        return self._request("POST", "/users/@me/channels", json={"recipient_id": str(user_id)})

    def send_dm(self, user_id: UserId, content: str) -> Dict[str, Any]:
        channel = self.create_dm(user_id)
        return self.create_message(channel["id"], content)


#  LocalWords:  DiscordClient
