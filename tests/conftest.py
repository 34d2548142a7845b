"""Shared fixtures: a fake Discord REST API served through httpx.MockTransport."""

import json
import re
from datetime import datetime, timezone

import httpx
import pytest

from matchypairing.config import Settings
from matchypairing.discord.api import DiscordClient

GUILD_ID = 1
ROLE_ID = "900"
NOTIFICATION_CHANNEL_ID = "10"
HISTORY_CHANNEL_ID = "11"
BASE_URL = "https://discord.test/api"


class FakeDiscord:
    """Just enough of the Discord REST API for the pairing commands."""

    def __init__(self):
        self.roles = [
            {"id": "899", "name": "everyone"},
            {"id": ROLE_ID, "name": "matchy-meetups"},
        ]
        self.channels = [
            {"id": NOTIFICATION_CHANNEL_ID, "name": "matchy-meetups"},
            {"id": HISTORY_CHANNEL_ID, "name": "matchy-meetups-history"},
        ]
        self.members = []
        self.users = {}
        # newest first, like Discord returns them
        self.messages = {NOTIFICATION_CHANNEL_ID: [], HISTORY_CHANNEL_ID: []}
        self.dms = {}
        self.edits = []
        self.requests = []
        self.closed_dms = set()
        self._next_id = 5000

    def add_member(self, user_id, roles=(ROLE_ID,), name=None):
        self.members.append({"user": {"id": str(user_id)}, "roles": list(roles)})
        self.users[str(user_id)] = {
            "id": str(user_id),
            "username": f"user{user_id}",
            "global_name": name,
        }

    def add_history(self, content, timestamp=None):
        timestamp = timestamp or datetime.now(timezone.utc)
        self.messages[HISTORY_CHANNEL_ID].append(
            {
                "id": str(self._new_id()),
                "content": content,
                "timestamp": timestamp.isoformat(),
            }
        )

    def _new_id(self):
        self._next_id += 1
        return self._next_id

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/api") :]
        params = request.url.params
        method = request.method

        if method == "GET" and path == f"/guilds/{GUILD_ID}/roles":
            return httpx.Response(200, json=self.roles)
        if method == "GET" and path == f"/guilds/{GUILD_ID}/channels":
            return httpx.Response(200, json=self.channels)
        if method == "GET" and path == f"/guilds/{GUILD_ID}/members":
            members = sorted(self.members, key=lambda m: int(m["user"]["id"]))
            if "after" in params:
                members = [m for m in members if int(m["user"]["id"]) > int(params["after"])]
            return httpx.Response(200, json=members[: int(params["limit"])])

        m = re.fullmatch(r"/channels/([^/]+)/messages", path)
        if m and method == "GET":
            messages = self.messages.get(m.group(1), [])
            if "before" in params:
                ids = [msg["id"] for msg in messages]
                messages = messages[ids.index(params["before"]) + 1 :]
            return httpx.Response(200, json=messages[: int(params["limit"])])
        if m and method == "POST":
            channel_id = m.group(1)
            message = {
                "id": str(self._new_id()),
                "channel_id": channel_id,
                "content": json.loads(request.content)["content"],
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            if channel_id.startswith("dm-"):
                self.dms[channel_id[3:]] = message["content"]
            else:
                self.messages.setdefault(channel_id, []).insert(0, message)
            return httpx.Response(200, json=message)

        m = re.fullmatch(r"/channels/([^/]+)/messages/([^/]+)", path)
        if m and method == "PATCH":
            content = json.loads(request.content)["content"]
            for message in self.messages.get(m.group(1), []):
                if message["id"] == m.group(2):
                    message["content"] = content
            self.edits.append((m.group(1), m.group(2), content))
            return httpx.Response(200, json={"id": m.group(2), "content": content})

        if method == "POST" and path == "/users/@me/channels":
            recipient = json.loads(request.content)["recipient_id"]
            if recipient in self.closed_dms:
                return httpx.Response(403, json={"message": "Cannot send messages to this user"})
            return httpx.Response(200, json={"id": f"dm-{recipient}"})

        m = re.fullmatch(r"/users/([0-9]+)", path)
        if m and method == "GET" and m.group(1) in self.users:
            return httpx.Response(200, json=self.users[m.group(1)])

        return httpx.Response(404, json={"message": "Unknown"})


@pytest.fixture
def fake_discord():
    return FakeDiscord()


@pytest.fixture
def discord_client(fake_discord):
    client = DiscordClient(
        "test-token", base_url=BASE_URL, transport=httpx.MockTransport(fake_discord.handler)
    )
    yield client
    client.close()


@pytest.fixture
def settings():
    return Settings.from_env({})
