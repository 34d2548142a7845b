import httpx
import pytest

from conftest import BASE_URL, GUILD_ID, HISTORY_CHANNEL_ID, ROLE_ID
from matchypairing.discord.api import DiscordClient, message_link, retry_after
from matchypairing.exceptions import DiscordAPIError


def make_client(handler):
    return DiscordClient("token", base_url=BASE_URL, transport=httpx.MockTransport(handler))


def test_sends_bot_token(fake_discord, discord_client):
    discord_client.get_guild_roles(GUILD_ID)
    assert fake_discord.requests[0].headers["Authorization"] == "Bot test-token"


def test_find_role_and_channel(discord_client):
    assert discord_client.find_role(GUILD_ID, "matchy-meetups")["id"] == ROLE_ID
    assert discord_client.find_role(GUILD_ID, "nope") is None
    assert discord_client.find_channel(GUILD_ID, "matchy-meetups-history")["id"] == HISTORY_CHANNEL_ID
    assert discord_client.find_channel(GUILD_ID, "nope") is None


def test_members_are_paged(fake_discord, discord_client):
    for uid in range(1, 6):
        fake_discord.add_member(uid)
    members = list(discord_client.iter_guild_members(GUILD_ID, page_limit=2))
    assert [m["user"]["id"] for m in members] == ["1", "2", "3", "4", "5"]
    assert len(fake_discord.requests) == 3


def test_member_pages_are_capped(fake_discord, discord_client):
    for uid in range(1, 6):
        fake_discord.add_member(uid)
    members = list(discord_client.iter_guild_members(GUILD_ID, page_limit=1, max_pages=2))
    assert len(members) == 2


def test_members_with_role(fake_discord, discord_client):
    fake_discord.add_member(1)
    fake_discord.add_member(2, roles=())
    fake_discord.add_member(3, roles=("899", ROLE_ID))
    assert discord_client.members_with_role(GUILD_ID, int(ROLE_ID)) == [1, 3]


def test_messages_are_paged_and_capped(fake_discord, discord_client):
    for i in range(250):
        fake_discord.add_history(f"message {i}")
    messages = list(discord_client.iter_channel_messages(HISTORY_CHANNEL_ID, max_messages=150))
    assert len(messages) == 150
    assert messages[0]["content"] == "message 0"
    assert messages[-1]["content"] == "message 149"
    assert [int(r.url.params["limit"]) for r in fake_discord.requests] == [100, 50]


def test_short_history(fake_discord, discord_client):
    fake_discord.add_history("only one")
    assert len(list(discord_client.iter_channel_messages(HISTORY_CHANNEL_ID))) == 1


def test_create_and_edit_message(fake_discord, discord_client):
    message = discord_client.create_message(HISTORY_CHANNEL_ID, ".")
    discord_client.edit_message(HISTORY_CHANNEL_ID, message["id"], "edited")
    assert fake_discord.messages[HISTORY_CHANNEL_ID][0]["content"] == "edited"


def test_send_dm(fake_discord, discord_client):
    discord_client.send_dm(7, "hello")
    assert fake_discord.dms == {"7": "hello"}


def test_display_name(fake_discord, discord_client):
    fake_discord.add_member(1, name="Ann")
    fake_discord.add_member(2)
    assert discord_client.display_name(1) == "Ann"
    assert discord_client.display_name(2) == "user2"


def test_error_status(discord_client):
    with pytest.raises(DiscordAPIError) as excinfo:
        discord_client.get_user(404404)
    assert excinfo.value.status_code == 404


def test_transport_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with make_client(handler) as client:
        with pytest.raises(DiscordAPIError) as excinfo:
            client.get_guild_roles(GUILD_ID)
    assert excinfo.value.status_code is None


def test_rate_limit_is_retried():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(429, json={"retry_after": 0})
        return httpx.Response(200, json=[{"id": "1", "name": "r"}])

    with make_client(handler) as client:
        assert client.get_guild_roles(GUILD_ID) == [{"id": "1", "name": "r"}]
    assert len(calls) == 2


def test_rate_limit_gives_up():
    def handler(request):
        return httpx.Response(429, json={"retry_after": 0})

    with make_client(handler) as client:
        with pytest.raises(DiscordAPIError) as excinfo:
            client.get_guild_roles(GUILD_ID)
    assert excinfo.value.status_code == 429


def test_rate_limit_without_json_body_is_retried(monkeypatch):
    waits = []
    monkeypatch.setattr("matchypairing.discord.api.time.sleep", waits.append)
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(429, text="<html>rate limited</html>")
        return httpx.Response(200, json=[])

    with make_client(handler) as client:
        assert client.get_guild_roles(GUILD_ID) == []
    assert waits == [1.0]


def test_rate_limit_without_json_body_gives_up(monkeypatch):
    monkeypatch.setattr("matchypairing.discord.api.time.sleep", lambda seconds: None)

    def handler(request):
        return httpx.Response(429, text="<html>rate limited</html>")

    with make_client(handler) as client:
        with pytest.raises(DiscordAPIError) as excinfo:
            client.get_guild_roles(GUILD_ID)
    assert excinfo.value.status_code == 429


@pytest.mark.parametrize(
    "resp, expected",
    [
        (httpx.Response(429, headers={"Retry-After": "2.5"}, json={"retry_after": 9}), 2.5),
        (httpx.Response(429, json={"retry_after": 0.25}), 0.25),
        (httpx.Response(429, text="slow down"), 1.0),
        (httpx.Response(429, headers={"Retry-After": "soon"}, text=""), 1.0),
        (httpx.Response(429, json=["not", "a", "dict"]), 1.0),
    ],
)
def test_retry_after(resp, expected):
    assert retry_after(resp) == expected


def test_empty_body():
    with make_client(lambda request: httpx.Response(204)) as client:
        assert client.edit_message(1, 2, "x") is None


def test_message_link():
    assert message_link(1, 10, 99) == "https://discord.com/channels/1/10/99"
