from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from officebots.models.messages import GroupUpdate
from officebots.services.slack import MessagingError, SlackClient


def _response(body: object, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = str(body)
    resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status} error")
    return resp


def _client(*responses: MagicMock) -> tuple[SlackClient, MagicMock]:
    session = requests.Session()
    post = MagicMock(side_effect=list(responses))
    session.post = post  # type: ignore[method-assign]
    return SlackClient("token-xxx", session=session), post


def test_post_message_request_shape():
    client, post = _client(
        _response({"ok": True, "channel": "channel", "ts": "123.456", "message": {"text": "Sending a message"}})
    )
    result = client.post_message("channel", "Sending a message")

    assert post.call_count == 1
    args, kwargs = post.call_args
    assert args[0] == "https://slack.com/api/chat.postMessage"
    assert kwargs["data"] == {"type": "mrkdwn", "channel": "channel", "text": "Sending a message"}
    assert kwargs["timeout"] == 30
    assert client.session.headers["Authorization"] == "Bearer token-xxx"

    assert result.ok is True
    assert result.channel == "channel"
    assert result.ts == "123.456"
    assert result.text == "Sending a message"


def test_post_message_threaded_reply():
    client, post = _client(_response({"ok": True, "channel": "c", "ts": "200.1"}))
    client.post_message("c", "reply", thread_ts="123.456")
    assert post.call_args.kwargs["data"]["thread_ts"] == "123.456"


def test_update_user_group_joins_users():
    client, post = _client(_response({"ok": True, "usergroup": {"id": "S1"}}))
    body = client.update_user_group(GroupUpdate(user_group="S1", users=("U1", "U2")))
    args, kwargs = post.call_args
    assert args[0] == "https://slack.com/api/usergroups.users.update"
    assert kwargs["data"] == {"usergroup": "S1", "users": "U1,U2"}
    assert body["ok"] is True


def test_custom_base_url_and_timeout():
    session = requests.Session()
    session.post = MagicMock(return_value=_response({"ok": True, "ts": "1.0"}))  # type: ignore[method-assign]
    client = SlackClient("t", session=session, base_url="http://localhost:9999/api/", timeout=5)
    client.post_message("c", "x")
    args, kwargs = session.post.call_args
    assert args[0] == "http://localhost:9999/api/chat.postMessage"
    assert kwargs["timeout"] == 5


def test_api_error_payload_raises():
    client, _ = _client(_response({"ok": False, "error": "channel_not_found"}))
    with pytest.raises(MessagingError) as e:
        client.post_message("nope", "x")
    assert e.value.method == "chat.postMessage"
    assert e.value.error == "channel_not_found"


def test_http_error_raises():
    client, _ = _client(_response({"ok": False}, status=500))
    with pytest.raises(MessagingError):
        client.update_user_group(GroupUpdate(user_group="S1", users=("U1",)))


def test_transport_error_raises():
    session = requests.Session()
    session.post = MagicMock(side_effect=requests.exceptions.ConnectionError("boom"))  # type: ignore[method-assign]
    client = SlackClient("t", session=session)
    with pytest.raises(MessagingError) as e:
        client.post_message("c", "x")
    assert "boom" in str(e.value)


def test_invalid_json_raises():
    resp = _response({})
    resp.json.side_effect = ValueError("Expecting value")
    client, _ = _client(resp)
    with pytest.raises(MessagingError) as e:
        client.post_message("c", "x")
    assert "invalid JSON" in str(e.value)
