"""
Tests for the commentary client and its fallbacks.
"""
import asyncio
import threading
from unittest.mock import MagicMock

import pytest
import requests

from app.commentary.client import CommentaryError, GeminiClient, extract_text
from app.commentary.service import (
    BALL_EMPTY_FALLBACK, BALL_FAILURE_FALLBACK, CommentaryService, summary_fallback,
)
from app.engine.deliveries import DeliveryOutcomeKind

BALL_ARGS = dict(
    shot=4,
    opposing_value=2,
    is_wicket=False,
    kind=DeliveryOutcomeKind.NORMAL,
    runs=4,
    is_free_hit=False,
)


def create_mock_client(text=None, error=None):
    client = MagicMock(spec=GeminiClient)
    client.enabled = True
    if error is not None:
        client.generate.side_effect = error
    else:
        client.generate.return_value = text
    return client


def create_response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = "error body"
    resp.json.return_value = payload
    return resp


class TestCommentaryService:

    def test_returns_generated_text(self):
        client = create_mock_client(text="  Smashed through the covers!  ")
        service = CommentaryService(client)
        assert asyncio.run(service.ball_commentary(**BALL_ARGS)) == "Smashed through the covers!"
        prompt = client.generate.call_args[0][0]
        assert "Runs scored: 4" in prompt
        assert "Is it a free hit? No" in prompt

    def test_failure_falls_back(self):
        service = CommentaryService(create_mock_client(error=CommentaryError("HTTP 500")))
        assert asyncio.run(service.ball_commentary(**BALL_ARGS)) == BALL_FAILURE_FALLBACK

    def test_empty_reply_falls_back(self):
        service = CommentaryService(create_mock_client(text=""))
        assert asyncio.run(service.ball_commentary(**BALL_ARGS)) == BALL_EMPTY_FALLBACK

    def test_offline_service_falls_back(self):
        service = CommentaryService()
        assert not service.is_online
        assert asyncio.run(service.ball_commentary(**BALL_ARGS)) == BALL_FAILURE_FALLBACK

    def test_hung_call_times_out(self):
        unblock = threading.Event()

        def slow_generate(prompt, max_output_tokens=None):
            unblock.wait(2)
            return "Too late"

        client = create_mock_client()
        client.generate.side_effect = slow_generate
        service = CommentaryService(client, timeout=0.05)

        async def scenario():
            try:
                return await service.ball_commentary(**BALL_ARGS)
            finally:
                unblock.set()

        assert asyncio.run(scenario()) == BALL_FAILURE_FALLBACK

    def test_summary_text(self):
        client = create_mock_client(text="Computer romp home!")
        service = CommentaryService(client)
        text = asyncio.run(service.result_summary(30, 1, 31, 0, "Computer"))
        assert text == "Computer romp home!"
        assert "Winner: Computer" in client.generate.call_args[0][0]

    @pytest.mark.parametrize("client", [
        None,
        create_mock_client(text=""),
        create_mock_client(error=CommentaryError("boom")),
    ])
    def test_summary_fallback_names_winner(self, client):
        service = CommentaryService(client)
        text = asyncio.run(service.result_summary(30, 1, 31, 0, "Computer"))
        assert text == "Final Result: Computer wins."

    def test_unexpected_client_error_falls_back(self):
        service = CommentaryService(create_mock_client(error=RuntimeError("boom")))
        assert asyncio.run(service.ball_commentary(**BALL_ARGS)) == BALL_FAILURE_FALLBACK

    def test_unexpected_summary_error_falls_back(self):
        service = CommentaryService(create_mock_client(error=RuntimeError("boom")))
        text = asyncio.run(service.result_summary(30, 1, 31, 0, "Computer"))
        assert text == "Final Result: Computer wins."

    def test_tie_fallback(self):
        assert summary_fallback("Match Tied") == "Final Result: Match Tied."


class TestGeminiClient:

    def test_disabled_without_api_key(self):
        client = GeminiClient(api_key="")
        assert not client.enabled
        with pytest.raises(CommentaryError):
            client.generate("prompt")

    def test_generate_posts_prompt(self):
        session = MagicMock()
        session.post.return_value = create_response(payload={
            "candidates": [{"content": {"parts": [{"text": "Edged "}, {"text": "and gone!"}]}}]
        })
        client = GeminiClient(api_key="key", model="test-model", base_url="https://example.test/v1", session=session)

        assert client.generate("prompt", max_output_tokens=50) == "Edged and gone!"

        url = session.post.call_args[0][0]
        kwargs = session.post.call_args[1]
        assert url == "https://example.test/v1/models/test-model:generateContent"
        assert kwargs["headers"] == {"x-goog-api-key": "key"}
        assert kwargs["json"]["generationConfig"] == {"maxOutputTokens": 50}

    def test_http_error_raises(self):
        session = MagicMock()
        session.post.return_value = create_response(status_code=500)
        client = GeminiClient(api_key="key", session=session)
        with pytest.raises(CommentaryError, match="HTTP 500"):
            client.generate("prompt")

    def test_network_error_raises(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("unreachable")
        client = GeminiClient(api_key="key", session=session)
        with pytest.raises(CommentaryError, match="Network error"):
            client.generate("prompt")

    def test_invalid_json_raises(self):
        session = MagicMock()
        resp = create_response()
        resp.json.side_effect = ValueError("not json")
        session.post.return_value = resp
        client = GeminiClient(api_key="key", session=session)
        with pytest.raises(CommentaryError, match="Invalid JSON"):
            client.generate("prompt")

    def test_non_object_json_raises(self):
        session = MagicMock()
        session.post.return_value = create_response(payload=["not", "a", "dict"])
        client = GeminiClient(api_key="key", session=session)
        with pytest.raises(CommentaryError, match="Unexpected response body"):
            client.generate("prompt")

    def test_list_reply_falls_back_through_service(self):
        session = MagicMock()
        session.post.return_value = create_response(payload=["not", "a", "dict"])
        service = CommentaryService(GeminiClient(api_key="key", session=session))
        assert asyncio.run(service.ball_commentary(**BALL_ARGS)) == BALL_FAILURE_FALLBACK

    def test_extract_text_rejects_malformed_parts(self):
        with pytest.raises(CommentaryError):
            extract_text({"candidates": [{"content": {"parts": ["text"]}}]})

    def test_extract_text_without_candidates(self):
        assert extract_text({}) == ""
        assert extract_text({"candidates": [{}]}) == ""
