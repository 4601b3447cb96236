"""VisionClient backends and answer parsing"""
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.errors import EmptyResponseError, ErrorKind, ParseError, RemoteAPIError
from src.media import UploadedFile
from src.vision.client import VisionClient, parse_concept_scores


def openai_status_error(code: int, body: str):
    from openai import APIStatusError

    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return APIStatusError("error", response=httpx.Response(code, request=request, text=body), body=None)


def anthropic_status_error(code: int, body: str):
    from anthropic import APIStatusError

    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return APIStatusError("error", response=httpx.Response(code, request=request, text=body), body=None)


def openai_response(content):
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


# ── parse_concept_scores ──────────────────────────────────────────────────────


def test_parse_raw_json():
    assert parse_concept_scores('{"cat": 90}') == {"cat": 90}


def test_parse_fenced_json_matches_raw():
    assert parse_concept_scores('```json\n{"cat": 90}\n```') == parse_concept_scores('{"cat": 90}')


def test_parse_uses_first_fence_only():
    raw = 'Here:\n```json\n{"cat": 1}\n```\nand\n```json\n{"dog": 2}\n```'
    assert parse_concept_scores(raw) == {"cat": 1}


def test_parse_passes_values_through_unvalidated():
    assert parse_concept_scores('{"cat": 150, "extra": -3}') == {"cat": 150, "extra": -3}


def test_parse_invalid_json_raises_parse_error():
    with pytest.raises(ParseError) as excinfo:
        parse_concept_scores("I think there is a cat")
    assert excinfo.value.kind is ErrorKind.PARSE


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_parse_rejects_nan(token):
    with pytest.raises(ParseError):
        parse_concept_scores(f'{{"cat": {token}}}')


def test_parse_rejects_nan_inside_fence():
    with pytest.raises(ParseError):
        parse_concept_scores('```json\n{"cat": 10, "dog": NaN}\n```')


# ── OpenAIVisionClient ────────────────────────────────────────────────────────


def test_openai_client_implements_abc():
    from src.vision.openai import OpenAIVisionClient

    assert issubclass(OpenAIVisionClient, VisionClient)


async def test_openai_analyze_image_sends_prompt_and_data_url():
    from src.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("src.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=openai_response('{"cat": 85.3}'))
        mock_cls.return_value = mock_openai

        result = await client.analyze_image(b"png-bytes", ["cat", "dog"], "image/png")

    assert result == {"cat": 85.3}
    mock_cls.assert_called_once_with(api_key="test-key", max_retries=0)
    kwargs = mock_openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "o4-mini"
    assert kwargs["max_completion_tokens"] == 1000
    content = kwargs["messages"][0]["content"]
    assert "cat, dog" in content[0]["text"]
    assert content[1]["image_url"]["url"] == "data:image/png;base64,cG5nLWJ5dGVz"


async def test_openai_analyze_images_attaches_every_image():
    from src.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key", model="gpt-4o")
    images = [UploadedFile(b"a", "image/png"), UploadedFile(b"b", "image/webp")]

    with patch("src.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(
            return_value=openai_response('```json\n{"cat": 0}\n```')
        )
        mock_cls.return_value = mock_openai

        result = await client.analyze_images(images, ["cat"])

    assert result == {"cat": 0}
    kwargs = mock_openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["max_completion_tokens"] == 3000
    content = kwargs["messages"][0]["content"]
    assert "as a group" in content[0]["text"]
    assert [block["type"] for block in content] == ["text", "image_url", "image_url"]
    assert content[2]["image_url"]["url"].startswith("data:image/webp;base64,")


async def test_openai_status_error_becomes_remote_api_error_with_body():
    from src.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="bad-key")

    with patch("src.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(
            side_effect=openai_status_error(401, '{"error": "invalid key"}')
        )
        mock_cls.return_value = mock_openai

        with pytest.raises(RemoteAPIError) as excinfo:
            await client.analyze_image(b"bytes", ["cat"])

    assert excinfo.value.status_code == 401
    assert "invalid key" in str(excinfo.value)


@pytest.mark.parametrize("content", [None, ""])
async def test_openai_empty_answer_raises_empty_response(content):
    from src.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("src.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=openai_response(content))
        mock_cls.return_value = mock_openai

        with pytest.raises(EmptyResponseError):
            await client.analyze_image(b"bytes", ["cat"])


async def test_openai_missing_key_is_sent_as_empty_string():
    from src.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key=None)

    with patch("src.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=openai_response("{}"))
        mock_cls.return_value = mock_openai

        await client.analyze_image(b"bytes", ["cat"])

    mock_cls.assert_called_once_with(api_key="", max_retries=0)


@pytest.mark.parametrize("code", [429, 500, 503])
async def test_openai_failure_makes_exactly_one_call(code):
    from src.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("src.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(
            side_effect=openai_status_error(code, "try again later")
        )
        mock_cls.return_value = mock_openai

        with pytest.raises(RemoteAPIError):
            await client.analyze_image(b"bytes", ["cat"])

    mock_cls.assert_called_once_with(api_key="test-key", max_retries=0)
    mock_openai.chat.completions.create.assert_awaited_once()


async def test_openai_non_standard_json_answer_raises_parse_error():
    from src.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("src.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(
            return_value=openai_response('{"cat": Infinity}')
        )
        mock_cls.return_value = mock_openai

        with pytest.raises(ParseError):
            await client.analyze_image(b"bytes", ["cat"])


# ── ClaudeVisionClient ────────────────────────────────────────────────────────


async def test_claude_analyze_image_sends_base64_source():
    from src.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")
    message = MagicMock()
    message.content = [MagicMock(type="text", text='{"dog": 12.4}')]

    with patch("src.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=message)
        mock_cls.return_value = mock_anthropic

        result = await client.analyze_image(b"bytes", ["dog"], "image/gif")

    assert result == {"dog": 12.4}
    kwargs = mock_anthropic.messages.create.call_args.kwargs
    assert kwargs["max_tokens"] == 1000
    image = kwargs["messages"][0]["content"][0]
    assert image["type"] == "image"
    assert image["source"]["media_type"] == "image/gif"


async def test_claude_analyze_images_uses_group_budget():
    from src.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")
    message = MagicMock()
    message.content = [MagicMock(type="text", text='{"dog": 0}')]

    with patch("src.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=message)
        mock_cls.return_value = mock_anthropic

        await client.analyze_images([UploadedFile(b"a", "image/png")] * 3, ["dog"])

    kwargs = mock_anthropic.messages.create.call_args.kwargs
    assert kwargs["max_tokens"] == 3000
    assert len(kwargs["messages"][0]["content"]) == 4


async def test_claude_status_error_becomes_remote_api_error():
    from src.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")

    with patch("src.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(
            side_effect=anthropic_status_error(500, "overloaded")
        )
        mock_cls.return_value = mock_anthropic

        with pytest.raises(RemoteAPIError, match="overloaded"):
            await client.analyze_image(b"bytes", ["dog"])


async def test_claude_empty_answer_raises_empty_response():
    from src.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")
    message = MagicMock()
    message.content = []

    with patch("src.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=message)
        mock_cls.return_value = mock_anthropic

        with pytest.raises(EmptyResponseError):
            await client.analyze_image(b"bytes", ["dog"])


async def test_claude_client_is_built_without_retries():
    from src.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")

    with patch("src.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(
            side_effect=anthropic_status_error(529, "overloaded")
        )
        mock_cls.return_value = mock_anthropic

        with pytest.raises(RemoteAPIError):
            await client.analyze_image(b"bytes", ["dog"])

    mock_cls.assert_called_once_with(api_key="test-key", max_retries=0)
    mock_anthropic.messages.create.assert_awaited_once()
