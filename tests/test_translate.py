from urllib.parse import parse_qs

import httpx

from otodom_summarizer.utils.translate import translate_to_english


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_empty_text_is_not_sent():
    def handler(request):
        raise AssertionError("no request expected")

    assert translate_to_english("", api_key="key", client=_client(handler)) == ""
    assert translate_to_english("   ", api_key="key", client=_client(handler)) == ""


def test_without_api_key_returns_original():
    assert translate_to_english("Jasne mieszkanie", api_key="") == "Jasne mieszkanie"


def test_successful_translation():
    seen = {}

    def handler(request):
        seen.update(parse_qs(request.content.decode()))
        return httpx.Response(200, json={"translations": [{"text": "Bright apartment"}]})

    result = translate_to_english("Jasne mieszkanie", api_key="key", client=_client(handler))

    assert result == "Bright apartment"
    assert seen["text"] == ["Jasne mieszkanie"]
    assert seen["source_lang"] == ["PL"]
    assert seen["target_lang"] == ["EN"]
    assert seen["auth_key"] == ["key"]


def test_http_error_falls_back_to_original():
    def handler(request):
        return httpx.Response(403, json={"message": "Wrong key"})

    assert translate_to_english("Jasne mieszkanie", api_key="bad", client=_client(handler)) == (
        "Jasne mieszkanie"
    )


def test_empty_translation_falls_back_to_original():
    def handler(request):
        return httpx.Response(200, json={"translations": []})

    assert translate_to_english("Jasne mieszkanie", api_key="key", client=_client(handler)) == (
        "Jasne mieszkanie"
    )


def test_invalid_json_falls_back_to_original():
    def handler(request):
        return httpx.Response(200, text="not json")

    assert translate_to_english("Jasne mieszkanie", api_key="key", client=_client(handler)) == (
        "Jasne mieszkanie"
    )
