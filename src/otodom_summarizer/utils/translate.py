"""Polish to English translation of listing descriptions via the DeepL API."""

from typing import Optional

import httpx
from rich.console import Console
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from otodom_summarizer.config.settings import (
    DEEPL_API_KEY,
    DEEPL_API_URL,
    MAX_RETRIES,
    SOURCE_LANG,
    TARGET_LANG,
    TRANSLATION_TIMEOUT,
)

console = Console()


@retry(
    stop=stop_after_attempt(MAX_RETRIES),
    wait=wait_exponential(min=1, max=10),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
def _request_translation(client: httpx.Client, text: str, api_key: str) -> Optional[str]:
    resp = client.post(
        DEEPL_API_URL,
        data={
            "auth_key": api_key,
            "text": text,
            "source_lang": SOURCE_LANG,
            "target_lang": TARGET_LANG,
        },
    )
    resp.raise_for_status()
    translations = resp.json().get("translations") or []
    if translations and translations[0].get("text"):
        return translations[0]["text"]
    return None


def translate_to_english(
    text: str,
    api_key: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """
    Translate a Polish description to English.

    Falls back to the original text when no API key is configured,
    the text is empty, or the request fails.

    Args:
        text: Polish description
        api_key: DeepL key (default: DEEPL_API_KEY environment variable)
        client: Optional httpx client to reuse
    """
    if not text or not text.strip():
        return ""

    api_key = api_key if api_key is not None else DEEPL_API_KEY
    if not api_key:
        return text

    try:
        if client is not None:
            translated = _request_translation(client, text, api_key)
        else:
            with httpx.Client(timeout=TRANSLATION_TIMEOUT) as own_client:
                translated = _request_translation(own_client, text, api_key)
    except (httpx.HTTPError, ValueError) as e:
        console.print(f"[yellow]Translation failed, using original text: {e}[/]")
        return text

    return translated or text
