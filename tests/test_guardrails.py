"""Tests for the output safety filter."""

from llm.guardrails import filter_output


def test_redacts_api_keys_and_localhost():
    result = filter_output("key: sk-abcdef123456 localhost:3000")
    assert "sk-" not in result.text
    assert "localhost" not in result.text.lower()
    assert "[redacted]" in result.text
    assert "[secret]" in result.text
    assert result.redactions > 0


def test_masks_long_secret_tokens():
    result = filter_output("use sk-ABCDEFGHIJKLMNOPqrstuv to call it")
    assert result.text == "use [secret] to call it"
    assert result.redactions == 1


def test_short_sk_prefix_not_a_secret():
    result = filter_output("the sk-12 code")
    assert result.text == "the sk-12 code"
    assert not result.redacted


def test_masks_local_urls():
    result = filter_output("Open http://127.0.0.1:8080/admin or https://LOCALHOST now")
    assert result.text == "Open [redacted]/admin or [redacted] now"
    assert result.redactions == 2


def test_masks_key_assignments():
    result = filter_output("api_key=abc123 and API-KEY: xyz")
    assert "abc123" not in result.text
    assert "xyz" not in result.text
    assert result.redactions == 2


def test_clean_text_untouched():
    text = "Your plan has three phases."
    result = filter_output(text)
    assert result.text == text
    assert result.redactions == 0
