import pytest

from lens_pipeline.errors import MissingPayload, UpstreamError
from lens_pipeline.normalizer import (
    EmptyReply,
    ErrorReply,
    FlatReply,
    NestedReply,
    classify_reply,
    extract_payload,
)


def _message(*content):
    return {"type": "message", "content": list(content)}


def test_flat_output_text_is_returned_exactly():
    assert extract_payload(200, {"output_text": "X"}) == "X"


def test_nested_output_text_is_returned_exactly():
    body = {"output": [_message({"type": "output_text", "text": "Y"})]}
    assert extract_payload(200, body) == "Y"


def test_flat_wins_over_nested():
    body = {"output_text": "flat", "output": [_message({"type": "output_text", "text": "nested"})]}
    assert extract_payload(200, body) == "flat"


def test_empty_flat_text_uses_nested():
    body = {"output_text": "", "output": [_message({"type": "output_text", "text": "nested"})]}
    assert extract_payload(200, body) == "nested"


def test_nested_skips_non_message_entries_and_nodes():
    body = {
        "output": [
            {"type": "reasoning", "content": [{"type": "output_text", "text": "thinking"}]},
            _message({"type": "refusal", "refusal": "no"}, {"type": "output_text", "text": 7}),
            _message({"type": "output_text", "text": "second message"}),
            _message({"type": "output_text", "text": "third message"}),
        ]
    }
    assert extract_payload(200, body) == "second message"


def test_output_text_is_not_reserialized():
    text = '{ "UL" : {"paragraph": "p", "bullets": []} }\n'
    assert extract_payload(200, {"output_text": text}) == text


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"output": []},
        {"output": [{"type": "message", "content": []}]},
        {"output": [{"type": "message"}]},
        {"output": "text"},
        {"output_text": None},
        {"output": [_message({"type": "output_text", "text": ""})]},
        ["not", "a", "dict"],
        None,
    ],
)
def test_missing_payload(body):
    with pytest.raises(MissingPayload) as info:
        extract_payload(200, body)
    assert info.value.status_code == 502


def test_http_error_status_carries_status_and_raw_body():
    raw = {"error": {"message": "Rate limit reached", "type": "requests"}}
    with pytest.raises(UpstreamError) as info:
        extract_payload(429, raw)
    assert info.value.upstream_status == 429
    assert info.value.raw == raw
    assert info.value.status_code == 502
    assert info.value.detail.startswith("OpenAI API error (429): ")
    assert "Rate limit reached" in info.value.detail


def test_error_status_wins_even_with_output_text():
    with pytest.raises(UpstreamError):
        extract_payload(500, {"output_text": "X"})


def test_error_field_on_success_status_is_passed_through():
    err = {"code": "server_error", "message": "boom"}
    with pytest.raises(UpstreamError) as info:
        extract_payload(200, {"error": err, "output_text": "X"})
    assert info.value.to_body() == {"error": err}
    assert info.value.upstream_status == 200


def test_null_error_field_is_not_a_failure():
    assert extract_payload(200, {"error": None, "output_text": "X"}) == "X"


def test_classify_reply_discriminates_shapes():
    assert classify_reply(503, "busy") == ErrorReply(status=503, error="busy")
    assert classify_reply(200, {"output_text": "a"}) == FlatReply(text="a")
    assert classify_reply(200, {"output": []}) == NestedReply(output=[])
    assert classify_reply(200, {"status": "completed"}) == EmptyReply()
