"""Unit tests for structured, JSON and text renderings."""

from __future__ import annotations

import json

from errenvelope.core.errors import ErrorEnvelope
from errenvelope.schemas.error import ErrorDocument
from errenvelope.schemas.error import ErrorRecord
from errenvelope.services.renderer import to_structured

_STACK = "Boom: failed\n    at load_run (/srv/app/runs.py:12)\n    at handle (/srv/app/api.py:40)"


def test_to_structured_reprojects_smuggled_records() -> None:
    records = [ErrorRecord(message="m", code="C", stack="hidden")]

    assert to_structured(records) == {"errors": [{"message": "m", "code": "C"}]}
    assert to_structured(records, include_stack=True) == {"errors": [{"message": "m", "code": "C", "stack": "hidden"}]}


def test_to_structured_returns_independent_copies() -> None:
    envelope = ErrorEnvelope({"message": "m", "details": {"rows": [1]}})

    rendered = envelope.to_structured()
    rendered["errors"][0]["details"]["rows"].append(2)
    rendered["errors"].append({"message": "injected"})

    assert envelope.to_structured() == {"errors": [{"message": "m", "details": {"rows": [1]}}]}


def test_to_json_without_argument_returns_compact_json_text() -> None:
    envelope = ErrorEnvelope({"message": "Run failed", "code": "RUN_FAILED", "status": 500})

    rendered = envelope.to_json()

    assert isinstance(rendered, str)
    assert rendered == json.dumps(envelope.to_structured(), separators=(",", ":"))
    assert json.loads(rendered) == {"errors": [{"message": "Run failed", "code": "RUN_FAILED", "status": 500}]}


def test_to_json_with_truthy_argument_returns_structured_value() -> None:
    envelope = ErrorEnvelope("Run failed")

    assert envelope.to_json(True) == {"errors": [{"message": "Run failed"}]}


def test_to_json_tolerates_circular_details() -> None:
    details: dict[str, object] = {"name": "loop"}
    details["self"] = details
    envelope = ErrorEnvelope({"message": "cyclic", "details": details})

    rendered = json.loads(envelope.to_json())

    assert rendered == {"errors": [{"message": "cyclic", "details": {"name": "loop", "self": "[Circular]"}}]}


def test_to_document_validates_wire_model() -> None:
    envelope = ErrorEnvelope({"message": "m", "status": 404}).append({"message": "n", "code": "N"})

    document = envelope.to_document()

    assert isinstance(document, ErrorDocument)
    assert [record.message for record in document.errors] == ["m", "n"]
    assert document.errors[1].code == "N"
    assert document.errors[0].stack is None


def test_to_text_numbers_every_record() -> None:
    envelope = ErrorEnvelope({"message": "first", "code": "A"}, with_stack=False)
    envelope.append({"message": "second"})

    assert envelope.to_text() == (
        "Error 1 of 2: [A] first\n"
        "    with {\n"
        '           "code": "A"\n'
        "         }\n"
        "\n"
        "Error 2 of 2: second\n"
        "    with {}"
    )


def test_to_text_keeps_only_stack_frame_lines() -> None:
    envelope = ErrorEnvelope("outer", with_stack=False)
    envelope.append({"message": "inner", "code": "INNER", "status": 502, "stack": _STACK})

    blocks = envelope.to_text().split("\n\n")

    assert len(blocks) == 2
    assert blocks[1] == (
        "Error 2 of 2: [INNER] inner\n"
        "    at load_run (/srv/app/runs.py:12)\n"
        "    at handle (/srv/app/api.py:40)\n"
        "    with {\n"
        '           "code": "INNER",\n'
        '           "status": 502\n'
        "         }"
    )
    assert "Boom: failed" not in envelope.to_text()


def test_to_text_includes_captured_stack_frames() -> None:
    envelope = ErrorEnvelope("traced")

    header, *rest = envelope.to_text().splitlines()

    assert header == "Error 1 of 1: traced"
    assert any(line.startswith("    at test_to_text_includes_captured_stack_frames (") for line in rest)
    assert "ErrorEnvelope: traced" not in rest


def test_renderings_do_not_change_the_envelope() -> None:
    envelope = ErrorEnvelope({"message": "m", "details": {"k": "v"}})
    first = envelope.to_structured(include_stack=True)

    envelope.to_text()
    envelope.to_json()
    envelope.to_json(True)

    assert envelope.to_structured(include_stack=True) == first


def test_to_json_keeps_non_ascii_message_and_nulls_nan_details() -> None:
    envelope = ErrorEnvelope({"message": "Zahlung fehlgeschlagen: Größe", "details": {"ratio": float("nan")}})

    rendered = envelope.to_json()

    assert rendered == '{"errors":[{"message":"Zahlung fehlgeschlagen: Größe","details":{"ratio":null}}]}'
    assert "NaN" not in rendered
