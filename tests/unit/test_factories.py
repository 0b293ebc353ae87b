"""Unit tests for status-class convenience constructors."""

from __future__ import annotations

import pytest

from errenvelope import factories
from errenvelope.core.errors import ErrorEnvelope
from errenvelope.factories import STATUS_FACTORIES
from errenvelope.factories import build_error
from errenvelope.factories import code_for_status

FACTORY_CASES = [(name, code, status) for name, (code, status) in STATUS_FACTORIES.items()]


def test_status_factories_cover_documented_classes() -> None:
    assert STATUS_FACTORIES == {
        "unauthorized": ("UNAUTHORIZED", 401),
        "bad_request": ("BAD_REQUEST", 400),
        "forbidden": ("FORBIDDEN", 403),
        "not_found": ("NOT_FOUND", 404),
        "internal_server_error": ("INTERNAL_SERVER_ERROR", 500),
        "method_not_allowed": ("METHOD_NOT_ALLOWED", 405),
        "service_unavailable": ("SERVICE_UNAVAILABLE", 503),
    }


@pytest.mark.parametrize(("name", "code", "status"), FACTORY_CASES)
def test_factory_accepts_a_message(name: str, code: str, status: int) -> None:
    envelope = getattr(factories, name)("Something went wrong")

    assert isinstance(envelope, ErrorEnvelope)
    assert envelope.get("status") == status
    assert envelope.get("code") == code
    assert envelope.get("message") == "Something went wrong"


@pytest.mark.parametrize(("name", "code", "status"), FACTORY_CASES)
def test_factory_accepts_a_code_and_a_message(name: str, code: str, status: int) -> None:
    envelope = getattr(factories, name)("Something went wrong", "CUSTOM_CODE")

    assert envelope.get("status") == status
    assert envelope.get("code") == "CUSTOM_CODE"
    assert envelope.get("message") == "Something went wrong"


@pytest.mark.parametrize(("name", "code", "status"), FACTORY_CASES)
def test_factory_accepts_an_error_mapping(name: str, code: str, status: int) -> None:
    envelope = getattr(factories, name)({"code": "OWN_CODE", "message": "From mapping", "status": 4321})

    assert envelope.get("status") == status
    assert envelope.get("code") == "OWN_CODE"
    assert envelope.get("message") == "From mapping"


@pytest.mark.parametrize(("name", "code", "status"), FACTORY_CASES)
def test_factory_uses_default_code_for_mapping_without_one(name: str, code: str, status: int) -> None:
    envelope = getattr(factories, name)({"message": "From mapping"})

    assert envelope.get("status") == status
    assert envelope.get("code") == code
    assert envelope.get("message") == "From mapping"


@pytest.mark.parametrize(("name", "code", "status"), FACTORY_CASES)
def test_factory_without_input_still_sets_code_and_status(name: str, code: str, status: int) -> None:
    envelope = getattr(factories, name)()

    assert envelope.to_structured() == {"errors": [{"message": "", "code": code, "status": status}]}


def test_factory_passes_source_details_and_links() -> None:
    envelope = factories.not_found(
        "Pipeline not found",
        source="pipelines",
        details={"pipeline_id": "p-1"},
        links={"about": "https://docs.example.com/errors/not-found"},
    )

    assert envelope.to_structured() == {
        "errors": [
            {
                "message": "Pipeline not found",
                "code": "NOT_FOUND",
                "source": "pipelines",
                "status": 404,
                "details": {"pipeline_id": "p-1"},
                "links": {"about": "https://docs.example.com/errors/not-found"},
            }
        ]
    }


def test_build_error_projects_foreign_objects() -> None:
    class PartnerError:
        message = "Partner timed out"
        status = 200

    envelope = build_error(PartnerError(), code="PARTNER_TIMEOUT", status=504)

    assert envelope.to_structured() == {
        "errors": [{"message": "Partner timed out", "code": "PARTNER_TIMEOUT", "status": 504}]
    }


def test_code_for_status_maps_known_and_fallback_statuses() -> None:
    assert code_for_status(404) == "NOT_FOUND"
    assert code_for_status(409) == "BAD_REQUEST"
    assert code_for_status(502) == "INTERNAL_SERVER_ERROR"
