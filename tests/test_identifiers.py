import pytest

from app.extensions import api
from app.services.api_client import ApiError
from app.services.identifiers import IdentifierResolver
from conftest import FakeResponse


PAYLOAD = {"applicant": {"passport_no": "EP1", "full_name": "Sara A"}}


def test_update_by_passport_first(backend):
    backend.add("PUT", "/applicants/update/EP1", {"status": "success", "message": "Updated"})
    result = IdentifierResolver(api).update_applicant(PAYLOAD, original_passport="EP1", application_no="A-1")
    assert result.ok
    assert result.message == "Updated"
    assert [c["path"] for c in backend.calls] == ["/applicants/update/EP1"]


def test_update_falls_back_to_application_number(backend):
    backend.add("PUT", "/applicants/update/A-1", {"status": "success"})
    result = IdentifierResolver(api).update_applicant(PAYLOAD, original_passport="EP1", application_no="A-1")
    assert result.ok
    assert [c["path"] for c in backend.calls] == ["/applicants/update/EP1", "/applicants/update/A-1"]


def test_update_discovers_identifier_from_list(backend):
    backend.add("GET", "/applicants", {"data": [
        {"id": 5, "passport_no": "OTHER"},
        {"id": 9, "passport_no": "EP1", "application_no": "A-77"},
    ]})
    backend.add("PUT", "/applicants/update/9", {"status": "success"})
    result = IdentifierResolver(api).update_applicant(PAYLOAD, original_passport="EP1")
    assert result.ok
    assert [c["path"] for c in backend.calls] == [
        "/applicants/update/EP1", "/applicants", "/applicants/update/A-77", "/applicants/update/9",
    ]


def test_update_raises_last_failure(backend):
    backend.add("GET", "/applicants", [])
    backend.add("PUT", "/applicants/update/EP1", {"message": "locked"}, status=409)
    with pytest.raises(ApiError) as exc:
        IdentifierResolver(api).update_applicant(PAYLOAD, original_passport="EP1")
    assert exc.value.message == "locked"
    assert exc.value.status == 409


def test_update_without_any_identifier(backend):
    backend.add("GET", "/applicants", [])
    with pytest.raises(ApiError) as exc:
        IdentifierResolver(api).update_applicant({"applicant": {}})
    assert exc.value.message == "Applicant not found for update"


def test_resolve_applicant_id_prefers_row_id(backend):
    assert IdentifierResolver(api).resolve_applicant_id({"id": 3, "passport_no": "EP1"}) == 3
    assert backend.calls == []


def test_resolve_applicant_id_by_passport(backend):
    backend.add("GET", "/applicants", [{"applicant": {"id": 11, "passport_no": "EP1"}}])
    assert IdentifierResolver(api).resolve_applicant_id({"passport_no": "EP1"}) == 11
    assert IdentifierResolver(api).resolve_applicant_id({"passport_no": "NOPE"}) is None


def test_resolve_user_id_scans_users_then_partners(backend):
    backend.add("GET", "/users", [{"id": 1, "username": "owner"}])
    backend.add("GET", "/partners", [{"id": 7, "username": "partner"}])
    resolver = IdentifierResolver(api)
    assert resolver.resolve_user_id("owner") == 1
    assert resolver.resolve_user_id("partner") == 7
    assert resolver.resolve_user_id("ghost") is None


def test_resolve_user_id_survives_one_failing_directory(backend):
    backend.on("GET", "/users", lambda m, p, b: FakeResponse(403, {"message": "forbidden"}))
    backend.add("GET", "/partners", [{"id": 7, "username": "partner"}])
    assert IdentifierResolver(api).resolve_user_id("partner") == 7


def test_resolve_user_id_reports_fetch_failure(backend):
    backend.add("GET", "/users", [])
    backend.add("GET", "/partners", {"message": "down"}, status=503)
    with pytest.raises(ApiError) as exc:
        IdentifierResolver(api).resolve_user_id("partner")
    assert exc.value.message == "down"
