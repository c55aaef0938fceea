from __future__ import annotations

from datetime import date, datetime

import pytest

from ponto_certo.core.enums import AdjustmentRequestType, RequestStatus, Role, TimeRecordType as T
from ponto_certo.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ponto_certo.requests.service import AdjustmentRequestService


@pytest.fixture
def svc(adjustment_requests_repo, records_repo, users_repo, profile_factory):
    users_repo.add(profile_factory(1))
    users_repo.add(profile_factory(2, organization_id=2))
    return AdjustmentRequestService(adjustment_requests_repo, records_repo, users_repo)


def _open_adjustment(svc, now, *, record_type=T.ENTRY, requested_time=datetime(2025, 3, 11, 8, 0)):
    return svc.create(
        user_id=1,
        request_type=AdjustmentRequestType.ADJUSTMENT,
        reason="Esqueci de registrar",
        now=now,
        record_type=record_type,
        requested_time=requested_time,
    )


def test_create_adjustment_is_pending(svc, adjustment_requests_repo, fixed_now):
    rid = _open_adjustment(svc, fixed_now)

    req = adjustment_requests_repo.get(rid)
    assert req.status == RequestStatus.PENDING
    assert req.organization_id == 1
    assert req.record_type == T.ENTRY


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(request_type=AdjustmentRequestType.ADJUSTMENT, reason="  ", record_type=T.ENTRY,
             requested_time=datetime(2025, 3, 11, 8, 0)),
        dict(request_type=AdjustmentRequestType.ADJUSTMENT, reason="motivo"),
        dict(request_type=AdjustmentRequestType.ADJUSTMENT, reason="motivo", record_type=T.EXIT,
             requested_time=datetime(2025, 3, 12, 18, 0)),
        dict(request_type=AdjustmentRequestType.MEDICAL_CERTIFICATE, reason="Atestado"),
        dict(request_type=AdjustmentRequestType.MEDICAL_CERTIFICATE, reason="Atestado",
             absence_start=date(2025, 3, 10), absence_end=date(2025, 3, 9)),
    ],
)
def test_create_rejects_invalid_requests(svc, fixed_now, kwargs):
    with pytest.raises(ValidationError):
        svc.create(user_id=1, now=fixed_now, **kwargs)


def test_certificate_defaults_end_to_start(svc, adjustment_requests_repo, fixed_now):
    rid = svc.create(
        user_id=1,
        request_type=AdjustmentRequestType.MEDICAL_CERTIFICATE,
        reason="Consulta",
        now=fixed_now,
        absence_start=date(2025, 3, 10),
    )
    assert adjustment_requests_repo.get(rid).absence_end == date(2025, 3, 10)


def test_approve_inserts_missing_record(svc, records_repo, adjustment_requests_repo, fixed_now):
    rid = _open_adjustment(svc, fixed_now)

    svc.approve(current_role=Role.ADMIN, organization_id=1, admin_user_id=9, request_id=rid, now=fixed_now)

    assert records_repo.find_by_type_on_day(1, date(2025, 3, 11), T.ENTRY).recorded_at == datetime(2025, 3, 11, 8, 0)
    req = adjustment_requests_repo.get(rid)
    assert req.status == RequestStatus.APPROVED
    assert req.reviewed_by == 9


def test_approve_rewrites_existing_record(svc, records_repo, fixed_now):
    records_repo.add(1, T.ENTRY, datetime(2025, 3, 11, 9, 40))
    rid = _open_adjustment(svc, fixed_now)

    svc.approve(current_role=Role.ADMIN, organization_id=1, admin_user_id=9, request_id=rid, now=fixed_now)

    assert len(records_repo.records) == 1
    assert records_repo.records[0].recorded_at == datetime(2025, 3, 11, 8, 0)


def test_reviewed_request_cannot_be_decided_again(svc, fixed_now):
    rid = _open_adjustment(svc, fixed_now)
    svc.reject(current_role=Role.ADMIN, organization_id=1, admin_user_id=9, request_id=rid, now=fixed_now)

    with pytest.raises(ValidationError):
        svc.approve(current_role=Role.ADMIN, organization_id=1, admin_user_id=9, request_id=rid, now=fixed_now)


def test_review_requires_admin_of_same_organization(svc, fixed_now):
    rid = _open_adjustment(svc, fixed_now)

    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.EMPLOYEE, organization_id=1, admin_user_id=1, request_id=rid, now=fixed_now)
    with pytest.raises(NotFoundError):
        svc.reject(current_role=Role.ADMIN, organization_id=2, admin_user_id=9, request_id=rid, now=fixed_now)


def test_listing(svc, fixed_now):
    _open_adjustment(svc, fixed_now)
    svc.create(
        user_id=2,
        request_type=AdjustmentRequestType.MEDICAL_CERTIFICATE,
        reason="Atestado",
        now=fixed_now,
        absence_start=date(2025, 3, 10),
    )

    assert len(svc.list_mine(organization_id=1, user_id=1)) == 1
    assert len(svc.list_for_organization(current_role=Role.ADMIN, organization_id=1)) == 1
    assert svc.list_for_organization(current_role=Role.ADMIN, organization_id=1, status=RequestStatus.APPROVED) == []
    with pytest.raises(AuthorizationError):
        svc.list_for_organization(current_role=Role.EMPLOYEE, organization_id=1)


def test_lost_review_race_leaves_records_untouched(svc, records_repo, adjustment_requests_repo, fixed_now, monkeypatch):
    rid = _open_adjustment(svc, fixed_now)
    monkeypatch.setattr(adjustment_requests_repo, "decide", lambda **kwargs: False)

    with pytest.raises(ValidationError, match="já foi analisada"):
        svc.approve(current_role=Role.ADMIN, organization_id=1, admin_user_id=9, request_id=rid, now=fixed_now)

    assert records_repo.records == []
