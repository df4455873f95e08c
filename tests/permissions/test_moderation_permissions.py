from billboard_marketplace.audit.models import AuditLog
from billboard_marketplace.billboards.models import Billboard
from tests.permissions.mixins import ROLE_ADMIN
from tests.permissions.mixins import ROLE_ADVERTISER
from tests.permissions.mixins import ROLE_OWNER
from tests.permissions.mixins import RoleAPITestCase

APPROVE = "api_v1:admin-billboard-approve"
REJECT = "api_v1:admin-billboard-reject"
SUSPEND = "api_v1:admin-user-suspend"


class ModerationPermissionTests(RoleAPITestCase):
    def test_non_admin_cannot_approve_and_nothing_changes(self):
        for role in (ROLE_OWNER, ROLE_ADVERTISER, None):
            denied = self.post(
                APPROVE,
                role=role,
                reverse_kwargs={"pk": self.billboard.pk},
            )
            self.assert_unauthorized(denied)

        self.billboard.refresh_from_db()
        assert self.billboard.status == Billboard.Status.PENDING
        assert self.billboard.approved_at is None
        assert self.billboard.approved_by is None
        assert not AuditLog.objects.exists()

    def test_non_admin_cannot_reject(self):
        denied = self.post(
            REJECT,
            role=ROLE_OWNER,
            payload={"reason": "self-rejection"},
            reverse_kwargs={"pk": self.billboard.pk},
        )
        self.assert_unauthorized(denied)
        self.billboard.refresh_from_db()
        assert self.billboard.status == Billboard.Status.PENDING
        assert self.billboard.rejection_reason == ""

    def test_non_admin_cannot_suspend(self):
        target = self.roles[ROLE_ADVERTISER]
        denied = self.post(
            SUSPEND,
            role=ROLE_ADVERTISER,
            reverse_kwargs={"pk": target.pk},
        )
        self.assert_unauthorized(denied)
        target.refresh_from_db()
        assert target.suspended is False

    def test_admin_approve_then_read_reflects_it(self):
        res = self.post(APPROVE, role=ROLE_ADMIN, reverse_kwargs={"pk": self.billboard.pk})
        self.assert_http_status(res, 200)
        assert res.data["status"] == Billboard.Status.ACTIVE
        assert res.data["approved_by"] == self.roles[ROLE_ADMIN].pk
        assert res.data["approved_at"] is not None

        read = self.get(
            "api_v1:billboard-detail",
            role=ROLE_ADVERTISER,
            reverse_kwargs={"pk": self.billboard.pk},
        )
        self.assert_http_status(read, 200)
        assert read.data["status"] == Billboard.Status.ACTIVE

        log = AuditLog.objects.get(action="billboard_approved")
        assert log.actor == self.roles[ROLE_ADMIN]
        assert log.target_type == "billboards.Billboard"
        assert log.target_id == self.billboard.pk
        assert log.before == {"status": Billboard.Status.PENDING}
        assert log.after == {"status": Billboard.Status.ACTIVE}

    def test_admin_reject_records_reason(self):
        res = self.post(
            REJECT,
            role=ROLE_ADMIN,
            payload={"reason": "Blurry photos"},
            reverse_kwargs={"pk": self.billboard.pk},
        )
        self.assert_http_status(res, 200)
        self.billboard.refresh_from_db()
        assert self.billboard.status == Billboard.Status.REJECTED
        assert self.billboard.rejected_by == self.roles[ROLE_ADMIN]
        assert self.billboard.rejected_at is not None
        assert self.billboard.rejection_reason == "Blurry photos"
        log = AuditLog.objects.get(action="billboard_rejected")
        assert log.reason == "Blurry photos"

    def test_admin_suspend_user(self):
        target = self.roles[ROLE_ADVERTISER]
        res = self.post(SUSPEND, role=ROLE_ADMIN, reverse_kwargs={"pk": target.pk})
        self.assert_http_status(res, 200)
        assert res.data["suspended"] is True
        target.refresh_from_db()
        assert target.suspended is True
        assert target.suspended_at is not None
        assert AuditLog.objects.filter(action="user_suspended").count() == 1

    def test_unknown_billboard_is_not_found(self):
        res = self.post(APPROVE, role=ROLE_ADMIN, reverse_kwargs={"pk": 999999})
        self.assert_http_status(res, 404)
        assert res.data == {"error": "Not found"}
