"""Tests for seeker applications: apply, list, cancel, and the live seeker feed"""
from datetime import datetime

from backend.app.models.application import Application
from backend.app.services.change_feed import ChangeFeed
from backend.app.views.seeker_feed import SeekerApplicationFeed


def _apply(client, headers, job_id):
    return client.post("/api/applications", headers=headers, json={"jobId": job_id})


def test_applications_require_seeker(client, employer_headers):
    r = client.get("/api/applications", headers=employer_headers)
    assert r.status_code == 403


def test_apply_creates_pending_application(client, seeker_headers, posted_job, db_session, seeker_user):
    r = _apply(client, seeker_headers, posted_job["id"])
    assert r.status_code == 201
    data = r.json()
    assert data["status"] == "pending"
    assert data["message"] == "Applied successfully! Your application has been sent to the employer."

    app = db_session.get(Application, data["id"])
    assert app.seeker_id == seeker_user.id
    assert app.full_name == "Ana Reyes"
    assert app.contact_number == "09171234567"
    assert app.position_applied == "Cashier"
    assert app.company_name == "Acme Foods"
    assert app.applied_at is not None


def test_apply_unknown_job_404(client, seeker_headers):
    r = _apply(client, seeker_headers, "missing")
    assert r.status_code == 404


def test_apply_closed_job_refused(client, seeker_headers, employer_headers, posted_job):
    client.post(f"/api/employer/jobs/{posted_job['id']}/toggle-status", headers=employer_headers)
    r = _apply(client, seeker_headers, posted_job["id"])
    assert r.status_code == 409
    assert r.json()["detail"] == "This job is closed and cannot accept applications."


def test_duplicate_apply_refused(client, seeker_headers, posted_job):
    assert _apply(client, seeker_headers, posted_job["id"]).status_code == 201
    r = _apply(client, seeker_headers, posted_job["id"])
    assert r.status_code == 409
    assert r.json()["detail"] == "You already applied for this job."


def test_reapply_allowed_after_rejection(client, seeker_headers, employer_headers, posted_job):
    app_id = _apply(client, seeker_headers, posted_job["id"]).json()["id"]
    r = client.post(
        f"/api/employer/applications/{app_id}/reject",
        headers=employer_headers,
        json={"confirm": True, "rejectionReason": "Position filled"},
    )
    assert r.status_code == 200
    assert _apply(client, seeker_headers, posted_job["id"]).status_code == 201


def test_list_own_applications_projected(client, seeker_headers, other_seeker_headers, posted_job):
    _apply(client, seeker_headers, posted_job["id"])
    _apply(client, other_seeker_headers, posted_job["id"])
    r = client.get("/api/applications", headers=seeker_headers)
    assert r.status_code == 200
    items = r.json()["items"]
    assert len(items) == 1
    assert items[0]["jobTitle"] == "Cashier"
    assert items[0]["companyName"] == "Acme Foods"
    assert items[0]["status"] == "pending"
    assert items[0]["rejectionReason"] == ""


def test_cancel_pending_application(client, seeker_headers, posted_job, db_session):
    app_id = _apply(client, seeker_headers, posted_job["id"]).json()["id"]
    r = client.delete(f"/api/applications/{app_id}", headers=seeker_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Application canceled successfully! You can apply again later."
    assert db_session.query(Application).count() == 0


def test_cancel_non_pending_refused_without_write(client, seeker_headers, employer_headers, posted_job, db_session):
    app_id = _apply(client, seeker_headers, posted_job["id"]).json()["id"]
    client.post(f"/api/employer/applications/{app_id}/accept", headers=employer_headers, json={"confirm": True})
    r = client.delete(f"/api/applications/{app_id}", headers=seeker_headers)
    assert r.status_code == 409
    assert r.json()["detail"] == "You can only cancel pending applications."
    db_session.expire_all()
    assert db_session.get(Application, app_id).status == "accepted"


def test_cancel_someone_elses_application_forbidden(client, seeker_headers, other_seeker_headers, posted_job):
    app_id = _apply(client, seeker_headers, posted_job["id"]).json()["id"]
    r = client.delete(f"/api/applications/{app_id}", headers=other_seeker_headers)
    assert r.status_code == 403


# --- SeekerApplicationFeed ---


def _add_application(db_session, seeker_id, job_id, **fields):
    app = Application(seeker_id=seeker_id, job_id=job_id, employer_id=2, **fields)
    db_session.add(app)
    db_session.commit()
    return app.id


def test_feed_orders_newest_first_with_missing_last(session_factory, db_session, seeker_user, posted_job):
    _add_application(db_session, seeker_user.id, posted_job["id"], position_applied="Old", applied_at=datetime(2024, 1, 1))
    _add_application(db_session, seeker_user.id, posted_job["id"], position_applied="Undated", applied_at=None)
    _add_application(db_session, seeker_user.id, posted_job["id"], position_applied="New", applied_at=datetime(2024, 6, 1))

    view = SeekerApplicationFeed(session_factory, seeker_user.id, feed=ChangeFeed()).start()
    assert view.loading is False
    assert [a["jobTitle"] for a in view.items] == ["New", "Old", "Undated"]
    view.close()


def test_feed_refreshes_on_change_and_stops_after_close(session_factory, seeker_user, posted_job, db_session):
    feed = ChangeFeed()
    view = SeekerApplicationFeed(session_factory, seeker_user.id, feed=feed).start()
    assert view.items == []

    app_id = _add_application(db_session, seeker_user.id, posted_job["id"], status="pending")
    feed.publish("applications", app_id, "added")
    assert [a["id"] for a in view.items] == [app_id]

    view.close()
    assert feed.subscriber_count("applications") == 0
    _add_application(db_session, seeker_user.id, posted_job["id"], status="pending")
    feed.publish("applications", "x", "added")
    assert len(view.items) == 1


def test_feed_pushes_snapshots_to_listeners(session_factory, seeker_user, posted_job, db_session):
    feed = ChangeFeed()
    view = SeekerApplicationFeed(session_factory, seeker_user.id, feed=feed).start()
    snapshots = []
    view.add_listener(snapshots.append)
    app_id = _add_application(db_session, seeker_user.id, posted_job["id"])
    feed.publish("applications", app_id, "added")
    assert [a["id"] for a in snapshots[-1]] == [app_id]
    view.close()


def test_feed_cancel_non_pending_no_write(session_factory, seeker_user, posted_job, db_session):
    app_id = _add_application(db_session, seeker_user.id, posted_job["id"], status="scheduled")
    view = SeekerApplicationFeed(session_factory, seeker_user.id, feed=ChangeFeed()).start()
    assert view.cancel(app_id) is False
    assert view.notices.message == "You can only cancel pending applications."
    db_session.expire_all()
    assert db_session.get(Application, app_id) is not None
    view.close()


def test_feed_cancel_pending(session_factory, seeker_user, posted_job, db_session):
    feed = ChangeFeed()
    app_id = _add_application(db_session, seeker_user.id, posted_job["id"], status="pending")
    view = SeekerApplicationFeed(session_factory, seeker_user.id, feed=feed).start()
    assert view.cancel(app_id) is True
    assert view.notices.message == "Application canceled successfully! You can apply again later."
    assert view.items == []
    view.close()


def test_feed_load_error_sets_message(seeker_user):
    def broken_factory():
        from sqlalchemy.exc import OperationalError

        class BrokenSession:
            def query(self, *args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("db down"))

            def close(self):
                pass

        return BrokenSession()

    view = SeekerApplicationFeed(broken_factory, seeker_user.id, feed=ChangeFeed()).start()
    assert view.error == "Failed to load applications"
    assert view.loading is False
    assert view.items == []
    view.close()
