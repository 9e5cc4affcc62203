"""Tests for /api/profile and the profile editor"""
import pytest

from backend.app.core.errors import ValidationFailed
from backend.app.models.profile import UserFiles, UserProfile
from backend.app.schemas.profile import ProfileForm
from backend.app.services import blob_storage
from backend.app.services.file_encoding import UploadedFile
from backend.app.services.profile_service import ProfileService
from backend.app.utils.downloads import content_disposition
from backend.app.views.profile_editor import ProfileEditor

MB = 1024 * 1024
PNG = b"\x89PNG\r\n\x1a\n" + b"\0" * 100
PDF = b"%PDF-1.4 test resume"

FORM = {
    "fullName": "Ana Reyes",
    "email": "seeker@example.com",
    "phone": "09171234567",
    "desiredJob": "Cashier",
    "skills": "cash handling, customer service",
    "education": "College",
}


def test_profile_requires_auth(client):
    r = client.get("/api/profile")
    assert r.status_code == 401


def test_get_profile_fields_skills_and_initials(client, seeker_headers):
    r = client.get("/api/profile", headers=seeker_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["profile"]["fullName"] == "Ana Reyes"
    assert data["profile"]["age"] == ""
    assert data["skillList"] == ["cash handling", "customer service"]
    assert data["initials"] == "AR"
    assert data["files"] is None


def test_get_profile_creates_empty_profile(client, employer_headers, db_session, employer_user):
    r = client.get("/api/profile", headers=employer_headers)
    assert r.status_code == 200
    assert r.json()["profile"]["fullName"] == "Acme Foods"
    assert db_session.query(UserProfile).filter(UserProfile.user_id == employer_user.id).count() == 1


def test_update_profile_fields(client, seeker_headers, db_session, seeker_user):
    r = client.put("/api/profile", headers=seeker_headers, data={**FORM, "age": "25", "desiredJob": "Barista"})
    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "Profile updated successfully!"
    assert data["profile"]["desiredJob"] == "Barista"
    assert data["lastUpdated"] is not None

    db_session.expire_all()
    profile = db_session.query(UserProfile).filter(UserProfile.user_id == seeker_user.id).first()
    assert profile.age == "25"
    assert profile.contact_number == "09171234567"


def test_empty_full_name_rejected_without_write(client, seeker_headers, db_session, seeker_user):
    r = client.put("/api/profile", headers=seeker_headers, data={**FORM, "fullName": "   ", "desiredJob": "Changed"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Full name is required."

    db_session.expire_all()
    profile = db_session.query(UserProfile).filter(UserProfile.user_id == seeker_user.id).first()
    assert profile.desired_job == "Cashier"


def test_oversized_photo_rejected_without_write(client, seeker_headers, db_session, seeker_user, inline_storage):
    r = client.put(
        "/api/profile",
        headers=seeker_headers,
        data={**FORM, "desiredJob": "Changed"},
        files={"photo": ("big.png", b"\0" * (5 * MB + 1), "image/png")},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Photo must be less than 5MB"

    db_session.expire_all()
    assert db_session.query(UserProfile).filter(UserProfile.user_id == seeker_user.id).first().desired_job == "Cashier"
    assert db_session.query(UserFiles).count() == 0


def test_wrong_resume_type_rejected(client, seeker_headers, inline_storage):
    r = client.put(
        "/api/profile",
        headers=seeker_headers,
        data=FORM,
        files={"resume": ("cv.txt", b"plain", "text/plain")},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Only PDF, DOC, DOCX allowed for resume"


def test_inline_encoded_cap(client, seeker_headers, db_session, inline_storage):
    r = client.put(
        "/api/profile",
        headers=seeker_headers,
        data=FORM,
        files={"photo": ("big.png", b"\0" * 700_000, "image/png")},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == 'File "big.png" is too large. Please upload a smaller file.'
    assert db_session.query(UserFiles).count() == 0


def test_inline_photo_and_resume_saved_as_data_urls(client, seeker_headers, inline_storage):
    r = client.put(
        "/api/profile",
        headers=seeker_headers,
        data=FORM,
        files={
            "photo": ("me.png", PNG, "image/png"),
            "resume": ("cv.pdf", PDF, "application/pdf"),
        },
    )
    assert r.status_code == 200
    files = r.json()["files"]
    assert files["photoBase64"].startswith("data:image/png;base64,")
    assert files["photoName"] == "me.png"
    assert files["resumeBase64"].startswith("data:application/pdf;base64,")
    assert files["resumeName"] == "cv.pdf"
    assert files["photoUrl"] is None

    r = client.get("/api/profile/files/resume", headers=seeker_headers)
    assert r.status_code == 200
    assert r.content == PDF
    assert 'filename="cv.pdf"' in r.headers["content-disposition"]


def test_large_files_saved_with_blob_storage(client, seeker_headers, local_storage):
    photo = b"\x89PNG" + b"\1" * (2 * MB)
    resume = b"%PDF" + b"\2" * (1 * MB)
    r = client.put(
        "/api/profile",
        headers=seeker_headers,
        data=FORM,
        files={
            "photo": ("big.png", photo, "image/png"),
            "resume": ("cv.pdf", resume, "application/pdf"),
        },
    )
    assert r.status_code == 200
    files = r.json()["files"]
    assert files["photoBase64"] is None
    assert files["photoUrl"]
    assert files["resumeUrl"]

    r = client.get("/api/profile/files/photo", headers=seeker_headers)
    assert r.status_code == 200
    assert r.content == photo
    r = client.get("/api/profile/files/resume", headers=seeker_headers)
    assert r.content == resume


def test_failed_resume_store_removes_stored_photo(db_session, seeker_user, local_storage, monkeypatch):
    real_store = blob_storage.store_blob

    def store_photo_only(data, original_name, user_id, mime_type):
        if mime_type == "application/pdf":
            raise RuntimeError("Failed to save file: disk full")
        return real_store(data, original_name, user_id, mime_type)

    monkeypatch.setattr(blob_storage, "store_blob", store_photo_only)
    with pytest.raises(RuntimeError):
        ProfileService.save_profile(
            db_session,
            seeker_user,
            ProfileForm(**FORM),
            photo=UploadedFile("me.png", "image/png", PNG),
            resume=UploadedFile("cv.pdf", "application/pdf", PDF),
        )
    assert [p for p in local_storage.rglob("*") if p.is_file()] == []
    assert db_session.query(UserFiles).filter(UserFiles.user_id == seeker_user.id).first() is None


def test_get_files_endpoint(client, seeker_headers, inline_storage):
    assert client.get("/api/profile/files", headers=seeker_headers).json() is None
    client.put("/api/profile", headers=seeker_headers, data=FORM, files={"photo": ("me.png", PNG, "image/png")})
    data = client.get("/api/profile/files", headers=seeker_headers).json()
    assert data["photoName"] == "me.png"


def test_download_missing_file_404(client, seeker_headers):
    r = client.get("/api/profile/files/resume", headers=seeker_headers)
    assert r.status_code == 404


def test_download_unknown_kind_400(client, seeker_headers):
    r = client.get("/api/profile/files/video", headers=seeker_headers)
    assert r.status_code == 400


def test_download_non_ascii_file_name(client, seeker_headers, inline_storage):
    r = client.put(
        "/api/profile",
        headers=seeker_headers,
        data=FORM,
        files={"resume": ("履歴書.pdf", PDF, "application/pdf")},
    )
    assert r.status_code == 200
    assert r.json()["files"]["resumeName"] == "履歴書.pdf"

    r = client.get("/api/profile/files/resume", headers=seeker_headers)
    assert r.status_code == 200
    assert r.content == PDF
    disposition = r.headers["content-disposition"]
    assert 'filename="download.pdf"' in disposition
    assert "filename*=utf-8''%E5%B1%A5%E6%AD%B4%E6%9B%B8.pdf" in disposition


def test_content_disposition_quotes_and_plain_names():
    assert content_disposition("cv.pdf") == 'attachment; filename="cv.pdf"'
    value = content_disposition('my "best" cv.pdf')
    assert value.startswith('attachment; filename="my best cv.pdf"; ')
    assert value.endswith("filename*=utf-8''my%20%22best%22%20cv.pdf")


# --- ProfileEditor ---


def test_editor_load_and_skills(session_factory, seeker_user):
    editor = ProfileEditor(session_factory, seeker_user.id)
    editor.load()
    assert editor.form.fullName == "Ana Reyes"
    assert editor.skills == ["cash handling", "customer service"]
    assert editor.editing is False


def test_editor_save_empty_name_keeps_state(session_factory, seeker_user, db_session):
    editor = ProfileEditor(session_factory, seeker_user.id)
    editor.load()
    editor.begin_edit()
    editor.set_field("fullName", "")
    editor.set_field("desiredJob", "Changed")
    assert editor.save() is False
    assert editor.notices.message == "Full name is required."
    assert editor.editing is True

    db_session.expire_all()
    assert db_session.query(UserProfile).filter(UserProfile.user_id == seeker_user.id).first().desired_job == "Cashier"


def test_editor_unknown_field():
    editor = ProfileEditor(lambda: None, 1)
    with pytest.raises(ValidationFailed):
        editor.set_field("salary", "1")


def test_editor_attach_rejects_bad_photo(session_factory, seeker_user):
    editor = ProfileEditor(session_factory, seeker_user.id)
    assert editor.attach_photo(UploadedFile("a.gif", "image/gif", b"GIF")) is False
    assert editor.notices.message == "Only JPG, JPEG, PNG allowed"
    assert editor.pending_photo is None


def test_editor_save_success(session_factory, seeker_user, inline_storage):
    editor = ProfileEditor(session_factory, seeker_user.id)
    editor.load()
    editor.begin_edit()
    editor.set_field("desiredJob", "Barista")
    assert editor.attach_resume(UploadedFile("cv.pdf", "application/pdf", PDF)) is True
    assert editor.save() is True
    assert editor.notices.message == "Profile updated successfully!"
    assert editor.editing is False
    assert editor.pending_resume is None
    assert editor.last_updated is not None
    assert editor.files.resumeName == "cv.pdf"

    downloaded = editor.download("resume")
    assert downloaded.data == PDF


def test_editor_cancel_discards_edits(session_factory, seeker_user):
    editor = ProfileEditor(session_factory, seeker_user.id)
    editor.load()
    editor.begin_edit()
    editor.set_field("desiredJob", "Changed")
    editor.attach_photo(UploadedFile("me.png", "image/png", PNG))
    editor.cancel()
    assert editor.form.desiredJob == "Cashier"
    assert editor.pending_photo is None
    assert editor.editing is False
