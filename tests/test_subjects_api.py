from marksapp.extensions import db
from marksapp.models import Mark, Student, Subject
from marksapp.security.identity import Role

CS301 = {"name": "Database Systems", "code": "CS301", "credits": 4}


def test_teacher_creates_subject_as_owner(login_as, app):
    t1 = login_as("t1@school.edu")
    resp = t1.post("/api/subjects", json=CS301)
    assert resp.status_code == 201
    body = resp.get_json()
    me = t1.get("/api/auth/session").get_json()["user"]
    assert body["teacherId"] == me["id"]
    assert body["teacher"]["email"] == "t1@school.edu"

    resp = t1.delete(f"/api/subjects/{body['id']}")
    assert resp.status_code == 200
    with app.app_context():
        assert db.session.get(Subject, body["id"]) is None


def test_other_teacher_cannot_update_or_delete(login_as):
    t1 = login_as("t1@school.edu")
    t2 = login_as("t2@school.edu")
    sid = t1.post("/api/subjects", json=CS301).get_json()["id"]

    resp = t2.patch(f"/api/subjects/{sid}", json={"name": "Hijacked"})
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Forbidden: not owner"
    assert t2.delete(f"/api/subjects/{sid}").status_code == 403
    assert t2.get(f"/api/subjects/{sid}").get_json()["name"] == "Database Systems"


def test_owner_patches_subject(login_as):
    t1 = login_as("t1@school.edu")
    sid = t1.post("/api/subjects", json=CS301).get_json()["id"]
    resp = t1.patch(f"/api/subjects/{sid}", json={"credits": "3", "name": "DBMS"})
    assert resp.status_code == 200
    assert resp.get_json()["credits"] == 3
    assert resp.get_json()["name"] == "DBMS"
    assert resp.get_json()["code"] == "CS301"


def test_admin_may_modify_any_subject(login_as):
    t1 = login_as("t1@school.edu")
    admin = login_as("root@school.edu", role=Role.ADMIN)
    sid = t1.post("/api/subjects", json=CS301).get_json()["id"]
    assert admin.patch(f"/api/subjects/{sid}", json={"credits": 2}).status_code == 200
    assert admin.delete(f"/api/subjects/{sid}").status_code == 200


def test_admin_must_name_a_teacher_owner(login_as, make_user):
    admin = login_as("root@school.edu", role=Role.ADMIN)
    assert admin.post("/api/subjects", json=CS301).status_code == 400
    admin_id = admin.get("/api/auth/session").get_json()["user"]["id"]
    assert admin.post("/api/subjects", json={**CS301, "teacherId": admin_id}).status_code == 400

    tid = make_user("t9@school.edu")
    resp = admin.post("/api/subjects", json={**CS301, "teacherId": tid})
    assert resp.status_code == 201
    assert resp.get_json()["teacherId"] == tid


def test_duplicate_code_conflicts(login_as):
    t1 = login_as("t1@school.edu")
    assert t1.post("/api/subjects", json=CS301).status_code == 201
    assert t1.post("/api/subjects", json={**CS301, "name": "Other"}).status_code == 409
    sid = t1.post("/api/subjects", json={"name": "OS", "code": "CS302", "credits": 3}).get_json()["id"]
    assert t1.patch(f"/api/subjects/{sid}", json={"code": "CS301"}).status_code == 409


def test_create_validates_fields(login_as):
    t1 = login_as("t1@school.edu")
    assert t1.post("/api/subjects", json={"name": "X", "code": "X1"}).status_code == 400
    assert t1.post("/api/subjects", json={**CS301, "credits": "four"}).status_code == 400
    assert t1.post("/api/subjects", data="not json").status_code == 400


def test_list_and_filter_by_teacher(login_as):
    t1 = login_as("t1@school.edu")
    t2 = login_as("t2@school.edu")
    t1.post("/api/subjects", json={"name": "Networks", "code": "CS401", "credits": 3})
    t2.post("/api/subjects", json={"name": "Algebra", "code": "MA101", "credits": 4})
    names = [s["name"] for s in t1.get("/api/subjects").get_json()]
    assert names == ["Algebra", "Networks"]

    t2_id = t2.get("/api/auth/session").get_json()["user"]["id"]
    only = t1.get(f"/api/subjects?teacherId={t2_id}").get_json()
    assert [s["code"] for s in only] == ["MA101"]


def test_missing_subject_is_404(login_as):
    t1 = login_as("t1@school.edu")
    assert t1.get("/api/subjects/999").status_code == 404
    assert t1.delete("/api/subjects/999").status_code == 404


def test_delete_removes_marks(login_as, app):
    t1 = login_as("t1@school.edu")
    sid = t1.post("/api/subjects", json=CS301).get_json()["id"]
    stid = t1.post("/api/students", json={"username": "sam", "usn": "1RV20CS001", "name": "Sam"}).get_json()["id"]
    t1.post("/api/marks", json={"studentId": stid, "subjectId": sid, "value": 80})

    assert t1.delete(f"/api/subjects/{sid}").status_code == 200
    with app.app_context():
        assert Mark.query.count() == 0
        assert db.session.get(Student, stid) is not None


def test_credits_must_be_whole(login_as):
    t1 = login_as("t1@school.edu")
    assert t1.post("/api/subjects", json={**CS301, "credits": 3.5}).status_code == 400
    assert t1.post("/api/subjects", json={**CS301, "credits": True}).status_code == 400
    resp = t1.post("/api/subjects", json={**CS301, "credits": 3.0})
    assert resp.status_code == 201
    assert resp.get_json()["credits"] == 3
    assert t1.patch(f"/api/subjects/{resp.get_json()['id']}", json={"credits": 2.5}).status_code == 400


def test_admin_teacher_id_must_be_integer(login_as, make_user):
    tid = make_user("t9@school.edu")
    assert tid == 1
    admin = login_as("root@school.edu", role=Role.ADMIN)
    assert admin.post("/api/subjects", json={**CS301, "teacherId": True}).status_code == 400
    assert admin.post("/api/subjects", json={**CS301, "teacherId": tid + 0.5}).status_code == 400
    assert admin.post("/api/subjects", json={**CS301, "teacherId": float(tid)}).status_code == 201
