import pytest

from placement_portal.core.exceptions import NotFoundError
from placement_portal.services.comment_service import CommentService
from placement_portal.services.notification_service import NotificationService


@pytest.fixture
def people(make_user):
    return make_user(name="Author", username="author"), make_user(name="Reader", username="reader")


def test_comment_notifies_experience_author(people, make_experience, identity):
    author, reader = people
    exp = make_experience(author=author["_id"], company="Google", role="SDE")

    CommentService().create_comment(str(exp["_id"]), identity(reader), "Thanks!")

    inbox = NotificationService().list_recent(str(author["_id"]))
    assert len(inbox) == 1
    note = inbox[0]
    assert note["type"] == "comment"
    assert note["read"] is False
    assert note["experience"] == {"_id": str(exp["_id"]), "company": "Google", "role": "SDE"}
    assert note["comment"]["content"] == "Thanks!"
    assert note["comment"]["author"]["username"] == "reader"


def test_no_notification_for_anonymous_experience(people, make_experience, identity, mongo_db):
    _, reader = people
    exp = make_experience(author=None)

    CommentService().create_comment(str(exp["_id"]), identity(reader), "Thanks!")

    assert mongo_db["notifications"].count_documents({}) == 0


def test_no_notification_for_own_comment(people, make_experience, identity, mongo_db):
    author, _ = people
    exp = make_experience(author=author["_id"])

    CommentService().create_comment(str(exp["_id"]), identity(author), "Edit: added tips")

    assert mongo_db["notifications"].count_documents({}) == 0


def test_replies_do_not_notify(people, make_experience, identity, mongo_db):
    author, reader = people
    exp = make_experience(author=author["_id"])
    service = CommentService()
    parent = service.create_comment(str(exp["_id"]), identity(reader), "Question?")

    service.create_reply(str(exp["_id"]), parent["_id"], identity(author), "Answer")

    assert mongo_db["notifications"].count_documents({}) == 1
    assert NotificationService().unread_count(str(reader["_id"])) == 0


def test_mark_all_read_is_idempotent(people, make_experience, identity):
    author, reader = people
    exp = make_experience(author=author["_id"])
    for text in ("one", "two"):
        CommentService().create_comment(str(exp["_id"]), identity(reader), text)

    service = NotificationService()
    assert service.unread_count(str(author["_id"])) == 2
    assert service.mark_all_read(str(author["_id"])) == 2
    assert service.mark_all_read(str(author["_id"])) == 0
    assert service.unread_count(str(author["_id"])) == 0


def test_mark_read_is_scoped_to_owner(people, make_experience, identity):
    author, reader = people
    exp = make_experience(author=author["_id"])
    CommentService().create_comment(str(exp["_id"]), identity(reader), "Hi")
    service = NotificationService()
    note = service.list_recent(str(author["_id"]))[0]

    with pytest.raises(NotFoundError):
        service.mark_read(note["_id"], str(reader["_id"]))
    with pytest.raises(NotFoundError):
        service.mark_read("garbage", str(author["_id"]))

    assert service.mark_read(note["_id"], str(author["_id"]))["read"] is True
    assert service.unread_count(str(author["_id"])) == 0


def test_dangling_references_become_none(people, make_experience, identity, mongo_db):
    author, reader = people
    exp = make_experience(author=author["_id"])
    CommentService().create_comment(str(exp["_id"]), identity(reader), "Hi")

    mongo_db["comments"].delete_many({})
    mongo_db["experiences"].delete_many({})

    inbox = NotificationService().list_recent(str(author["_id"]))
    assert len(inbox) == 1
    assert inbox[0]["experience"] is None
    assert inbox[0]["comment"] is None


def test_list_recent_respects_limit(people, make_experience, identity):
    author, reader = people
    exp = make_experience(author=author["_id"])
    for i in range(3):
        CommentService().create_comment(str(exp["_id"]), identity(reader), f"Comment {i}")

    assert len(NotificationService().list_recent(str(author["_id"]), limit=2)) == 2
    assert len(NotificationService().list_recent(str(reader["_id"]))) == 0
