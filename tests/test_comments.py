import pytest

from placement_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from placement_portal.services.comment_service import CommentService
from placement_portal.services.experience_service import ExperienceService
from placement_portal.services.report_service import ReportService


@pytest.fixture
def thread(make_user, make_experience):
    author = make_user(name="Author")
    commenter = make_user(name="Commenter")
    exp = make_experience(author=author["_id"], moderationStatus="approved")
    return author, commenter, exp


def test_comment_is_trimmed_and_populated(thread, identity):
    _, commenter, exp = thread
    comment = CommentService().create_comment(str(exp["_id"]), identity(commenter), "  Great write-up  ")

    assert comment["content"] == "Great write-up"
    assert comment["parentComment"] is None
    assert comment["author"]["name"] == "Commenter"


@pytest.mark.parametrize("content", [None, "", "   ", "x" * 1001])
def test_comment_content_validation(thread, identity, content):
    _, commenter, exp = thread
    with pytest.raises(ValidationError):
        CommentService().create_comment(str(exp["_id"]), identity(commenter), content)


def test_comment_on_missing_experience(make_user, identity):
    with pytest.raises(NotFoundError):
        CommentService().create_comment("5f0000000000000000000000", identity(make_user()), "hi")


def test_author_can_reply(thread, identity):
    author, commenter, exp = thread
    service = CommentService()
    parent = service.create_comment(str(exp["_id"]), identity(commenter), "Question?")

    reply = service.create_reply(str(exp["_id"]), parent["_id"], identity(author), "Answer.")

    assert reply["parentComment"] == parent["_id"]
    assert len(service.list_for_experience(str(exp["_id"]))) == 2


def test_only_author_may_reply(thread, identity):
    _, commenter, exp = thread
    service = CommentService()
    parent = service.create_comment(str(exp["_id"]), identity(commenter), "Question?")

    with pytest.raises(AuthorizationError):
        service.create_reply(str(exp["_id"]), parent["_id"], identity(commenter), "Me too")


def test_no_replies_on_anonymous_experience(make_user, make_experience, identity):
    commenter = make_user()
    exp = make_experience(author=None)
    service = CommentService()
    parent = service.create_comment(str(exp["_id"]), identity(commenter), "Question?")

    with pytest.raises(AuthorizationError):
        service.create_reply(str(exp["_id"]), parent["_id"], identity(commenter), "reply")


def test_cannot_reply_to_reply(thread, identity):
    author, commenter, exp = thread
    service = CommentService()
    parent = service.create_comment(str(exp["_id"]), identity(commenter), "Question?")
    reply = service.create_reply(str(exp["_id"]), parent["_id"], identity(author), "Answer.")

    with pytest.raises(ValidationError):
        service.create_reply(str(exp["_id"]), reply["_id"], identity(author), "Nested")


def test_reply_parent_must_belong_to_experience(thread, make_experience, identity):
    author, commenter, exp = thread
    other = make_experience(author=author["_id"])
    service = CommentService()
    parent = service.create_comment(str(other["_id"]), identity(commenter), "Elsewhere")

    with pytest.raises(ValidationError):
        service.create_reply(str(exp["_id"]), parent["_id"], identity(author), "Answer.")


def test_deleting_comment_removes_replies(thread, identity, mongo_db):
    author, commenter, exp = thread
    service = CommentService()
    parent = service.create_comment(str(exp["_id"]), identity(commenter), "Question?")
    service.create_reply(str(exp["_id"]), parent["_id"], identity(author), "Answer 1")
    service.create_reply(str(exp["_id"]), parent["_id"], identity(author), "Answer 2")

    deleted = service.delete_comment(parent["_id"], identity(commenter))

    assert deleted == 3
    assert mongo_db["comments"].count_documents({}) == 0


def test_delete_comment_permissions(thread, make_user, identity):
    _, commenter, exp = thread
    service = CommentService()
    comment = service.create_comment(str(exp["_id"]), identity(commenter), "Hello")

    with pytest.raises(AuthorizationError):
        service.delete_comment(comment["_id"], identity(make_user()))

    assert service.delete_comment(comment["_id"], identity(make_user(role="teacher"))) == 1
    with pytest.raises(NotFoundError):
        service.delete_comment(comment["_id"], identity(commenter))


def test_deleting_experience_cascades(thread, identity, mongo_db):
    author, commenter, exp = thread
    CommentService().create_comment(str(exp["_id"]), identity(commenter), "Nice")
    ReportService().create(str(exp["_id"]), "spam", "Looks copied", identity(commenter))

    result = ExperienceService().delete(str(exp["_id"]), identity(author))

    assert result == {"deletedComments": 1, "deletedReports": 1}
    assert mongo_db["experiences"].count_documents({}) == 0
    # notifications are never cascaded
    assert mongo_db["notifications"].count_documents({}) == 1


def test_non_author_cannot_delete_experience(thread, identity):
    _, commenter, exp = thread
    with pytest.raises(AuthorizationError):
        ExperienceService().delete(str(exp["_id"]), identity(commenter))
