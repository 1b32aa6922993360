import pytest
from pydantic import ValidationError

from talent_search.client.notifications import NotificationVariant
from talent_search.client.profile_creator import ProfileCreator, CREATE_FAILED_TITLE
from talent_search.schemas.profile import ProfileCreate
from talent_search.services.profile_service import ProfileCreateError


def profile_form(**overrides):
    form = {
        "title": "Full Stack Developer",
        "location": "Amsterdam",
        "about": "Ten years shipping web products end to end.",
        "skills": "Python, React",
        "github": "https://github.com/octocat",
    }
    form.update(overrides)
    return form


@pytest.fixture
def creator(profile_service, session, notifier) -> ProfileCreator:
    return ProfileCreator(profile_service=profile_service, session=session, notifier=notifier)


def test_profile_form_defaults_optional_fields_to_blank():
    data = ProfileCreate(**profile_form())

    assert data.experience == ""
    assert data.portfolio == ""
    assert data.github == "https://github.com/octocat"


@pytest.mark.parametrize("field,value", [
    ("title", "X"),
    ("location", "A"),
    ("about", "Too short"),
    ("skills", "C"),
    ("linkedin", "linkedin.com/in/someone"),
    ("portfolio", "not a url"),
])
def test_profile_form_rejects_invalid_fields(field, value):
    with pytest.raises(ValidationError) as exc_info:
        ProfileCreate(**profile_form(**{field: value}))

    assert exc_info.value.errors()[0]["loc"] == (field,)


def test_profile_form_requires_core_fields():
    with pytest.raises(ValidationError):
        ProfileCreate(title="Engineer", location="Remote")


async def test_create_profile_inserts_row_keyed_by_user(profile_service, fake_supabase):
    profile = await profile_service.create_profile("user-1", ProfileCreate(**profile_form()))

    assert profile.id == "user-1"
    assert profile.title == "Full Stack Developer"
    row = fake_supabase.tables["profiles"][-1]
    assert row["id"] == "user-1"
    assert row["github"] == "https://github.com/octocat"
    assert row["linkedin"] == ""


async def test_create_profile_wraps_store_errors(profile_service, fake_supabase):
    fake_supabase.errors["profiles"] = RuntimeError("duplicate key value violates unique constraint")

    with pytest.raises(ProfileCreateError, match="duplicate key"):
        await profile_service.create_profile("user-1", ProfileCreate(**profile_form()))


async def test_submit_requires_session(creator, fake_supabase, notifier):
    result = await creator.submit(profile_form())

    assert result is None
    assert ("profiles", "insert") not in fake_supabase.executed
    assert notifier.last.title == "Authentication required"
    assert notifier.last.variant == NotificationVariant.DESTRUCTIVE


async def test_submit_creates_profile_for_signed_in_user(creator, session, fake_supabase, notifier):
    session.set_session("user-1")

    result = await creator.submit(profile_form())

    assert result.id == "user-1"
    assert fake_supabase.tables["profiles"][-1]["id"] == "user-1"
    assert notifier.last.title == "Profile created!"
    assert notifier.last.variant == NotificationVariant.DEFAULT
    assert creator.is_submitting is False


async def test_submit_rejects_invalid_form(creator, session, fake_supabase, notifier):
    session.set_session("user-1")

    result = await creator.submit(profile_form(about="short"))

    assert result is None
    assert ("profiles", "insert") not in fake_supabase.executed
    assert notifier.last.title == CREATE_FAILED_TITLE


async def test_submit_failure_notifies(creator, session, fake_supabase, notifier):
    session.set_session("user-1")
    fake_supabase.errors["profiles"] = RuntimeError("permission denied for table profiles")

    result = await creator.submit(ProfileCreate(**profile_form()))

    assert result is None
    assert notifier.last.title == CREATE_FAILED_TITLE
    assert notifier.last.description == "permission denied for table profiles"
    assert creator.is_submitting is False
