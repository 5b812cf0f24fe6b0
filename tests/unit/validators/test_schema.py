"""
Tests for per-record schema validation.

Tests that each content type accepts well-formed records, reports every
field problem with a stable code and dotted path, and never raises on
malformed input.
"""
import pytest

from folio.core.exceptions import ContentValidationError
from folio.models import Proficiency, ResumeEntryType
from folio.validators.schema import (
    RESUME_RANGE_MESSAGE,
    FieldError,
    is_valid_email,
    is_valid_url,
    sanitize_html,
    validate_blog_article,
    validate_contact_submission,
    validate_persona,
    validate_portfolio_collection,
    validate_portfolio_item,
    validate_record,
    validate_resume_entry,
    validate_skill,
)

from conftest import (
    make_article,
    make_collection,
    make_item,
    make_persona,
    make_resume_entry,
    make_skill,
    make_submission,
)


def errors_by_field(result):
    assert not result.success
    return {error.field: error for error in result.errors}


def without(record, *names):
    return {key: value for key, value in record.items() if key not in names}


class TestValidateRecord:
    """Tests for validate_record dispatch."""

    def test_factories_are_valid(self, record_factories):
        """Every default factory record passes its validator."""
        for content_type, factory in record_factories.items():
            result = validate_record(content_type, factory())
            assert result.success, (content_type, result.errors)
            assert result.errors == []

    def test_unknown_content_type(self):
        with pytest.raises(ValueError, match="Unknown content type 'podcast'"):
            validate_record("podcast", {})

    @pytest.mark.parametrize("raw,received", [([], "array"), ("text", "string"), (None, "null")])
    def test_non_mapping_input(self, raw, received):
        """Non-mapping records fail at the root instead of raising."""
        result = validate_blog_article(raw)
        assert result.errors == [
            FieldError("root", f"Expected object, received {received}", "invalid_type")
        ]


class TestBlogArticle:
    """Tests for validate_blog_article."""

    def test_converts_to_model(self):
        """camelCase keys become model attributes."""
        result = validate_blog_article(
            make_article(readingTime=5, series={"name": "Basics", "part": 1, "total": 3})
        )
        article = result.data
        assert article.slug == "intro-to-python"
        assert article.published_at == "2024-02-01T10:00:00Z"
        assert article.reading_time == 5
        assert article.series.part == 1
        assert article.draft is False

    def test_missing_required_fields_all_reported(self):
        """Every missing field is reported, not just the first."""
        errors = errors_by_field(validate_blog_article({}))
        assert errors["title"].message == "Title is required"
        assert errors["slug"].message == "Slug is required"
        assert errors["persona"].message == "Persona assignment required"
        assert errors["createdAt"].code == "required"

    def test_empty_title(self):
        errors = errors_by_field(validate_blog_article(make_article(title="")))
        assert errors["title"] == FieldError("title", "Title is required", "required")

    def test_invalid_slug_suggests_fix(self):
        errors = errors_by_field(validate_blog_article(make_article(slug="My Post")))
        assert errors["slug"].code == "invalid_format"
        assert errors["slug"].message == (
            "Invalid slug format: 'My Post' (use lowercase kebab-case, e.g. 'my-post')"
        )

    def test_date_only_created_at_rejected(self):
        """Creation timestamps must be full UTC datetimes."""
        errors = errors_by_field(validate_blog_article(make_article(createdAt="2024-01-01")))
        assert errors["createdAt"] == FieldError(
            "createdAt", "Invalid created date format", "invalid_date"
        )

    def test_wrong_type(self):
        errors = errors_by_field(validate_blog_article(make_article(title=42)))
        assert errors["title"] == FieldError("title", "Expected string, received number", "invalid_type")

    def test_reading_time_positive(self):
        errors = errors_by_field(validate_blog_article(make_article(readingTime=0)))
        assert errors["readingTime"].message == "Reading time must be positive"
        assert errors["readingTime"].code == "too_small"

    def test_nested_series_path(self):
        """Nested problems use dotted paths."""
        errors = errors_by_field(
            validate_blog_article(make_article(series={"name": "S", "part": 0, "total": 2}))
        )
        assert "series.part" in errors
        assert errors["series.part"].code == "too_small"

    def test_tag_list_items(self):
        errors = errors_by_field(validate_blog_article(make_article(tags=["ok", 3])))
        assert errors["tags.1"].message == "Expected string, received number"

    def test_raise_error(self):
        """Failures convert to a ContentValidationError with field details."""
        result = validate_blog_article(make_article(slug=""))
        with pytest.raises(ContentValidationError) as excinfo:
            result.raise_error("blog_article")
        assert str(excinfo.value) == "Invalid blog article data"
        assert excinfo.value.details[0]["field"] == "slug"
        assert excinfo.value.context == {"content_type": "blog_article"}


class TestSkill:
    """Tests for validate_skill."""

    def test_defaults(self):
        """Proficiency defaults to intermediate."""
        result = validate_skill(without(make_skill(), "proficiency"))
        assert result.data.proficiency == Proficiency.INTERMEDIATE

    def test_missing_key(self):
        errors = errors_by_field(validate_skill(without(make_skill(), "key")))
        assert errors["key"].message == "Skill key is required"

    def test_invalid_category(self):
        errors = errors_by_field(validate_skill(make_skill(category="hobby")))
        assert errors["category"].code == "invalid_enum"
        assert errors["category"].message.startswith("Invalid category: 'hobby'. Valid values: language")

    def test_color_and_years(self):
        errors = errors_by_field(validate_skill(make_skill(color="red", yearsExperience=-1)))
        assert errors["color"].message == "Invalid hex color"
        assert errors["yearsExperience"].message == "Years experience must be non-negative"

    def test_valid_color(self):
        assert validate_skill(make_skill(color="#3776AB")).success

    def test_missing_persona(self):
        errors = errors_by_field(validate_skill(without(make_skill(), "persona")))
        assert errors["persona"].message == "Persona assignment required"


class TestPersona:
    """Tests for validate_persona."""

    def test_missing_key(self):
        errors = errors_by_field(validate_persona(without(make_persona(), "key")))
        assert errors["key"].message == "Persona key is required"

    def test_social_links(self):
        result = validate_persona(
            make_persona(social={"github": "https://github.com/ada", "email": "ada@example.com"})
        )
        assert result.data.social.github == "https://github.com/ada"

    def test_invalid_social_url(self):
        errors = errors_by_field(validate_persona(make_persona(social={"github": "ada"})))
        assert errors["social.github"] == FieldError("social.github", "Invalid URL", "invalid_url")


class TestPortfolio:
    """Tests for collections and items."""

    def test_item_requires_image(self):
        errors = errors_by_field(validate_portfolio_item(make_item(images=[])))
        assert errors["images"].message == "At least one image is required"

        errors = errors_by_field(validate_portfolio_item(without(make_item(), "images")))
        assert errors["images"].message == "At least one image is required"

    def test_image_fields(self):
        """Image alt text and absolute URLs are required, reported per index."""
        errors = errors_by_field(validate_portfolio_item(make_item(images=[{"src": "/a.png"}])))
        assert errors["images.0.src"].message == "Invalid image URL"
        assert errors["images.0.alt"].message == "Image alt text is required"

    def test_item_equipment(self):
        result = validate_portfolio_item(
            make_item(equipment={"camera": "X100", "settings": {"aperture": "f/8"}})
        )
        assert result.data.equipment.settings.aperture == "f/8"

    def test_collection_item_count(self):
        errors = errors_by_field(validate_portfolio_collection(make_collection(itemCount=-1)))
        assert errors["itemCount"].message == "Item count must be non-negative"
        assert validate_portfolio_collection(make_collection(itemCount=2.0)).data.item_count == 2


class TestResumeEntry:
    """Tests for validate_resume_entry, including the date refinement."""

    def test_valid_entry(self):
        entry = validate_resume_entry(make_resume_entry()).data
        assert entry.type == ResumeEntryType.EMPLOYMENT
        assert entry.start_date == "2019-01-01"
        assert entry.technologies == ["docker"]

    def test_current_without_end_date(self):
        """Current positions may omit the end date."""
        assert validate_resume_entry(make_resume_entry(endDate=None, current=True)).success

    def test_not_current_without_end_date(self):
        """A finished position must say when it ended."""
        result = validate_resume_entry(make_resume_entry(endDate=None))
        assert result.errors == [FieldError("root", RESUME_RANGE_MESSAGE, "invalid_range")]

    @pytest.mark.parametrize("end", ["2018-12-31", "2019-01-01"])
    def test_start_not_before_end(self, end):
        """Start must be strictly before end."""
        result = validate_resume_entry(make_resume_entry(endDate=end))
        assert not result.success
        assert result.errors[-1].code == "invalid_range"

    def test_unparsable_date_skips_refinement(self):
        """A bad start date is reported once, without the range error."""
        errors = errors_by_field(validate_resume_entry(make_resume_entry(startDate="January 2020")))
        assert errors["startDate"].message == "Invalid start date format"
        assert "root" not in errors

    def test_invalid_type(self):
        errors = errors_by_field(validate_resume_entry(make_resume_entry(type="hobby")))
        assert errors["type"].code == "invalid_enum"


class TestContactSubmission:
    """Tests for validate_contact_submission."""

    def test_valid(self):
        submission = validate_contact_submission(make_submission()).data
        assert submission.email == "jane@example.org"

    @pytest.mark.parametrize(
        "overrides,field,message,code",
        [
            ({"name": "x" * 101}, "name", "Name too long", "too_big"),
            ({"name": ""}, "name", "Name is required", "required"),
            ({"email": "not-an-email"}, "email", "Invalid email format", "invalid_email"),
            ({"email": "a" * 250 + "@x.com"}, "email", "Email too long", "too_big"),
            ({"message": "Too short"}, "message", "Message must be at least 10 characters", "too_small"),
            ({"honeypot": "http://spam"}, "honeypot", "Bot detected", "too_big"),
        ],
    )
    def test_field_rules(self, overrides, field, message, code):
        errors = errors_by_field(validate_contact_submission(make_submission(**overrides)))
        assert errors[field] == FieldError(field, message, code)

    def test_empty_honeypot_allowed(self):
        assert validate_contact_submission(make_submission(honeypot="")).success


class TestHelpers:
    """Tests for sanitize_html, is_valid_email and is_valid_url."""

    def test_sanitize_html(self):
        assert sanitize_html('<p onclick="x()">Hi</p><script>alert(1)</script>') == "<p>Hi</p>"

    def test_sanitize_javascript_urls(self):
        assert sanitize_html("<a href='javascript:alert(1)'>x</a>") == "<a href='alert(1)'>x</a>"

    @pytest.mark.parametrize(
        "email,valid",
        [("a@b.co", True), ("a@b", False), ("a b@c.com", False), ("", False), (None, False)],
    )
    def test_is_valid_email(self, email, valid):
        assert is_valid_email(email) is valid

    @pytest.mark.parametrize(
        "url,valid",
        [
            ("https://example.com/a.png", True),
            ("mailto:ada@example.com", True),
            ("/images/a.png", False),
            ("example.com", False),
            ("https://exa mple.com", False),
        ],
    )
    def test_is_valid_url(self, url, valid):
        assert is_valid_url(url) is valid
