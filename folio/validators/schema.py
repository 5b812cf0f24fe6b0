#!/usr/bin/env python3
"""
schema.py
---------
Per-record schema validation for Folio content.

Each `validate_<entity>` function takes one raw record (usually a mapping
parsed from YAML or JSON) and returns either a `SchemaSuccess` holding the
typed model or a `SchemaFailure` holding every field-level problem found.
Malformed input never raises: a non-mapping record, a wrong type, or an
unparsable date all come back as `FieldError`s.

Key Principles:
- Single Source of Truth: enum values come from folio.models.enums
- Every rule reports a stable `code` alongside its message
- Nested fields are reported with dotted paths (`images.0.alt`)
- Record-level rules (resume date refinement) report the field `root`

Error codes:
    required        Missing field or empty string where one is required
    invalid_type    Value has the wrong JSON type
    invalid_enum    Value outside a closed set
    invalid_format  Slug, colour, or other pattern mismatch
    invalid_date    Not an accepted ISO-8601 form
    invalid_url     Not an absolute URL
    invalid_email   Not an e-mail address
    too_small       Below a numeric or length minimum
    too_big         Above a numeric or length maximum
    invalid_range   Resume date refinement failed

Usage:
    from folio.validators.schema import validate_blog_article

    result = validate_blog_article(raw)
    if result.success:
        article = result.data
    else:
        for error in result.errors:
            print(f"{error.field}: {error.message}")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar, Union
from urllib.parse import urlparse

# --- Local imports ---
from folio.core.exceptions import ContentValidationError
from folio.models.content import (
    BlogArticle,
    CameraSettings,
    Certification,
    ContactSubmission,
    Coordinates,
    Equipment,
    Image,
    Location,
    Persona,
    PortfolioCollection,
    PortfolioItem,
    ResumeEntry,
    Series,
    Skill,
    SocialLinks,
)
from folio.models.enums import Proficiency, ResumeEntryType, SkillCategory
from folio.utils.dates import is_strict_datetime, is_valid_date, parse_date
from folio.utils.slugify import is_valid_slug, normalize_slug

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

SCRIPT_TAG = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
INLINE_HANDLER_DOUBLE = re.compile(r"\s*on\w+\s*=\s*\"[^\"]*\"", re.IGNORECASE)
INLINE_HANDLER_SINGLE = re.compile(r"\s*on\w+\s*=\s*'[^']*'", re.IGNORECASE)
JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)

RESUME_RANGE_MESSAGE = (
    "Invalid date range: start date must be before end date, "
    "and non-current positions must have end date"
)


# ----- Result types -----


@dataclass(frozen=True)
class FieldError:
    """A single field-level schema violation."""

    field: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class SchemaSuccess(Generic[T]):
    """Record passed validation; `data` is the typed model."""

    data: T
    errors: List[FieldError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class SchemaFailure:
    """Record failed validation; `errors` lists every violation."""

    errors: List[FieldError]
    data: None = None

    @property
    def success(self) -> bool:
        return False

    def raise_error(self, content_type: str) -> None:
        """Raise a ContentValidationError carrying these errors."""
        raise ContentValidationError(
            f"Invalid {content_type.replace('_', ' ')} data",
            details=[error.to_dict() for error in self.errors],
            context={"content_type": content_type},
        )


SchemaResult = Union[SchemaSuccess[T], SchemaFailure]


# ----- Standalone helpers -----


def is_valid_email(email: Any) -> bool:
    """Loose e-mail check: something@something.tld, no whitespace."""
    return isinstance(email, str) and bool(EMAIL_PATTERN.match(email))


def is_valid_url(url: Any) -> bool:
    """
    True for absolute URLs (scheme plus host, or a `mailto:`-style target).

    Examples:
        >>> is_valid_url("https://example.com/a.png")
        True
        >>> is_valid_url("/images/a.png")
        False
    """
    if not isinstance(url, str) or not url or any(c.isspace() for c in url):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if not parsed.scheme:
        return False
    return bool(parsed.netloc) or parsed.scheme in ("mailto", "tel", "data")


def sanitize_html(html: str) -> str:
    """
    Remove script elements, inline event handlers, and `javascript:` URLs.

    Examples:
        >>> sanitize_html('<p onclick="x()">Hi</p><script>alert(1)</script>')
        '<p>Hi</p>'
    """
    html = SCRIPT_TAG.sub("", html)
    html = INLINE_HANDLER_DOUBLE.sub("", html)
    html = INLINE_HANDLER_SINGLE.sub("", html)
    return JAVASCRIPT_SCHEME.sub("", html)


# ----- Field checking -----


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


class _RecordChecker:
    """
    Reads typed values out of one raw mapping, recording violations.

    Every `*_field` method returns the coerced value (or the default when
    absent) and appends FieldErrors for anything wrong. Callers build the
    model only when `errors` stays empty.
    """

    def __init__(self, raw: Mapping[str, Any], prefix: str = "") -> None:
        self.raw = raw
        self.prefix = prefix
        self.errors: List[FieldError] = []

    def path(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def fail(self, name: str, message: str, code: str) -> None:
        self.errors.append(FieldError(self.path(name), message, code))

    def _present(self, name: str) -> bool:
        return name in self.raw and self.raw[name] is not None

    def _check_type(self, name: str, value: Any, expected: str) -> bool:
        actual = _type_name(value)
        if actual != expected:
            self.fail(name, f"Expected {expected}, received {actual}", "invalid_type")
            return False
        return True

    # --- Scalars ---

    def string_field(
        self,
        name: str,
        required: bool = True,
        message: Optional[str] = None,
        min_length: int = 0,
        max_length: Optional[int] = None,
        max_message: Optional[str] = None,
    ) -> Optional[str]:
        """Read a string; empty strings fail `required` when min_length > 0."""
        if not self._present(name):
            if required:
                self.fail(name, message or f"{name} is required", "required")
            return None

        value = self.raw[name]
        if not self._check_type(name, value, "string"):
            return None

        if min_length and len(value) < min_length:
            code = "required" if value == "" else "too_small"
            default = f"{name} must be at least {min_length} characters"
            self.fail(name, message or default, code)
        elif max_length is not None and len(value) > max_length:
            self.fail(
                name,
                max_message or f"{name} must be at most {max_length} characters",
                "too_big",
            )
        return value

    def slug_field(self, name: str, message: str) -> Optional[str]:
        value = self.string_field(name, message=message, min_length=1)
        if value and not is_valid_slug(value):
            self.fail(
                name,
                f"Invalid {name} format: '{value}' (use lowercase kebab-case, "
                f"e.g. '{normalize_slug(value) or 'my-slug'}')",
                "invalid_format",
            )
        return value

    def url_field(
        self, name: str, message: str = "Invalid URL", required: bool = False
    ) -> Optional[str]:
        value = self.string_field(name, required=required)
        if value is not None and not is_valid_url(value):
            self.fail(name, message, "invalid_url")
        return value

    def email_field(
        self,
        name: str,
        message: str = "Invalid email format",
        required: bool = False,
        max_length: Optional[int] = None,
        max_message: Optional[str] = None,
    ) -> Optional[str]:
        value = self.string_field(
            name,
            required=required,
            message=message,
            max_length=max_length,
            max_message=max_message,
        )
        if value is not None and not is_valid_email(value):
            self.fail(name, message, "invalid_email")
        return value

    def datetime_field(
        self,
        name: str,
        message: str,
        required: bool = False,
        allow_date_only: bool = False,
    ) -> Optional[str]:
        """Read an ISO-8601 string (strict datetime unless allow_date_only)."""
        value = self.string_field(name, required=required, message=message)
        if value is None:
            return None
        ok = is_valid_date(value) if allow_date_only else is_strict_datetime(value)
        if not ok:
            self.fail(name, message, "invalid_date")
        return value

    def bool_field(self, name: str, default: bool = False) -> bool:
        if not self._present(name):
            return default
        value = self.raw[name]
        if not self._check_type(name, value, "boolean"):
            return default
        return value

    def number_field(
        self,
        name: str,
        required: bool = False,
        default: Optional[float] = None,
        positive: bool = False,
        nonnegative: bool = False,
        message: Optional[str] = None,
        integer: bool = False,
    ) -> Optional[float]:
        if not self._present(name):
            if required:
                self.fail(name, message or f"{name} is required", "required")
            return default
        value = self.raw[name]
        if not self._check_type(name, value, "number"):
            return default
        if positive and not value > 0:
            self.fail(name, message or f"{name} must be positive", "too_small")
        elif nonnegative and not value >= 0:
            self.fail(name, message or f"{name} must be non-negative", "too_small")
        elif integer and isinstance(value, float):
            if not value.is_integer():
                self.fail(name, f"{name} must be an integer", "invalid_type")
                return default
            return int(value)
        return value

    def enum_field(
        self,
        name: str,
        choices: List[str],
        required: bool = True,
        default: Optional[str] = None,
    ) -> Optional[str]:
        if not self._present(name):
            if required and default is None:
                self.fail(name, f"{name} is required", "required")
            return default
        value = self.raw[name]
        if not isinstance(value, str) or value not in choices:
            self.fail(
                name,
                f"Invalid {name}: '{value}'. Valid values: {', '.join(choices)}",
                "invalid_enum",
            )
            return default
        return value

    def pattern_field(
        self, name: str, pattern: re.Pattern, message: str
    ) -> Optional[str]:
        value = self.string_field(name, required=False)
        if value is not None and not pattern.match(value):
            self.fail(name, message, "invalid_format")
        return value

    # --- Collections ---

    def string_list(self, name: str) -> List[str]:
        if not self._present(name):
            return []
        value = self.raw[name]
        if not self._check_type(name, value, "array"):
            return []
        items: List[str] = []
        for index, item in enumerate(value):
            if isinstance(item, str):
                items.append(item)
            else:
                self.fail(
                    f"{name}.{index}",
                    f"Expected string, received {_type_name(item)}",
                    "invalid_type",
                )
        return items

    def nested(
        self,
        name: str,
        build: Callable[["_RecordChecker"], T],
        required: bool = False,
        message: Optional[str] = None,
    ) -> Optional[T]:
        """Validate a nested object with its own checker and dotted prefix."""
        if not self._present(name):
            if required:
                self.fail(name, message or f"{name} is required", "required")
            return None
        value = self.raw[name]
        if not self._check_type(name, value, "object"):
            return None
        child = _RecordChecker(value, prefix=f"{self.path(name)}.")
        result = build(child)
        self.errors.extend(child.errors)
        return result if not child.errors else None

    def nested_list(
        self,
        name: str,
        build: Callable[["_RecordChecker"], T],
        min_items: int = 0,
        message: Optional[str] = None,
    ) -> List[T]:
        if not self._present(name):
            if min_items:
                self.fail(name, message or f"{name} is required", "required")
            return []
        value = self.raw[name]
        if not self._check_type(name, value, "array"):
            return []
        if len(value) < min_items:
            self.fail(name, message or f"{name} needs {min_items}+ items", "too_small")
            return []

        results: List[T] = []
        for index, item in enumerate(value):
            item_path = f"{name}.{index}"
            if not isinstance(item, Mapping):
                self.fail(
                    item_path,
                    f"Expected object, received {_type_name(item)}",
                    "invalid_type",
                )
                continue
            child = _RecordChecker(item, prefix=f"{self.path(item_path)}.")
            built = build(child)
            self.errors.extend(child.errors)
            if not child.errors:
                results.append(built)
        return results

    # --- Base metadata ---

    def base_metadata(self) -> Dict[str, Any]:
        """Fields every content type shares."""
        return {
            "title": self.string_field("title", message="Title is required", min_length=1),
            "description": self.string_field("description", required=False),
            "draft": self.bool_field("draft"),
            "created_at": self.datetime_field(
                "createdAt", "Invalid created date format", required=True
            ),
            "updated_at": self.datetime_field("updatedAt", "Invalid updated date format"),
            "tags": self.string_list("tags"),
            "featured": self.bool_field("featured"),
        }


def _run(raw: Any, build: Callable[[_RecordChecker], T]) -> SchemaResult:
    if not isinstance(raw, Mapping):
        return SchemaFailure(
            [
                FieldError(
                    "root",
                    f"Expected object, received {_type_name(raw)}",
                    "invalid_type",
                )
            ]
        )
    checker = _RecordChecker(raw)
    data = build(checker)
    if checker.errors:
        return SchemaFailure(checker.errors)
    return SchemaSuccess(data)


# ----- Nested builders -----


def _image(alt_message: str, src_message: str) -> Callable[[_RecordChecker], Image]:
    def build(c: _RecordChecker) -> Image:
        return Image(
            src=c.url_field("src", src_message, required=True),
            alt=c.string_field("alt", message=alt_message, min_length=1),
            caption=c.string_field("caption", required=False),
            width=c.number_field("width", positive=True),
            height=c.number_field("height", positive=True),
        )

    return build


def _social(c: _RecordChecker) -> SocialLinks:
    return SocialLinks(
        github=c.url_field("github"),
        linkedin=c.url_field("linkedin"),
        twitter=c.url_field("twitter"),
        website=c.url_field("website"),
        email=c.email_field("email"),
    )


def _certification(c: _RecordChecker) -> Certification:
    return Certification(
        name=c.string_field("name"),
        issuer=c.string_field("issuer"),
        date=c.datetime_field("date", "Invalid certification date format", required=True),
        url=c.url_field("url"),
    )


def _series(c: _RecordChecker) -> Series:
    return Series(
        name=c.string_field("name"),
        part=c.number_field("part", required=True, positive=True, integer=True),
        total=c.number_field("total", required=True, positive=True, integer=True),
    )


def _equipment(c: _RecordChecker) -> Equipment:
    def settings(s: _RecordChecker) -> CameraSettings:
        return CameraSettings(
            aperture=s.string_field("aperture", required=False),
            shutter=s.string_field("shutter", required=False),
            iso=s.string_field("iso", required=False),
            focal=s.string_field("focal", required=False),
        )

    return Equipment(
        camera=c.string_field("camera", required=False),
        lens=c.string_field("lens", required=False),
        settings=c.nested("settings", settings),
    )


def _location(c: _RecordChecker) -> Location:
    def coordinates(p: _RecordChecker) -> Coordinates:
        return Coordinates(
            lat=p.number_field("lat", required=True),
            lng=p.number_field("lng", required=True),
        )

    return Location(
        name=c.string_field("name"),
        coordinates=c.nested("coordinates", coordinates),
    )


# ----- Entity validators -----


def validate_persona(raw: Any) -> SchemaResult:
    """Validate a persona record."""

    def build(c: _RecordChecker) -> Persona:
        base = c.base_metadata()
        return Persona(
            key=c.slug_field("key", "Persona key is required"),
            name=c.string_field("name", message="Persona name is required", min_length=1),
            bio=c.string_field("bio", message="Persona bio is required", min_length=1),
            avatar=c.url_field("avatar", "Invalid avatar URL"),
            primary=c.bool_field("primary"),
            social=c.nested("social", _social),
            skills=c.string_list("skills"),
            interests=c.string_list("interests"),
            **base,
        )

    return _run(raw, build)


def validate_skill(raw: Any) -> SchemaResult:
    """Validate a skill definition."""

    def build(c: _RecordChecker) -> Skill:
        base = c.base_metadata()
        category = c.enum_field("category", SkillCategory.choices())
        proficiency = c.enum_field(
            "proficiency", Proficiency.choices(), default=Proficiency.INTERMEDIATE.value
        )
        return Skill(
            key=c.slug_field("key", "Skill key is required"),
            name=c.string_field("name", message="Skill name is required", min_length=1),
            category=SkillCategory(category) if category else None,
            proficiency=Proficiency(proficiency),
            years_experience=c.number_field(
                "yearsExperience",
                nonnegative=True,
                message="Years experience must be non-negative",
            ),
            certifications=c.nested_list("certifications", _certification),
            projects=c.string_list("projects"),
            icon=c.string_field("icon", required=False),
            color=c.pattern_field("color", HEX_COLOR_PATTERN, "Invalid hex color"),
            persona=c.string_field(
                "persona", message="Persona assignment required", min_length=1
            ),
            **base,
        )

    return _run(raw, build)


def validate_blog_article(raw: Any) -> SchemaResult:
    """Validate blog article front-matter."""

    def build(c: _RecordChecker) -> BlogArticle:
        base = c.base_metadata()
        return BlogArticle(
            slug=c.slug_field("slug", "Slug is required"),
            excerpt=c.string_field("excerpt", required=False),
            reading_time=c.number_field(
                "readingTime", positive=True, message="Reading time must be positive"
            ),
            hero_image=c.nested(
                "heroImage",
                _image("Hero image alt text is required", "Invalid hero image URL"),
            ),
            category=c.string_field("category", required=False),
            series=c.nested("series", _series),
            related_articles=c.string_list("relatedArticles"),
            persona=c.string_field(
                "persona", message="Persona assignment required", min_length=1
            ),
            published_at=c.datetime_field("publishedAt", "Invalid published date format"),
            **base,
        )

    return _run(raw, build)


def validate_portfolio_collection(raw: Any) -> SchemaResult:
    """Validate a portfolio collection."""

    def build(c: _RecordChecker) -> PortfolioCollection:
        base = c.base_metadata()
        return PortfolioCollection(
            key=c.slug_field("key", "Collection key is required"),
            name=c.string_field("name", message="Collection name is required", min_length=1),
            cover_image=c.nested(
                "coverImage",
                _image("Cover image alt text is required", "Invalid cover image URL"),
            ),
            item_count=c.number_field(
                "itemCount",
                default=0,
                nonnegative=True,
                integer=True,
                message="Item count must be non-negative",
            ),
            sort_order=c.number_field("sortOrder", default=0),
            persona=c.string_field(
                "persona", message="Persona assignment required", min_length=1
            ),
            **base,
        )

    return _run(raw, build)


def validate_portfolio_item(raw: Any) -> SchemaResult:
    """Validate a portfolio item."""

    def build(c: _RecordChecker) -> PortfolioItem:
        base = c.base_metadata()
        return PortfolioItem(
            slug=c.slug_field("slug", "Slug is required"),
            collection=c.string_field(
                "collection", message="Collection reference required", min_length=1
            ),
            images=c.nested_list(
                "images",
                _image("Image alt text is required", "Invalid image URL"),
                min_items=1,
                message="At least one image is required",
            ),
            equipment=c.nested("equipment", _equipment),
            location=c.nested("location", _location),
            persona=c.string_field(
                "persona", message="Persona assignment required", min_length=1
            ),
            sort_order=c.number_field("sortOrder", default=0),
            **base,
        )

    return _run(raw, build)


def validate_resume_entry(raw: Any) -> SchemaResult:
    """
    Validate a resume entry.

    Besides the field rules, a record-level refinement requires an end date
    on non-current entries and a start date strictly before the end date.
    Either violation produces the same single `root` error.
    """

    def build(c: _RecordChecker) -> ResumeEntry:
        base = c.base_metadata()
        entry_type = c.enum_field(
            "type", ResumeEntryType.choices(), default=ResumeEntryType.EMPLOYMENT.value
        )
        return ResumeEntry(
            slug=c.slug_field("slug", "Slug is required"),
            company=c.string_field("company", message="Company name is required", min_length=1),
            position=c.string_field(
                "position", message="Position title is required", min_length=1
            ),
            start_date=c.datetime_field(
                "startDate", "Invalid start date format", required=True, allow_date_only=True
            ),
            end_date=c.datetime_field(
                "endDate", "Invalid end date format", allow_date_only=True
            ),
            current=c.bool_field("current"),
            location=c.string_field("location", required=False),
            remote=c.bool_field("remote"),
            type=ResumeEntryType(entry_type),
            skills=c.string_list("skills"),
            achievements=c.string_list("achievements"),
            responsibilities=c.string_list("responsibilities"),
            technologies=c.string_list("technologies"),
            team_size=c.number_field("teamSize", positive=True, integer=True),
            persona=c.string_field(
                "persona", message="Persona assignment required", min_length=1
            ),
            **base,
        )

    result = _run(raw, build)
    if not isinstance(raw, Mapping):
        return result

    # Refinement runs once the individual dates are usable
    start = parse_date(raw.get("startDate"))
    end_raw = raw.get("endDate")
    end = parse_date(end_raw) if end_raw else None
    if start is None or (end_raw and end is None):
        return result

    current = raw.get("current") is True
    if (not current and not end_raw) or (end is not None and start >= end):
        errors = list(result.errors) + [
            FieldError("root", RESUME_RANGE_MESSAGE, "invalid_range")
        ]
        return SchemaFailure(errors)
    return result


def validate_contact_submission(raw: Any) -> SchemaResult:
    """Validate a contact form submission."""

    def build(c: _RecordChecker) -> ContactSubmission:
        return ContactSubmission(
            name=c.string_field(
                "name",
                message="Name is required",
                min_length=1,
                max_length=100,
                max_message="Name too long",
            ),
            email=c.email_field(
                "email", required=True, max_length=255, max_message="Email too long"
            ),
            subject=c.string_field(
                "subject",
                required=False,
                message="Subject is required",
                min_length=1,
                max_length=200,
                max_message="Subject too long",
            ),
            message=c.string_field(
                "message",
                message="Message must be at least 10 characters",
                min_length=10,
                max_length=5000,
                max_message="Message too long",
            ),
            persona=c.string_field("persona", required=False),
            honeypot=c.string_field(
                "honeypot", required=False, max_length=0, max_message="Bot detected"
            ),
            timestamp=c.datetime_field("timestamp", "Invalid timestamp format"),
            user_agent=c.string_field("userAgent", required=False),
        )

    return _run(raw, build)


VALIDATORS: Dict[str, Callable[[Any], SchemaResult]] = {
    "persona": validate_persona,
    "skill": validate_skill,
    "blog_article": validate_blog_article,
    "portfolio_collection": validate_portfolio_collection,
    "portfolio_item": validate_portfolio_item,
    "resume_entry": validate_resume_entry,
    "contact_submission": validate_contact_submission,
}


def validate_record(content_type: str, raw: Any) -> SchemaResult:
    """
    Validate a record by content-type name.

    Args:
        content_type: One of the keys of VALIDATORS (e.g. 'blog_article')
        raw: Raw record

    Returns:
        SchemaSuccess or SchemaFailure

    Raises:
        ValueError: If the content type is unknown (a programming error)
    """
    try:
        validator = VALIDATORS[content_type]
    except KeyError:
        raise ValueError(
            f"Unknown content type '{content_type}'. "
            f"Valid types: {', '.join(VALIDATORS)}"
        ) from None
    return validator(raw)
