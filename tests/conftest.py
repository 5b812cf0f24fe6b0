"""
conftest.py
-----------
Shared pytest fixtures for Folio tests.

Provides fixtures for:
- A fixed reference time
- Raw record factories (the wire format content files use)
- A fully consistent content graph, in raw and validated form
- A content directory written to tmp_path
"""
import copy
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from folio.validators.schema import validate_record

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
CREATED = "2024-01-01T00:00:00Z"


# ----- Time Fixtures -----

@pytest.fixture
def now():
    """Fixed reference time for date-sensitive checks."""
    return NOW


# ----- Raw Record Factories -----

def make_persona(**overrides):
    record = {
        "key": "developer",
        "name": "Ada Example",
        "title": "Developer",
        "bio": "Builds web things and writes about them.",
        "createdAt": CREATED,
        "primary": True,
        "skills": ["python", "docker"],
    }
    record.update(overrides)
    return record


def make_skill(**overrides):
    record = {
        "key": "python",
        "name": "Python",
        "title": "Python",
        "category": "language",
        "proficiency": "expert",
        "yearsExperience": 8,
        "persona": "developer",
        "createdAt": CREATED,
    }
    record.update(overrides)
    return record


def make_article(**overrides):
    record = {
        "slug": "intro-to-python",
        "title": "Intro to Python",
        "description": "A gentle start with the language.",
        "persona": "developer",
        "category": "tutorials",
        "tags": ["python", "beginners"],
        "createdAt": CREATED,
        "publishedAt": "2024-02-01T10:00:00Z",
    }
    record.update(overrides)
    return record


def make_collection(**overrides):
    record = {
        "key": "landscapes",
        "name": "Landscapes",
        "title": "Landscapes",
        "persona": "photographer",
        "itemCount": 2,
        "sortOrder": 1,
        "createdAt": CREATED,
    }
    record.update(overrides)
    return record


def make_item(**overrides):
    record = {
        "slug": "mountain-dawn",
        "title": "Mountain Dawn",
        "collection": "landscapes",
        "persona": "photographer",
        "images": [{"src": "https://example.com/mountain.jpg", "alt": "Peaks at sunrise"}],
        "tags": ["mountains", "lightroom"],
        "sortOrder": 2,
        "createdAt": CREATED,
    }
    record.update(overrides)
    return record


def make_resume_entry(**overrides):
    record = {
        "slug": "acme-engineer",
        "title": "Software Engineer at Acme",
        "company": "Acme",
        "position": "Software Engineer",
        "startDate": "2019-01-01",
        "endDate": "2021-06-30",
        "type": "employment",
        "persona": "developer",
        "skills": ["python"],
        "technologies": ["docker"],
        "createdAt": CREATED,
    }
    record.update(overrides)
    return record


def make_submission(**overrides):
    record = {
        "name": "Jane Visitor",
        "email": "jane@example.org",
        "subject": "Hello",
        "message": "I enjoyed your article on Python and wanted to say thanks.",
        "timestamp": "2024-06-01T11:58:00Z",
    }
    record.update(overrides)
    return record


@pytest.fixture
def record_factories():
    """The raw record factories, for tests that build their own graphs."""
    return {
        "persona": make_persona,
        "skill": make_skill,
        "blog_article": make_article,
        "portfolio_collection": make_collection,
        "portfolio_item": make_item,
        "resume_entry": make_resume_entry,
        "contact_submission": make_submission,
    }


# ----- Consistent Content Graph -----

ARTICLE_BODY = """## Getting started

Python reads almost like plain English. This article walks through the
first steps: installing the interpreter, running a script, and reading
the errors it prints.

## Next steps

Once the basics feel comfortable, move on to functions and modules.
"""


def _raw_graph():
    return {
        "persona": [
            make_persona(),
            make_persona(
                key="photographer",
                name="Ada Lens",
                title="Photographer",
                bio="Chases light across landscapes.",
                primary=False,
                skills=["lightroom"],
            ),
        ],
        "skill": [
            make_skill(),
            make_skill(
                key="docker",
                name="Docker",
                title="Docker",
                category="tool",
                proficiency="advanced",
                yearsExperience=5,
            ),
            make_skill(
                key="rust",
                name="Rust",
                title="Rust",
                category="language",
                proficiency="beginner",
                yearsExperience=1,
            ),
            make_skill(
                key="lightroom",
                name="Lightroom",
                title="Lightroom",
                category="tool",
                proficiency="intermediate",
                yearsExperience=3,
                persona="photographer",
            ),
        ],
        "blog_article": [
            make_article(
                series={"name": "Python Basics", "part": 1, "total": 2},
                relatedArticles=["python-functions"],
            ),
            make_article(
                slug="python-functions",
                title="Python Functions",
                tags=["python"],
                series={"name": "Python Basics", "part": 2, "total": 2},
                publishedAt="2024-03-01T10:00:00Z",
            ),
            make_article(
                slug="docker-tips",
                title="Docker Tips",
                category="devops",
                tags=["docker"],
                featured=True,
                readingTime=4,
                publishedAt="2024-04-01T10:00:00Z",
            ),
            make_article(
                slug="light-and-shadow",
                title="Light and Shadow",
                persona="photographer",
                category="photography",
                tags=["lighting"],
                publishedAt="2024-01-15T10:00:00Z",
            ),
            make_article(
                slug="unfinished-thoughts",
                title="Unfinished Thoughts",
                draft=True,
                tags=["python"],
                publishedAt=None,
                createdAt="2024-05-01T00:00:00Z",
            ),
        ],
        "portfolio_collection": [
            make_collection(),
            make_collection(
                key="projects",
                name="Projects",
                title="Projects",
                persona="developer",
                itemCount=1,
                sortOrder=0,
            ),
        ],
        "portfolio_item": [
            make_item(),
            make_item(
                slug="coastal-fog",
                title="Coastal Fog",
                tags=["coast"],
                sortOrder=1,
            ),
            make_item(
                slug="folio-site",
                title="Folio Site",
                collection="projects",
                persona="developer",
                tags=["python"],
                sortOrder=0,
            ),
        ],
        "resume_entry": [
            make_resume_entry(),
            make_resume_entry(
                slug="globex-senior",
                title="Senior Engineer at Globex",
                company="Globex",
                position="Senior Engineer",
                startDate="2021-07-01",
                endDate=None,
                current=True,
                remote=True,
                technologies=["rust"],
            ),
            make_resume_entry(
                slug="oss-maintainer",
                title="Maintainer",
                company="Open Source",
                position="Maintainer",
                startDate="2020-01-01",
                endDate="2020-12-31",
                type="volunteer",
                skills=[],
                technologies=[],
            ),
        ],
    }


def _drop_none(record):
    return {key: value for key, value in record.items() if value is not None}


@pytest.fixture
def raw_graph():
    """Raw records, keyed by content type, forming a consistent graph."""
    return {
        content_type: [_drop_none(record) for record in records]
        for content_type, records in _raw_graph().items()
    }


@pytest.fixture
def models(raw_graph):
    """Validated models for every record of the consistent graph."""
    built = {}
    for content_type, records in raw_graph.items():
        built[content_type] = []
        for record in records:
            result = validate_record(content_type, record)
            assert result.success, (record, result.errors)
            built[content_type].append(result.data)
    return built


@pytest.fixture
def graph(models):
    """ContentGraph over the consistent models."""
    from folio.models import ContentGraph

    return ContentGraph(
        personas=models["persona"],
        skills=models["skill"],
        blog_articles=models["blog_article"],
        portfolio_collections=models["portfolio_collection"],
        portfolio_items=models["portfolio_item"],
        resume_entries=models["resume_entry"],
    )


# ----- Content Directory -----

def write_markdown(path, frontmatter, body):
    text = "---\n" + yaml.safe_dump(frontmatter, sort_keys=False) + "---\n\n" + body
    path.write_text(text, encoding="utf-8")


def write_content_dir(root, raw):
    """
    Lay raw records out the way a site's content/ directory does.

    Personas and resume entries get one YAML file each, skills share one
    YAML list, articles are Markdown, items are JSON.
    """
    raw = copy.deepcopy(raw)
    dirs = {
        "personas": root / "personas",
        "skills": root / "skills",
        "blog": root / "blog",
        "collections": root / "portfolio" / "collections",
        "items": root / "portfolio" / "items",
        "resume": root / "resume",
    }
    for directory in dirs.values():
        directory.mkdir(parents=True, exist_ok=True)

    for record in raw["persona"]:
        (dirs["personas"] / f"{record['key']}.yaml").write_text(
            yaml.safe_dump(record, sort_keys=False), encoding="utf-8"
        )
    (dirs["skills"] / "skills.yaml").write_text(
        yaml.safe_dump(raw["skill"], sort_keys=False), encoding="utf-8"
    )
    for record in raw["blog_article"]:
        write_markdown(dirs["blog"] / f"{record['slug']}.md", record, ARTICLE_BODY)
    for record in raw["portfolio_collection"]:
        (dirs["collections"] / f"{record['key']}.yml").write_text(
            yaml.safe_dump(record, sort_keys=False), encoding="utf-8"
        )
    for record in raw["portfolio_item"]:
        (dirs["items"] / f"{record['slug']}.json").write_text(
            json.dumps(record, indent=2), encoding="utf-8"
        )
    for record in raw["resume_entry"]:
        (dirs["resume"] / f"{record['slug']}.yaml").write_text(
            yaml.safe_dump(record, sort_keys=False), encoding="utf-8"
        )
    return root


@pytest.fixture
def content_dir(tmp_path, raw_graph):
    """A content directory holding the consistent graph."""
    return write_content_dir(tmp_path / "content", raw_graph)
