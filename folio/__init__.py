"""
Folio
-----

Content core for a personal portfolio and blog: schema and cross-reference
validation, aggregation, derived article fields, and contact-form checks.

Subpackages:
    - models: Immutable content records and enums
    - validators: Schema, cross-reference, content-tree and form validation
    - aggregation: Filter / sort / paginate published content
    - content: Content loading and the Markdown transformation pipeline
    - utils: Dates and durations, slugs, Markdown helpers
    - security: Rate limiting and IP hashing for the contact endpoint
    - core: Paths, exceptions, logging, registries, CLI plumbing
    - cli: The `folio` command
"""

__version__ = "0.1.0"
