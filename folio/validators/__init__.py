"""
validators
----------
Validation for Folio content and contact submissions.

Each validator is a module with validation logic and result dataclasses:
    - schema: Per-record structural validation (one function per type)
    - cross_reference: Graph-wide reference and consistency checks
    - content: Whole-tree run (load → schema → uniqueness → references)
    - form: Contact-form pipeline (sanitisation, honeypot, spam scoring)

Validators return typed results; they raise only for programming errors.

Usage:
    # Through CLI
    folio validate content
    folio validate contact submission.json

    # Direct import for programmatic use
    from folio.validators.schema import validate_blog_article
    from folio.validators.cross_reference import CrossReferenceValidator
"""
