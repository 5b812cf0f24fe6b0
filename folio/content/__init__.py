"""
Content loading and the Markdown transformation pipeline.

    from folio.content.loader import load_content
    from folio.content.transformation import ContentTransformer
"""
