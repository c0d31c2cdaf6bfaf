"""Infrastructure layer — database, repositories, and the site root.

This layer depends on stdlib and third-party libs (SQLAlchemy, alembic).
Repositories never import from services, commands, or output; only the
:class:`~pagetrail.infrastructure.site.Site` composition root reaches up
to wire the service-layer core components together.
"""
