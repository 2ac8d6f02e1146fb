"""Schema management for SQL-backed overlays (e.g. ``PROTEAN_ENV=sqlite``).

Memory providers need no schema; these helpers skip them.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def _load_models(domain: Domain, provider_name: str) -> None:
    # Touching _dao registers each element's table with the provider's metadata
    records = (
        list(domain.registry.aggregates.values())
        + list(domain.registry.entities.values())
        + list(domain.registry.projections.values())
    )
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create tables for roles, accounts, reviews and the read models."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _load_models(domain, provider.name)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain):
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _load_models(domain, provider.name)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
