"""Public interface for the portfolio REST adapter."""

from __future__ import annotations

from .auth import AuthService
from .client import PortfolioApiClient, parse_model, parse_models
from .public import PublicSite, PublicSiteReader
from .stores import (
    CollectionEndpoints,
    RestCollectionStore,
    RestDocumentStore,
    RestInboxStore,
    about_store,
    category_store,
    contact_settings_store,
    experience_store,
    hero_store,
    project_store,
    site_settings_store,
    skill_store,
)

__all__ = [
    "AuthService",
    "CollectionEndpoints",
    "PortfolioApiClient",
    "PublicSite",
    "PublicSiteReader",
    "RestCollectionStore",
    "RestDocumentStore",
    "RestInboxStore",
    "about_store",
    "category_store",
    "contact_settings_store",
    "experience_store",
    "hero_store",
    "parse_model",
    "parse_models",
    "project_store",
    "site_settings_store",
    "skill_store",
]
