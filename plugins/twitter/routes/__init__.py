# plugins/twitter/routes/__init__.py
"""
Twitter Routes for the Twitter App Broker
=========================================

This package provides FastAPI route definitions for the Twitter endpoints.

Routes are grouped by flow:
- App routes: registration, OAuth flow, user listing and tweets for apps
  (mounted under "/twitter")
- Apps routes: the app-registration flow with random token identifiers
  (mounted under "/apps")
"""

from .app_routes import TwitterAppRoutes
from .apps_routes import TwitterAppsRoutes

__all__ = ['TwitterAppRoutes', 'TwitterAppsRoutes']
