# plugins/twitter/__init__.py
"""
Twitter Plugin Package for the Twitter App Broker
=================================================

This package brokers OAuth 1.0a three-legged authorization for multiple
registered Twitter apps and, per app, multiple authorized users.

Components:
----------
- CredentialRegistry: Owns the long-lived API credentials of each app and
  resolves the access tokens of users who authorized it
- OAuthTokenBroker: Owns the temporary request token -> verifier -> permanent
  access token exchange
- AppAuthFlow: The app-registration flow over the fs:twitter namespace
- TwitterAppClient: tweepy wrapper used for every call to the platform

Routes:
------
- TwitterAppRoutes: Endpoints under /twitter/app
- TwitterAppsRoutes: Endpoints under /apps

Authentication Flow:
------------------
1. A caller registers an app (consumer key and secret)
2. The caller requests an authorization URL for the app; the broker stores a
   temporary request token and redirects the user to the platform
3. The platform redirects back with the token and a verifier
4. The broker exchanges them for a permanent access token pair, stores it
   under the app and removes the temporary token

All plugins are automatically registered with the plugin system when this
package is imported.
"""

# Import Routes
from .routes import TwitterAppRoutes, TwitterAppsRoutes

# Register plugins
from plugins import register_route_plugin

# Automatically register the plugins when this package is imported
register_route_plugin(TwitterAppRoutes)
register_route_plugin(TwitterAppsRoutes)
