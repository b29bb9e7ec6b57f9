"""
Integration tests for application startup and plugin mounting
"""

import pytest

pytestmark = [pytest.mark.integration]


def test_root_lists_services(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "service": "twitter-app-broker",
        "services": ["apps", "twitter"]
    }


def test_plugin_routes_are_mounted(app):
    paths = {route.path for route in app.routes}

    assert "/twitter/app/create" in paths
    assert "/twitter/app/auth/callback" in paths
    assert "/apps/add" in paths
    assert "/apps/tweet" in paths
