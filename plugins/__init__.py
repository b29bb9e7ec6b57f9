# plugins/__init__.py
"""
Route plugins of the Twitter App Broker.

A plugin package under 'plugins/' registers one RoutePlugin per service it
exposes. At startup the plugin manager imports every package and mounts each
registered router under "/<service_name>".

    class ExampleRoutes(RoutePlugin):
        service_name = "example"

        def get_router(self):
            ...

    register_route_plugin(ExampleRoutes)
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional, Type

logger = logging.getLogger(__name__)


class PluginType(str, Enum):
    ROUTE = "route"


class PluginBase:
    """
    Common attributes of every plugin.

    Class Attributes:
        plugin_type (PluginType): The kind of plugin
        service_name (str): Service identifier, also the mount prefix of route plugins
    """

    plugin_type: PluginType
    service_name: str

    @classmethod
    def get_metadata(cls) -> Dict[str, Any]:
        return {
            "plugin_type": cls.plugin_type,
            "service_name": cls.service_name,
            "class_name": cls.__name__
        }


class RoutePlugin(PluginBase):
    """A plugin contributing an APIRouter for its service."""

    plugin_type = PluginType.ROUTE

    def get_router(self):
        """
        Build the router of this service.

        Returns:
            fastapi.APIRouter: Routes relative to "/<service_name>"
        """
        raise NotImplementedError("Subclasses must implement get_router")


_route_plugins: Dict[str, Type[RoutePlugin]] = {}


def register_route_plugin(plugin_class: Type[RoutePlugin]) -> None:
    """
    Register a route plugin under its service_name.

    Registering the same class again is a no-op; a different class claiming
    an existing service_name is rejected.

    Raises:
        ValueError: If service_name is already taken by another class
    """
    service_name = plugin_class.service_name
    existing = _route_plugins.get(service_name)

    if existing is plugin_class:
        return
    if existing is not None:
        raise ValueError(
            f"Service {service_name} is already provided by {existing.__name__}"
        )

    _route_plugins[service_name] = plugin_class
    logger.info(f"Registered route plugin {plugin_class.__name__} for service: {service_name}")


def get_route_plugin(service_name: str) -> Optional[Type[RoutePlugin]]:
    return _route_plugins.get(service_name)


def get_all_route_plugin_classes() -> Dict[str, Type[RoutePlugin]]:
    """Return a copy of the registry, keyed by service name."""
    return dict(_route_plugins)
