# plugin_manager.py
"""
Plugin Manager for the Twitter App Broker
=========================================

Imports the plugin packages found under 'plugins/' and hands their routers to
the application. It is used as a module-level singleton:

    from plugin_manager import plugin_manager

    plugin_manager.discover_plugins()
    for service_name, router in plugin_manager.get_service_routers().items():
        app.include_router(router, prefix=f"/{service_name}")
"""

import importlib
import logging
import os
from typing import Dict, List, Optional, Type

from fastapi import APIRouter

from plugins import RoutePlugin, get_all_route_plugin_classes, get_route_plugin

logger = logging.getLogger(__name__)


class PluginManager:
    """
    Discovers plugin packages and builds the routers they register.

    Args:
        plugin_dir (Optional[str]): Directory to scan, defaults to ./plugins
    """

    def __init__(self, plugin_dir: Optional[str] = None):
        self._plugin_dir = plugin_dir or os.path.join(os.path.dirname(__file__), "plugins")
        self._loaded_plugins = set()

    def _package_names(self) -> List[str]:
        return [
            item for item in sorted(os.listdir(self._plugin_dir))
            if not item.startswith("__") and os.path.isdir(os.path.join(self._plugin_dir, item))
        ]

    def discover_plugins(self) -> List[str]:
        """
        Import each plugin package once.

        A package that fails to import is logged and skipped so the other
        services still start.

        Returns:
            List[str]: Module names imported by this call
        """
        imported = []

        for package in self._package_names():
            module_name = f"plugins.{package}"
            if module_name in self._loaded_plugins:
                continue
            try:
                importlib.import_module(module_name)
            except ImportError as e:
                logger.error(f"Error loading plugin {module_name}: {e}")
                continue
            self._loaded_plugins.add(module_name)
            imported.append(module_name)
            logger.info(f"Discovered plugin: {module_name}")

        return imported

    def get_all_route_plugins(self) -> Dict[str, Type[RoutePlugin]]:
        return get_all_route_plugin_classes()

    def create_route_plugin(self, service_name: str, **kwargs) -> Optional[RoutePlugin]:
        plugin_class = get_route_plugin(service_name)
        if plugin_class is None:
            return None
        return plugin_class(**kwargs)

    def get_service_routers(self) -> Dict[str, APIRouter]:
        """Build one router per registered service, keyed by service name."""
        routers = {}

        for service_name in self.get_all_route_plugins():
            routers[service_name] = self.create_route_plugin(service_name).get_router()
            logger.info(f"Found route plugin: {service_name}")

        return routers


plugin_manager = PluginManager()
