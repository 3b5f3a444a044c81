import logging
import re

from notepdf.core.plugin_interface import PluginInterface
from notepdf.features.registry import FeatureType

logger = logging.getLogger(__name__)

SEMVER_PATTERN = re.compile(r'^\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$')


class PluginRegistry:
    """
    Process-wide registry of loaded plugins and the features they expose.

    PluginRegistry() always returns the same object.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._plugins = {}
            cls._instance = instance
        return cls._instance

    def register(self, plugin):
        if not isinstance(plugin, PluginInterface):
            raise TypeError(f"{type(plugin).__name__} does not implement PluginInterface")

        meta = plugin.get_meta() or {}
        name = meta.get('name')
        version = meta.get('version', '')
        if not name:
            raise ValueError("Plugin metadata must include a 'name'")
        if not SEMVER_PATTERN.match(version):
            raise ValueError(f"Plugin '{name}' has an invalid version '{version}'")
        if name in self._plugins:
            logger.warning(f"PluginRegistry: Replacing already registered plugin '{name}'")
            self.unregister(name)

        self._plugins[name] = plugin
        plugin.initialize(self)
        logger.info(f"PluginRegistry: Registered '{name}' v{version}")
        return plugin

    def unregister(self, name):
        plugin = self._plugins.pop(name, None)
        if plugin is None:
            return False
        try:
            plugin.shutdown()
        except Exception as e:
            logger.error(f"PluginRegistry: Error shutting down '{name}': {e}")
        return True

    def get_plugin(self, name):
        return self._plugins.get(name)

    def get_plugins(self):
        return list(self._plugins.values())

    def get_features(self, feature_type=None):
        features = []
        for plugin in self._plugins.values():
            for feature in plugin.get_features():
                if feature_type is None or feature.feature_type == feature_type:
                    features.append(feature)
        return features

    def get_note_options(self):
        """Actions to offer on a note, as {'label', 'onclick'} entries."""
        return [
            {'label': feature.label, 'onclick': feature.handler}
            for feature in self.get_features(FeatureType.NOTE_ACTION)
        ]

    def run_note_action(self, label):
        for option in self.get_note_options():
            if option['label'] == label:
                return option['onclick']()
        raise KeyError(f"No note action labelled '{label}'")

    def clear(self):
        for name in list(self._plugins):
            self.unregister(name)
