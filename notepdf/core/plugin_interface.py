from abc import ABC, abstractmethod


class PluginInterface(ABC):
    """Contract every plugin object registered with the PluginRegistry follows."""

    @abstractmethod
    def get_meta(self):
        """
        Return plugin identity, e.g.
        {'name': ..., 'version': '1.0.0', 'description': ..., 'author': ...}
        """

    def initialize(self, registry):
        """Called once after the plugin has been registered."""

    def shutdown(self):
        """Called when the plugin is unregistered."""

    def get_features(self):
        """Return the list of Feature objects the plugin exposes."""
        return []
