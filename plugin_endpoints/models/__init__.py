from .plugins import PluginRecord, PluginStatus, UpdateInfo
