from .extension import ExtensionCLI, backup_installed, extension_items
from .package import PackageManager, PackageManagerFactory, package_items
from .shell import LoginShell, framework_item, plugin_items

__all__ = [
    "ExtensionCLI",
    "LoginShell",
    "PackageManager",
    "PackageManagerFactory",
    "backup_installed",
    "extension_items",
    "framework_item",
    "package_items",
    "plugin_items",
]
