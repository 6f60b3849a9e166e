"""configstore - Prefixed configuration groups persisted to a flat settings file"""

__version__ = "1.0.0"
__description__ = "Prefixed configuration groups persisted to a flat settings file"

__all__ = ["Configuration", "ConfigurationGroup", "Setting", "__version__"]


def __getattr__(name: str):
    """Lazy import so importing the package alone does not load ``.env``.

    The environment is read once the registry is actually requested.
    """
    if name == "Configuration":
        from .core.registry import Configuration

        return Configuration
    if name == "ConfigurationGroup":
        from .core.group import ConfigurationGroup

        return ConfigurationGroup
    if name == "Setting":
        from .core.group import Setting

        return Setting
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
