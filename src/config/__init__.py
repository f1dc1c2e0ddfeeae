from .settings import Credential, Settings, settings

__all__ = ["Credential", "Settings", "settings"]
