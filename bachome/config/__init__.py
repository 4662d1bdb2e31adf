from bachome.config.config_loader import ConfigLoader

__all__ = ["ConfigLoader"]
