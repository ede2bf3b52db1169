"""Meta related things."""

__version_info__ = (1, 0, 0, "final")
__version__ = "{}.{}.{}".format(*__version_info__[:3])
