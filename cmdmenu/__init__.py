"""cmdmenu - data-driven terminal menu shell"""

__version__ = "1.0.0"
__status__ = "STABLE"
