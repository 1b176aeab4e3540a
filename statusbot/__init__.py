"""
Status Bot - set your Virtual RC desk status from Zulip.
"""

__version__ = "0.1.0"
__logo__ = "🦀"
