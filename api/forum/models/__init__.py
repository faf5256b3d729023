"""
Models package - importing it registers every table with SQLModel.
"""
from forum.models.models import *  # noqa: F401,F403
from forum.models.models import __all__  # noqa: F401
