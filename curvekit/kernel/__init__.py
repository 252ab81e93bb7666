"""Ambient services shared by the geometry modules: message channels, settings and exceptions."""

from .channel import *
from .exceptions import *
from .settings import *
