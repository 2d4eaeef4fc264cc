# Borderlands 3 item serials. See item.Item for the main entry point.
from .database import Database, load, default
from .errors import *
from .item import Item, ItemParts, Part, armor, unarmor, rebuild, decode_all
