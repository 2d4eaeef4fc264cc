# Everything loaded from the data directory: the serial schema plus the
# static per-balance tables. Load it once and hand it to whoever decodes.
import json
import logging
import os
import pathlib
import threading

from .errors import DatabaseLoadError
from .serialdb import InventorySerialDb

log = logging.getLogger(__name__)

DATA_DIR = pathlib.Path(__file__).parent / "data"
SCHEMA_FILES = ("inventoryserialdb.json.xz", "inventoryserialdb.json")

class Database:
	def __init__(self, serial, balance_to_inv_key=None, balance_info=None):
		self.serial = serial
		# Both tables are keyed in lowercase; the game isn't consistent about case.
		self.balance_to_inv_key = {k.lower(): v for k, v in (balance_to_inv_key or {}).items()}
		self.balance_info = {k.lower(): v for k, v in (balance_info or {}).items()}

	@property
	def max_version(self): return self.serial.max_version

	def inv_key_for_balance(self, bal):
		# If the balance has a deduplication marker, strip that.
		return self.balance_to_inv_key.get(bal.split("#")[0].lower())

	def _info(self, bal):
		return self.balance_info.get(bal.split("#")[0].split(".")[-1].lower(), {})
	def balance_name(self, bal): return self._info(bal).get("name")
	def balance_rarity(self, bal): return self._info(bal).get("rarity")

def _load_json(path):
	try:
		with open(path, encoding="utf-8-sig") as f: return json.load(f)
	except (OSError, ValueError) as e:
		raise DatabaseLoadError("Unable to load %s: %s" % (path, e)) from e

def load(path=None):
	"""Load the database from a data directory

	With no path, $BL3SERIAL_DATA is consulted, and failing that, the data
	bundled with the package.
	"""
	path = pathlib.Path(path or os.environ.get("BL3SERIAL_DATA") or DATA_DIR)
	for fn in SCHEMA_FILES:
		if (path / fn).exists():
			serial = InventorySerialDb.load(path / fn)
			break
	else: raise DatabaseLoadError("No serial database in %s" % path)
	db = Database(serial, _load_json(path / "balance_to_inv_key.json"), _load_json(path / "balance_info.json"))
	log.debug("Loaded %d balance mappings from %s", len(db.balance_to_inv_key), path)
	return db

_default = None
_default_lock = threading.Lock()
def default():
	"""Shared Database, loaded on first use"""
	global _default
	with _default_lock:
		if _default is None: _default = load()
		return _default
