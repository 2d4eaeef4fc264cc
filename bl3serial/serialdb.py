# The inventory serial database: for every category of asset, how many bits
# an index takes at each data version, and what asset each index names.
# The community dump is a JSON object keyed by category, each value having
# "versions" (ascending list of {"version", "bits"}) and "assets", and
# nothing else. We ship it xz-compressed, same as apocalyptech's editor.
import bisect
import json
import logging
import lzma
import pathlib

from .errors import DatabaseLoadError, SchemaLookupError

log = logging.getLogger(__name__)

class InventorySerialDb:
	def __init__(self, data):
		self._thresholds = {}
		self._widths = {}
		self._assets = {}
		self.max_version = 0
		for cat, info in data.items():
			try:
				versions = sorted(info["versions"], key=lambda v: v["version"])
				assets = tuple(info["assets"])
			except (KeyError, TypeError) as e:
				raise DatabaseLoadError("Malformed schema entry for %s: %r" % (cat, e)) from e
			if not versions: raise DatabaseLoadError("No versions listed for %s" % cat)
			self._thresholds[cat] = [v["version"] for v in versions]
			self._widths[cat] = [v["bits"] for v in versions]
			self._assets[cat] = assets
			self.max_version = max(self.max_version, self._thresholds[cat][-1])

	@classmethod
	def load(cls, path):
		"""Load from a .json.xz (or plain .json) dump"""
		path = pathlib.Path(path)
		try:
			if path.suffix == ".xz":
				with lzma.open(path, "rt", encoding="utf-8-sig") as f: data = json.load(f)
			else:
				with open(path, encoding="utf-8-sig") as f: data = json.load(f)
		except (OSError, lzma.LZMAError, ValueError) as e:
			raise DatabaseLoadError("Unable to load serial database %s: %s" % (path, e)) from e
		if not isinstance(data, dict): raise DatabaseLoadError("Serial database %s is not a JSON object" % path)
		self = cls(data)
		log.debug("Loaded %d categories from %s, max version %d", len(self._assets), path, self.max_version)
		return self

	def _category(self, table, category):
		try: return table[category]
		except KeyError: raise SchemaLookupError("Unknown category %r" % category) from None

	def get_num_bits(self, category, version):
		thresholds = self._category(self._thresholds, category)
		widths = self._widths[category]
		# Greatest threshold <= version. Anything older than the oldest
		# threshold gets the first width listed.
		pos = bisect.bisect_right(thresholds, version)
		return widths[pos - 1] if pos else widths[0]

	def get_part_ident(self, category, index):
		assets = self._category(self._assets, category)
		if not 1 <= index <= len(assets):
			raise SchemaLookupError("%s has no index %d (1..%d)" % (category, index, len(assets)))
		return assets[index - 1]

	def get_part_by_short_name(self, category, name):
		"""Find a part by its short name; returns (index, ident)

		The trailing dot stops "Part_Shield_Aug_Nova" from matching
		"Part_Shield_Aug_Nova_Fire" first.
		"""
		needle = name.lower() + "."
		for i, ident in enumerate(self._category(self._assets, category), 1):
			if needle in ident.lower(): return i, ident
		raise SchemaLookupError("No part %r in %s" % (name, category))

	def categories(self): return list(self._assets)
	def assets(self, category): return self._category(self._assets, category)
