# Item serials: decode, re-encode, and edit. An edit never pokes at the
# encoded bits directly; the whole item is packed afresh at the newest data
# version and decoded again, so what you hold always round-trips.
# Much of the layout knowledge comes from apocalyptech's bl3-cli-saveedit.
import base64
import binascii
import dataclasses
import enum
import logging
from dataclasses import dataclass, field

from . import cipher, classify, database
from .bits import BitCursor, BitWriter
from .errors import (PartLimitError, ResidualDataError, SchemaLookupError,
	SerialError, StructuralError, UnsupportedVersionError)

log = logging.getLogger(__name__)

MAX_PARTS = 63 # 6-bit count
MAX_GENERIC_PARTS = 15 # 4-bit count
SERIAL_VERSIONS = (3, 4)
MARKS = (128, 0) # 0 if the item isn't obfuscated

# Transport form as pasted around by players
def armor(raw): return "BL3(%s)" % base64.b64encode(raw).decode("ascii")
def unarmor(text):
	if len(text) < 5 or text[:4].lower() != "bl3(" or not text.endswith(")"):
		raise StructuralError("Serial must look like BL3(...): %r" % text[:40])
	text = text[4:-1]
	# Standard form is padded, but plenty of pasted serials have the = stripped; put it back
	text += "=" * (-len(text) % 4)
	try: return base64.b64decode(text, validate=True)
	except (binascii.Error, ValueError) as e: raise StructuralError("Bad base64 in serial: %s" % e) from e

class ItemFlags(enum.IntFlag):
	# Kept in the save alongside the serial, not in it
	SEEN = 1
	FAVORITE = 2
	JUNK = 4

@dataclass
class Part:
	ident: str
	index: int
	short_ident: str = None
	def __post_init__(self):
		if self.short_ident is None: self.short_ident = self.ident.rsplit(".", 1)[-1]

@dataclass
class InvDataPart(Part):
	bits: int = 0

@dataclass
class ManufacturerPart(Part):
	bits: int = 0

@dataclass
class BalancePart(Part):
	name: str = None
	bits: int = 0

@dataclass
class ItemParts:
	inv_key: str # Category the specific parts are drawn from, eg BPInvPart_Shield_C
	parts: list = field(default_factory=list)
	generic_parts: list = field(default_factory=list) # Anointments and Mayhem levels
	additional: list = field(default_factory=list) # Opaque bytes; always empty in practice
	num_customs: int = 0
	reroll_count: int = 0 # Only stored in version 4 serials
	rarity: classify.ItemRarity = classify.ItemRarity.UNKNOWN
	weapon_type: classify.WeaponType = None
	part_bits: int = 0
	generic_part_bits: int = 0

	def copy(self):
		return dataclasses.replace(self, parts=list(self.parts),
			generic_parts=list(self.generic_parts), additional=list(self.additional))

def _resolve(db, category, index):
	try: return db.serial.get_part_ident(category, index)
	except SchemaLookupError: return "unknown"

def _lookup(db, category, value):
	"""Find a part by short ident, full ident, or Part; returns (index, ident)"""
	if isinstance(value, Part): value = value.ident
	if "/" not in value and "." not in value:
		return db.serial.get_part_by_short_name(category, value)
	for i, ident in enumerate(db.serial.assets(category), 1):
		if ident.lower() == value.lower(): return i, ident
	raise SchemaLookupError("No asset %r in %s" % (value, category))

def _matches(part, value):
	if isinstance(value, Part): return part.ident == value.ident
	return value.lower() in (part.ident.lower(), part.short_ident.lower())

@dataclass
class Item:
	version: int # Serial format, 3 or 4
	seed: int
	mark: int
	data_version: int
	balance: BalancePart
	inv_data: InvDataPart
	manufacturer: ManufacturerPart
	level: int
	item_parts: ItemParts = None
	item_type: classify.ItemType = classify.ItemType.OTHER
	flags: ItemFlags = ItemFlags(0)
	# Bits we couldn't make sense of, in stream order. Written back verbatim
	# so that the item survives a round trip.
	trailing: str = ""
	db: database.Database = field(default=None, compare=False, repr=False)

	@classmethod
	def from_serial(cls, data, db=None, flags=0):
		db = db or database.default()
		data = bytes(data)
		if len(data) < 5: raise StructuralError("Serial too short (%d bytes)" % len(data))
		if data[0] not in SERIAL_VERSIONS: raise UnsupportedVersionError("Bad serial version %d on item: %r" % (data[0], data))
		version, seed, body = cipher.unseal(data)
		bits = BitCursor(body)
		mark = bits.eat(8)
		if mark not in MARKS: raise StructuralError("Bad mark byte %d" % mark)
		dbver = bits.eat(7)
		if dbver > db.max_version:
			raise UnsupportedVersionError("Item data version %d is newer than the database (%d)" % (dbver, db.max_version))
		def header_part(typ, cat):
			width = db.serial.get_num_bits(cat, dbver)
			idx = bits.eat(width)
			return typ(_resolve(db, cat, idx), idx, bits=width)
		balance = header_part(BalancePart, "InventoryBalanceData")
		balance.name = db.balance_name(balance.ident)
		inv_data = header_part(InvDataPart, "InventoryData")
		manufacturer = header_part(ManufacturerPart, "ManufacturerData")
		self = cls(version=version, seed=seed, mark=mark, data_version=dbver,
			balance=balance, inv_data=inv_data, manufacturer=manufacturer,
			level=bits.eat(7), flags=ItemFlags(flags), db=db)

		inv_key = db.inv_key_for_balance(balance.ident)
		self.item_type = classify.item_type(balance.ident, inv_key)
		if not inv_key:
			# No parts section. Anything past a byte's worth of padding is kept as-is.
			residue = bits.peek()
			if len(residue) >= 8 or "1" in residue: self.trailing = residue
			return self
		rest = bits.peek()
		def get_parts(cat, countbits):
			width = db.serial.get_num_bits(cat, dbver)
			return width, [Part(_resolve(db, cat, idx), idx) for idx in
				[bits.eat(width) for _ in range(bits.eat(countbits))]]
		parts = ItemParts(inv_key)
		parts.part_bits, parts.parts = get_parts(inv_key, 6)
		parts.generic_part_bits, parts.generic_parts = get_parts("InventoryGenericPartData", 4)
		parts.additional = [bits.eat(8) for _ in range(bits.eat(8))]
		parts.num_customs = bits.eat(4)
		if version >= 4: parts.reroll_count = bits.eat(8)
		parts.rarity = classify.rarity(db.balance_rarity(balance.ident))
		parts.weapon_type = classify.weapon_type(balance.ident)
		# We're done parsing. The remaining bits should all be zero, and just enough to fill out a byte.
		if len(bits) >= 8: raise ResidualDataError("Too much data left over!! %r" % bits.peek())
		if "1" in bits.peek(): raise ResidualDataError("Non-zero data left! %r" % bits.peek())
		if parts.num_customs:
			# Never seen in the wild. Keep the header, carry the parts verbatim.
			log.warning("Item %s has %d customs, parts not decoded", balance.short_ident, parts.num_customs)
			self.trailing = rest
			return self
		self.item_parts = parts
		return self

	@classmethod
	def from_armored(cls, text, db=None, flags=0):
		return cls.from_serial(unarmor(text), db, flags)

	@classmethod
	def create(cls, db, balance, inv_data, manufacturer, level, parts=(), generic_parts=(), version=4):
		"""Build a brand new item from names (short or full idents)"""
		db = db or database.default()
		bal_idx, bal = _lookup(db, "InventoryBalanceData", balance)
		item = cls(version=version, seed=0, mark=128, data_version=db.max_version,
			balance=BalancePart(bal, bal_idx),
			inv_data=InvDataPart(*reversed(_lookup(db, "InventoryData", inv_data))),
			manufacturer=ManufacturerPart(*reversed(_lookup(db, "ManufacturerData", manufacturer))),
			level=level, db=db)
		inv_key = db.inv_key_for_balance(bal)
		if inv_key: item.item_parts = ItemParts(inv_key)
		elif parts or generic_parts: raise PartLimitError("%s takes no parts" % item.balance.short_ident)
		for p in parts: item.item_parts.parts.append(Part(*reversed(_lookup(db, inv_key, p))))
		for p in generic_parts: item.item_parts.generic_parts.append(Part(*reversed(_lookup(db, "InventoryGenericPartData", p))))
		return rebuild(item, db)

	def pack(self, db=None, version=None):
		"""Bit-pack the fields, ready for sealing. Widths are always looked up afresh."""
		db = db or self.db or database.default()
		if version is None: version = self.data_version
		def put_category(cat, part): data.append_le(part.index, db.serial.get_num_bits(cat, version))
		data = BitWriter()
		data.append_le(self.mark, 8)
		data.append_le(version, 7)
		put_category("InventoryBalanceData", self.balance)
		put_category("InventoryData", self.inv_data)
		put_category("ManufacturerData", self.manufacturer)
		data.append_le(self.level, 7)
		p = self.item_parts
		if p is not None:
			if len(p.parts) > MAX_PARTS: raise PartLimitError("Too many parts (%d)" % len(p.parts))
			if len(p.generic_parts) > MAX_GENERIC_PARTS: raise PartLimitError("Too many generic parts (%d)" % len(p.generic_parts))
			data.append_le(len(p.parts), 6)
			for part in p.parts: put_category(p.inv_key, part)
			data.append_le(len(p.generic_parts), 4)
			for part in p.generic_parts: put_category("InventoryGenericPartData", part)
			data.append_le(len(p.additional), 8)
			for n in p.additional: data.append_le(n, 8)
			data.append_le(p.num_customs, 4)
			if self.version >= 4: data.append_le(p.reroll_count, 8)
		data.append_bits(self.trailing)
		return data.into_bytes()

	def serial(self, seed=None):
		"""Encode back to raw bytes. Seed 0 strips provenance; the default keeps the item's own."""
		if seed is None: seed = self.seed
		return cipher.seal(self.version, seed, self.pack())

	def armored(self, seed=None): return armor(self.serial(seed))

	def title(self):
		return self.balance.name or self.balance.short_ident # Fallback: Use the balance ID.

	def __str__(self):
		return "<Item: %s lvl %d>" % (self.title(), self.level)

	# Editing. Each change is made to a copy, which is then rebuilt; only if
	# that all works does this item take on the new state.
	def copy(self):
		return dataclasses.replace(self, item_parts=self.item_parts and self.item_parts.copy())

	def _commit(self, new):
		vars(self).update(vars(rebuild(new, self.db)))

	def _parts_of(self, new):
		if new.item_parts is None: raise PartLimitError("%s has no parts section" % self.balance.short_ident)
		return new.item_parts

	def set_balance(self, value):
		db = self.db or database.default()
		new = self.copy()
		new.balance = BalancePart(*reversed(_lookup(db, "InventoryBalanceData", value)))
		new.trailing = "" # Whatever we couldn't parse belonged to the old balance
		inv_key = db.inv_key_for_balance(new.balance.ident)
		if not inv_key:
			log.warning("set_balance: no part category for %s, dropping parts", new.balance.ident)
			new.item_parts = None
		elif new.item_parts is None: new.item_parts = ItemParts(inv_key)
		else:
			# Keep whatever parts the new category also has, at their new indices
			kept = []
			for part in new.item_parts.parts:
				try: kept.append(Part(*reversed(db.serial.get_part_by_short_name(inv_key, part.short_ident))))
				except SchemaLookupError: pass
			new.item_parts.inv_key, new.item_parts.parts = inv_key, kept
		# Best guess at a matching inventory data
		short = new.balance.short_ident.replace("InvBal", "")
		for i, ident in enumerate(db.serial.assets("InventoryData"), 1):
			if short in ident:
				new.inv_data = InvDataPart(ident, i)
				break
		self._commit(new)

	def set_inv_data(self, value):
		new = self.copy()
		new.inv_data = InvDataPart(*reversed(_lookup(self.db or database.default(), "InventoryData", value)))
		self._commit(new)

	def set_manufacturer(self, value):
		new = self.copy()
		new.manufacturer = ManufacturerPart(*reversed(_lookup(self.db or database.default(), "ManufacturerData", value)))
		self._commit(new)

	def set_level(self, level):
		new = self.copy()
		new.level = level
		self._commit(new)

	def add_part(self, value):
		new = self.copy()
		parts = self._parts_of(new)
		if len(parts.parts) >= MAX_PARTS: raise PartLimitError("Can't have more than %d parts" % MAX_PARTS)
		parts.parts.append(Part(*reversed(_lookup(self.db or database.default(), parts.inv_key, value))))
		self._commit(new)

	def remove_part(self, value):
		new = self.copy()
		parts = self._parts_of(new).parts
		for i, part in enumerate(parts):
			if _matches(part, value):
				del parts[i]
				break
		self._commit(new)

	def add_generic_part(self, value):
		new = self.copy()
		parts = self._parts_of(new)
		if len(parts.generic_parts) >= MAX_GENERIC_PARTS:
			raise PartLimitError("Can't have more than %d generic parts" % MAX_GENERIC_PARTS)
		parts.generic_parts.append(Part(*reversed(_lookup(self.db or database.default(), "InventoryGenericPartData", value))))
		self._commit(new)

	def remove_generic_part(self, value):
		new = self.copy()
		parts = self._parts_of(new).generic_parts
		for i, part in enumerate(parts):
			if _matches(part, value):
				del parts[i]
				break
		self._commit(new)

	# Part order matters to the game: later parts can override earlier ones.
	def _move_part(self, index, dest):
		new = self.copy()
		parts = self._parts_of(new).parts
		if not 0 <= index < len(parts): raise IndexError("No part at position %d" % index)
		dest = dest(len(parts))
		parts.insert(dest, parts.pop(index))
		self._commit(new)
		return dest

	def move_part_up(self, index): return self._move_part(index, lambda n: max(index - 1, 0))
	def move_part_down(self, index): return self._move_part(index, lambda n: min(index + 1, n - 1))
	def move_part_top(self, index): return self._move_part(index, lambda n: 0)
	def move_part_bottom(self, index): return self._move_part(index, lambda n: n - 1)

def rebuild(item, db=None):
	"""Pack, seal with seed 0, and decode again. Returns a new Item.

	The data version is bumped to the newest the database knows, unless the
	item carries bits we couldn't parse; those only make sense at the
	version they came from.
	"""
	db = db or item.db or database.default()
	version = item.data_version if item.trailing else db.max_version
	raw = cipher.seal(item.version, 0, item.pack(db, version))
	log.debug("Rebuilt %s at data version %d", item.balance.short_ident, version)
	return Item.from_serial(raw, db, item.flags)

def decode_all(serials, db=None):
	"""Decode a batch of raw or armored serials, skipping any that won't decode

	Returns (items, rejected) where rejected lists (position, exception).
	"""
	db = db or database.default()
	items, rejected = [], []
	for pos, data in enumerate(serials):
		try:
			if isinstance(data, str): items.append(Item.from_armored(data, db))
			else: items.append(Item.from_serial(data, db))
		except SerialError as e:
			log.warning("Skipping item %d: %s", pos, e)
			rejected.append((pos, e))
	return items, rejected
