# Pigeonholing items for display. Each table is checked in order and the
# first match wins, so keep more specific entries above more general ones.
import enum

class WeaponType(enum.Enum):
	PISTOL = "Pistol"
	SHOTGUN = "Shotgun"
	SMG = "SMG"
	AR = "Assault Rifle"
	SNIPER = "Sniper"
	HEAVY = "Heavy"
	def __str__(self): return self.value

class ItemType(enum.Enum):
	ARTIFACT = "Artifact"
	CLASSMOD = "Class Mod"
	GRENADEMOD = "Grenade Mod"
	SHIELD = "Shield"
	WEAPON = "Weapon"
	OTHER = "Other"
	def __str__(self): return self.value

class ItemRarity(enum.Enum):
	COMMON = "Common"
	UNCOMMON = "Uncommon"
	RARE = "Rare"
	VERYRARE = "Very Rare"
	LEGENDARY = "Legendary"
	NAMED = "Unique Weapon"
	UNKNOWN = "Unknown"
	def __str__(self): return self.value

# Weapon balances carry the weapon class as a bracketed code, eg Balance_PS_JAK_Maggie
WEAPON_TYPES = [
	(lambda bal: "_PS_" in bal, WeaponType.PISTOL),
	(lambda bal: "_SG_" in bal, WeaponType.SHOTGUN),
	(lambda bal: "_SM_" in bal, WeaponType.SMG),
	(lambda bal: "_AR_" in bal, WeaponType.AR),
	(lambda bal: "_SR_" in bal, WeaponType.SNIPER),
	(lambda bal: "_HW_" in bal, WeaponType.HEAVY),
]

ITEM_TYPES = {
	"BPInvPart_Artifact_C": ItemType.ARTIFACT,
	"BPInvPart_ClassMod_C": ItemType.CLASSMOD,
	"BPInvPart_GrenadeMod_C": ItemType.GRENADEMOD,
	"BPInvPart_Shield_C": ItemType.SHIELD,
}

# As found in the balance info table. E-Tech and starting gear don't get their own tier.
RARITIES = {
	"01/Common": ItemRarity.COMMON,
	"01/Common (Starting Gear)": ItemRarity.COMMON,
	"02/Uncommon": ItemRarity.UNCOMMON,
	"03/Rare": ItemRarity.RARE,
	"03/Rare E-Tech": ItemRarity.RARE,
	"04/Very Rare": ItemRarity.VERYRARE,
	"04/Very Rare E-Tech": ItemRarity.VERYRARE,
	"05/Legendary": ItemRarity.LEGENDARY,
	"Named Weapon": ItemRarity.NAMED,
}

def weapon_type(balance):
	for pred, tag in WEAPON_TYPES:
		if pred(balance): return tag
	return None

def item_type(balance, inv_key):
	if weapon_type(balance): return ItemType.WEAPON
	return ITEM_TYPES.get(inv_key, ItemType.OTHER)

def rarity(label):
	return RARITIES.get(label, ItemRarity.UNKNOWN)
