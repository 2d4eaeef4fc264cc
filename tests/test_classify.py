import pytest

from bl3serial import classify
from bl3serial.classify import ItemRarity, ItemType, WeaponType

@pytest.mark.parametrize("balance, expected", [
	("/Game/Gear/Weapons/Pistols/Jakobs/Balance_PS_JAK_Maggie.Balance_PS_JAK_Maggie", WeaponType.PISTOL),
	("/Game/Gear/Weapons/Shotguns/Hyperion/Balance_SG_HYP_ATL.Balance_SG_HYP_ATL", WeaponType.SHOTGUN),
	("/Game/Gear/Weapons/SMGs/Dahl/Balance_SM_DAL_01_Common.Balance_SM_DAL_01_Common", WeaponType.SMG),
	("/Game/Gear/Weapons/AssaultRifles/Vladof/Balance_AR_VLA_Rare.Balance_AR_VLA_Rare", WeaponType.AR),
	("/Game/Gear/Weapons/SniperRifles/Jakobs/Balance_SR_JAK_Hunter.Balance_SR_JAK_Hunter", WeaponType.SNIPER),
	("/Game/Gear/Weapons/HeavyWeapons/Torgue/Balance_HW_TOR_Swarm.Balance_HW_TOR_Swarm", WeaponType.HEAVY),
	("/Game/Gear/Shields/_Design/InvBalD_Shield_OldGod.InvBalD_Shield_OldGod", None),
])
def test_weapon_type(balance, expected):
	assert classify.weapon_type(balance) is expected

def test_weapon_type_order():
	# Anything matching more than one code takes the first in the table
	assert classify.weapon_type("Balance_PS_SG_Confused") is WeaponType.PISTOL
	assert classify.weapon_type("Balance_HW_AR_Confused") is WeaponType.AR

def test_item_type():
	assert classify.item_type("Balance_SR_JAK_Hunter", "BPInvPart_SR_JAK_C") is ItemType.WEAPON
	assert classify.item_type("InvBalD_Shield_OldGod", "BPInvPart_Shield_C") is ItemType.SHIELD
	assert classify.item_type("InvBalD_GM_Common", "BPInvPart_GrenadeMod_C") is ItemType.GRENADEMOD
	assert classify.item_type("InvBalD_CM_Beastmaster", "BPInvPart_ClassMod_C") is ItemType.CLASSMOD
	assert classify.item_type("InvBalD_Artifact_Rare", "BPInvPart_Artifact_C") is ItemType.ARTIFACT
	assert classify.item_type("InvBal_Trinket", "BPInvPart_Trinket_C") is ItemType.OTHER
	assert classify.item_type("InvBal_Trinket", None) is ItemType.OTHER

@pytest.mark.parametrize("label, expected", [
	("01/Common", ItemRarity.COMMON),
	("01/Common (Starting Gear)", ItemRarity.COMMON),
	("02/Uncommon", ItemRarity.UNCOMMON),
	("03/Rare", ItemRarity.RARE),
	("03/Rare E-Tech", ItemRarity.RARE),
	("04/Very Rare", ItemRarity.VERYRARE),
	("04/Very Rare E-Tech", ItemRarity.VERYRARE),
	("05/Legendary", ItemRarity.LEGENDARY),
	("Named Weapon", ItemRarity.NAMED),
	("06/Pearlescent", ItemRarity.UNKNOWN),
	(None, ItemRarity.UNKNOWN),
])
def test_rarity(label, expected):
	assert classify.rarity(label) is expected

def test_display_names():
	assert str(WeaponType.AR) == "Assault Rifle"
	assert str(ItemType.GRENADEMOD) == "Grenade Mod"
	assert str(ItemRarity.NAMED) == "Unique Weapon"
