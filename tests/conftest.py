import json
import lzma

import pytest

from bl3serial import database
from bl3serial.database import Database
from bl3serial.item import Item
from bl3serial.serialdb import InventorySerialDb

# A real Old God shield, as found in a save
OLD_GOD = bytes([3, 7, 104, 235, 106, 81, 127, 63, 184, 231, 198, 167, 96,
	179, 97, 24, 224, 171, 102, 232, 245, 72, 182, 213, 98])
OLD_GOD_SEED0 = "BL3(AwAAAABmboC7I9xAEzwShMJVX8nPYwsAAA==)"

# Small enough to reason about by hand. Widths change at several versions
# so that rebuilding an old item actually moves things around.
DAHL = "/Game/Gear/Weapons/SMGs/Dahl/_Shared/_Design/"
TINY_SCHEMA = {
	"InventoryBalanceData": {
		"versions": [{"version": 1, "bits": 3}, {"version": 5, "bits": 4}],
		"assets": [
			DAHL + "Balance/Balance_SM_DAL_01_Common.Balance_SM_DAL_01_Common",
			"/Game/Gear/GrenadeMods/_Design/Balance/InvBalD_GM_Common.InvBalD_GM_Common",
			"/Game/Gear/Artifacts/_Design/Balance/InvBalD_Artifact_Rare.InvBalD_Artifact_Rare",
		],
	},
	"InventoryData": {
		"versions": [{"version": 1, "bits": 2}],
		"assets": [
			DAHL + "A_Data/SM_DAL.SM_DAL",
			"/Game/Gear/GrenadeMods/_Design/A_Data/D_GM_Common.D_GM_Common",
		],
	},
	"ManufacturerData": {
		"versions": [{"version": 1, "bits": 2}, {"version": 7, "bits": 3}],
		"assets": [
			"/Game/Gear/Manufacturers/_Design/Dahl.Dahl",
			"/Game/Gear/Manufacturers/_Design/Torgue.Torgue",
		],
	},
	"BPInvPart_SM_DAL_C": {
		"versions": [{"version": 1, "bits": 3}, {"version": 7, "bits": 5}],
		"assets": [
			DAHL + "Parts/Body/Part_SM_DAL_Body.Part_SM_DAL_Body",
			DAHL + "Parts/Barrel/Part_SM_DAL_Barrel_01.Part_SM_DAL_Barrel_01",
			DAHL + "Parts/Grip/Part_SM_DAL_Grip_01.Part_SM_DAL_Grip_01",
		],
	},
	"BPInvPart_GrenadeMod_C": {
		"versions": [{"version": 1, "bits": 2}],
		"assets": [
			"/Game/Gear/GrenadeMods/_Design/Parts/Payload/GM_Part_Payload_Singularity.GM_Part_Payload_Singularity",
		],
	},
	"InventoryGenericPartData": {
		"versions": [{"version": 1, "bits": 2}, {"version": 3, "bits": 3}],
		"assets": [
			"/Game/Gear/Anointed/GPart_EG_Cryo.GPart_EG_Cryo",
			"/Game/Gear/Anointed/GPart_EG_Fire.GPart_EG_Fire",
			"/Game/Gear/Anointed/GPart_EG_Shock.GPart_EG_Shock",
		],
	},
}
TINY_INV_KEYS = {
	DAHL + "Balance/Balance_SM_DAL_01_Common.Balance_SM_DAL_01_Common": "BPInvPart_SM_DAL_C",
	"/Game/Gear/GrenadeMods/_Design/Balance/InvBalD_GM_Common.InvBalD_GM_Common": "BPInvPart_GrenadeMod_C",
}
TINY_INFO = {
	"Balance_SM_DAL_01_Common": {"name": "Dahl SMG", "rarity": "01/Common"},
}

@pytest.fixture(scope="session")
def db():
	"""The database bundled with the package"""
	return database.load(database.DATA_DIR)

@pytest.fixture
def tiny_db():
	return Database(InventorySerialDb(TINY_SCHEMA), TINY_INV_KEYS, TINY_INFO)

@pytest.fixture
def tiny_dir(tmp_path):
	"""A data directory laid out like the bundled one"""
	with lzma.open(tmp_path / "inventoryserialdb.json.xz", "wt", encoding="utf-8") as f:
		json.dump(TINY_SCHEMA, f)
	(tmp_path / "balance_to_inv_key.json").write_text(json.dumps(TINY_INV_KEYS), encoding="utf-8")
	(tmp_path / "balance_info.json").write_text(json.dumps(TINY_INFO), encoding="utf-8")
	return tmp_path

@pytest.fixture
def old_god(db):
	return Item.from_serial(OLD_GOD, db)

@pytest.fixture
def smg(tiny_db):
	return Item.create(tiny_db, "Balance_SM_DAL_01_Common", "SM_DAL", "Dahl", 10,
		parts=["Part_SM_DAL_Body", "Part_SM_DAL_Barrel_01"], generic_parts=["GPart_EG_Fire"])
