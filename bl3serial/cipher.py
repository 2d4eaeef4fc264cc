# The "bogocrypt" that guards item serials. Got this straight from Gibbed's
# BL3 save editor by way of apocalyptech's; it's obfuscation, not security.
# The payload is XORed against a multiplicative keystream and then rotated
# by up to 31 bytes. Encryption rotates first and XORs second, decryption
# the other way around - get that backwards and nothing round-trips.
import binascii

from .errors import IntegrityError, StructuralError

def _xor(seed, data):
	if not seed: return bytes(data)
	xor = (seed >> 5) & 0xFFFFFFFF # Python's >> is arithmetic, so negative seeds work as in C
	ret = bytearray(data)
	for i, x in enumerate(ret):
		xor = (xor * 0x10A860C1) % 0xFFFFFFFB
		ret[i] = x ^ (xor & 255)
	return bytes(ret)

def _steps(seed, data):
	return (seed & 0x1F) % len(data) if data else 0

def decrypt(seed, data):
	data = _xor(seed, data)
	split = _steps(seed, data)
	return data[len(data) - split:] + data[:len(data) - split] # Decrypting splits last

def encrypt(seed, data):
	split = _steps(seed, data)
	return _xor(seed, data[split:] + data[:split]) # Encrypting splits first

def checksum(header, body):
	"""Fold the CRC32 of header + FFFF + body down to 16 bits"""
	crc = binascii.crc32(bytes(header) + b"\xFF\xFF" + bytes(body))
	return ((crc >> 16) ^ crc) & 0xFFFF

def header(version, seed):
	return bytes([version]) + seed.to_bytes(4, "big", signed=True)

def seal(version, seed, body):
	"""Wrap bit-packed field data into a complete raw serial"""
	hdr = header(version, seed)
	return hdr + encrypt(seed, checksum(hdr, body).to_bytes(2, "big") + body)

def unseal(raw):
	"""Inverse of seal(): returns (version, seed, body), checksum verified

	The version byte isn't validated here; that's the codec's business.
	"""
	if len(raw) < 5: raise StructuralError("Serial too short (%d bytes)" % len(raw))
	seed = int.from_bytes(raw[1:5], "big", signed=True)
	data = decrypt(seed, raw[5:])
	if len(data) < 2: raise StructuralError("Serial has no room for a checksum")
	expected = int.from_bytes(data[:2], "big")
	actual = checksum(raw[:5], data[2:])
	if actual != expected:
		raise IntegrityError("Checksum mismatch (stored %04X, computed %04X)" % (expected, actual))
	return raw[0], seed, data[2:]
