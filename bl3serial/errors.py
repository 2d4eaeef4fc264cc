# Everything the codec can reject an item for. Callers that walk a whole save
# usually want to catch SerialError, skip the item, and carry on.

class SerialError(Exception): pass

class StructuralError(SerialError): pass # Too short, bad BL3(...) wrapper, bad base64, bad mark byte
class OutOfBits(StructuralError): pass # Ran off the end of the bit-packed payload
class UnsupportedVersionError(SerialError): pass # Header byte not 3/4, or data version newer than the schema
class IntegrityError(SerialError): pass # Checksum mismatch
class ResidualDataError(SerialError): pass # Leftover bits once every field has been consumed
class SchemaLookupError(SerialError, KeyError):
	# KeyError would otherwise repr() the message with extra quotes
	def __str__(self): return str(self.args[0]) if self.args else ""
class PartLimitError(SerialError, ValueError): pass # Would overflow the 6-bit or 4-bit part counts

class DatabaseLoadError(Exception): pass # Missing or mangled data files. Fatal at startup, not per item.
