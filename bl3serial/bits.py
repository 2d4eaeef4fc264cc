from .errors import OutOfBits

class BitCursor:
	"""Bitwise consumable over packed eight-bit data, least significant bit first

	Like a bytes object but can be consumed a few bits at a time. Internally the
	bits are a string of "0" and "1" characters, each byte reversed so that the
	string reads in stream order; a field is then just a slice, reversed back
	and handed to int(). Horribly inefficient, but an item serial is a few dozen
	bytes, so who cares.
	"""
	def __init__(self, data=b""):
		self.data = "".join(format(x, "08b")[::-1] for x in data)
		self.eaten = 0
		self.left = len(self.data)

	def get(self, num):
		"""Destructively read the next num bits, in stream order"""
		if num > self.left: raise OutOfBits("Wanted %d bits, only %d left" % (num, self.left))
		ret = self.data[self.eaten : self.eaten + num]
		self.eaten += num
		self.left -= num
		return ret

	def eat(self, num):
		"""Consume num bits as an unsigned integer (first bit read is the LSB)"""
		if not num: return 0 # int("", 2) would choke
		return int(self.get(num)[::-1], 2)

	def __len__(self): return self.left
	def peek(self): return self.data[self.eaten:] # Residue, still in stream order

class BitWriter:
	"""Inverse of BitCursor: accumulate little-endian bitfields, then pack to bytes"""
	def __init__(self):
		self.bits = []
		self.length = 0

	def append_le(self, value, num):
		if value < 0 or value >> num:
			raise ValueError("Value %d does not fit in %d bits" % (value, num))
		if num: self.append_bits(format(value, "0%db" % num)[::-1])

	def append_bits(self, bits):
		"""Append raw bits, in stream order (eg from BitCursor.peek())"""
		self.bits.append(bits)
		self.length += len(bits)

	def __len__(self): return self.length

	def into_bytes(self):
		bits = "".join(self.bits)
		residue = -len(bits) % 8
		bits += "0" * residue
		if not bits: return b""
		# The whole stream reversed is one big little-endian integer.
		return int(bits[::-1], 2).to_bytes(len(bits) // 8, "little")
