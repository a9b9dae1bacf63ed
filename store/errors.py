class StorageError(Exception):
	"""The backing store is unreachable or a unit of work could not be committed."""
