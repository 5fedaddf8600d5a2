from typing import Any
import json as basejson


def asPrimitive(value: Any) -> Any:
	"""Converts named tuples, enums and paths to values that can be
	serialized as JSON."""
	if value is None or type(value) in (bool, float, int, str):
		return value
	elif isinstance(value, tuple) and hasattr(value, "_asdict"):
		return {k: asPrimitive(v) for k, v in value._asdict().items()}
	elif isinstance(value, (list, tuple, set)):
		return [asPrimitive(v) for v in value]
	elif isinstance(value, dict):
		return {str(k): asPrimitive(v) for k, v in value.items()}
	elif hasattr(value, "value") and hasattr(value, "name"):
		# Enums are serialized by value
		return asPrimitive(value.value)
	else:
		return str(value)


def json(value: Any) -> bytes:
	"""Converts the value to JSON-encoded bytes."""
	return basejson.dumps(asPrimitive(value), ensure_ascii=False).encode("utf8")


# EOF
