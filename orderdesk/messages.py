import logging
import os
from typing import Any, Dict, Optional

import yaml

from orderdesk.config import messages_path

_catalog: Optional[Dict[str, Any]] = None


def load_catalog(path: Optional[str] = None) -> Dict[str, Any]:
	path = path or messages_path()
	if not os.path.exists(path):
		logging.warning(f"{path} not found. Messages will be shown as their keys.")
		return {}
	with open(path, "r", encoding="utf-8") as file:
		return yaml.safe_load(file) or {}


def set_catalog(catalog: Optional[Dict[str, Any]]):
	"""Replace the active catalog; None reloads it from disk on next use."""
	global _catalog
	_catalog = catalog


def _lookup(catalog: Dict[str, Any], key: str):
	node: Any = catalog
	for part in key.split("."):
		if not isinstance(node, dict) or part not in node:
			return None
		node = node[part]
	return node if isinstance(node, str) else None


def message(key: str, **params) -> str:
	global _catalog
	if _catalog is None:
		_catalog = load_catalog()

	text = _lookup(_catalog, key)
	if text is None:
		return key
	try:
		return text.format(**params)
	except (KeyError, IndexError):
		logging.warning(f"Missing placeholder value for message '{key}'")
		return text
