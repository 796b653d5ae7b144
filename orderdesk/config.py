import logging
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv(".env")

DEFAULTS = {
	"api_url": "http://localhost:5000",
	"timeout": "10",
	"currency": "$",
	"messages": os.path.join(os.path.dirname(os.path.abspath(__file__)), "messages.yaml"),
	"log_level": "INFO",
}


def _from_secrets(key: str):
	# Streamlit may not be present (tests, scripts) or may have no secrets file
	try:
		import streamlit as st  # type: ignore
		return st.secrets.get("api", {}).get(key)
	except Exception as e:
		logging.debug(f"Streamlit secrets unavailable for '{key}': {e}")
		return None


def get_setting(key: str) -> str:
	"""Environment variable ORDERDESK_<KEY>, then the [api] secrets table, then the default."""
	value = os.getenv(f"ORDERDESK_{key.upper()}")
	if value:
		return value
	value = _from_secrets(key)
	if value:
		return str(value)
	return DEFAULTS[key]


def api_url() -> str:
	return get_setting("api_url").rstrip("/")


def request_timeout() -> float:
	return float(get_setting("timeout"))


def currency_symbol() -> str:
	return get_setting("currency")


def messages_path() -> str:
	return get_setting("messages")


def log_level() -> str:
	return get_setting("log_level").upper()
