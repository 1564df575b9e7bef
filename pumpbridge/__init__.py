"""Telegram <-> MQTT bridge for pump and valve remote control."""
