"""MQTT broker adapter."""

from pumpbridge.adapters.mqtt.client import BrokerConnectionError, MQTTBroker

__all__ = ["BrokerConnectionError", "MQTTBroker"]
