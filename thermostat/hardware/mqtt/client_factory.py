"""
Helpers for constructing MQTT clients that work across paho-mqtt 1.x and 2.x.

The 2.x releases require a callback API version flag; we pin the version 1
callback signatures so handlers keep the ``(client, userdata, msg)`` and
``(client, userdata, flags, rc)`` shapes on both major versions.
"""
from __future__ import annotations

from typing import Any, Dict

import paho.mqtt.client as mqtt


def create_mqtt_client(client_id: str = "", *, transport: str = "tcp", tls: bool = False, **kwargs: Any) -> mqtt.Client:
    """
    Build an MQTT client with version 1 callback signatures.

    Args:
        client_id: Optional client identifier.
        transport: "tcp" or "websockets".
        tls: Enable TLS with the system CA bundle.
        kwargs: Extra keyword arguments forwarded to the client constructor.
    """
    client_kwargs: Dict[str, Any] = {"client_id": client_id or "", "transport": transport}

    # MQTT v3.1.1 unless the caller asks otherwise.
    client_kwargs["protocol"] = kwargs.pop("protocol", getattr(mqtt, "MQTTv311", 4))
    client_kwargs.update(kwargs)

    callback_api_version = getattr(mqtt, "CallbackAPIVersion", None)
    if callback_api_version is not None:
        client_kwargs["callback_api_version"] = callback_api_version.VERSION1

    client = mqtt.Client(**client_kwargs)
    if tls:
        client.tls_set()
    return client
