from __future__ import annotations

from typing import Dict, Optional

from pymongo import MongoClient

from mongocompare.config import CompareConfig, ConnectionSettings


class MongoTool:
    """Owns the client connections for both sides of a comparison."""

    def __init__(self, clients: Dict[str, MongoClient], config: CompareConfig) -> None:
        self._clients = clients
        self.config = config

    def client(self, side: str) -> MongoClient:
        try:
            return self._clients[side]
        except KeyError as exc:
            raise ValueError(f"Unknown side '{side}', expected 'source' or 'target'") from exc

    def settings(self, side: str) -> ConnectionSettings:
        return getattr(self.config, side)

    @classmethod
    def from_config(cls, config: CompareConfig, client_factory=MongoClient) -> "MongoTool":
        clients: Dict[str, MongoClient] = {}
        try:
            for side in ("source", "target"):
                settings: ConnectionSettings = getattr(config, side)
                clients[side] = client_factory(settings.uri, **settings.client_kwargs(config.app_name))
        except Exception:
            for client in clients.values():
                client.close()
            raise
        return cls(clients, config)

    def stop(self) -> None:
        first_error: Optional[Exception] = None
        for client in self._clients.values():
            try:
                client.close()
            except Exception as exc:  # pragma: no cover - close is best effort per client
                first_error = first_error or exc
        self._clients = {}
        if first_error is not None:
            raise first_error


__all__ = ["MongoTool"]
