from __future__ import annotations

import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from dex_browser.config.model import ArtworkConfig

logger = logging.getLogger(__name__)

# Bare names the artwork API does not serve; it wants a default form instead
KNOWN_EXCEPTIONS = {
    "deoxys": "deoxys-normal",
    "wormadam": "wormadam-plant",
    "giratina": "giratina-altered",
    "shaymin": "shaymin-land",
    "basculin": "basculin-red-striped",
    "darmanitan": "darmanitan-standard",
    "tornadus": "tornadus-incarnate",
    "thundurus": "thundurus-incarnate",
    "landorus": "landorus-incarnate",
    "keldeo": "keldeo-ordinary",
    "meloetta": "meloetta-aria",
    "aegislash": "aegislash-shield",
}

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"['.:]")


def artwork_key(name: str) -> str:
    """
    Turn a record identity into the artwork API lookup key.

    "Mr. Mime" -> "mr-mime", "Farfetch'd" -> "farfetchd", "Nidoran♀" -> "nidoran-f"
    """
    key = _WHITESPACE.sub("-", str(name).strip().lower())
    key = _PUNCTUATION.sub("", key)
    key = key.replace("♀", "-f").replace("♂", "-m")
    return KNOWN_EXCEPTIONS.get(key, key)


@dataclass(frozen=True)
class ArtworkTicket:
    """
    A pending lookup, stamped with the focus token current when it started.
    """
    identity: str
    token: int
    key: str

    def to_dict(self) -> Dict[str, Any]:
        return {"identity": self.identity, "token": self.token, "key": self.key}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[ArtworkTicket]:
        if not data or not data.get("identity"):
            return None
        return cls(identity=str(data["identity"]), token=int(data.get("token", 0)), key=str(data.get("key", "")))


@dataclass(frozen=True)
class ArtworkResult:
    ticket: ArtworkTicket
    reference: str
    ok: bool


class ArtworkClient:
    """
    Resolves artwork references over HTTP. Failures never propagate: they
    resolve to the configured placeholder instead.
    """

    def __init__(
        self,
        config: Optional[ArtworkConfig] = None,
        session: Optional[requests.Session] = None,
        max_workers: int = 2,
    ):
        self.config = config or ArtworkConfig()
        self.session = session or requests.Session()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._max_workers = max_workers

    def fetch(self, key: str) -> str:
        return self.lookup(ArtworkTicket(identity=key, token=0, key=key)).reference

    def lookup(self, ticket: ArtworkTicket) -> ArtworkResult:
        url = f"{self.config.base_url}/{ticket.key}"
        try:
            response = self.session.get(url, timeout=self.config.timeout_s)
            response.raise_for_status()
            sprites = response.json().get("sprites") or {}
        except (requests.RequestException, ValueError) as e:
            logger.warning(
                "Failed to fetch artwork",
                extra={"identity": ticket.identity, "key": ticket.key, "error": str(e)},
            )
            return ArtworkResult(ticket=ticket, reference=self.config.placeholder_error, ok=False)

        official = (sprites.get("other") or {}).get("official-artwork") or {}
        reference = official.get("front_default") or sprites.get("front_default")
        if not reference:
            return ArtworkResult(ticket=ticket, reference=self.config.placeholder_missing, ok=True)
        return ArtworkResult(ticket=ticket, reference=str(reference), ok=True)

    def submit(self, ticket: ArtworkTicket) -> Future:
        """Run the lookup off the interaction path."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="artwork")
        return self._executor.submit(self.lookup, ticket)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        self.session.close()
