"""
Response envelope collecting the results of a single provider call.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from geomany.geocoding.base import (
    GeocodingResult,
    ProviderReply,
    BaseGeocoder,
    STATUS_OK,
    STATUS_NOT_FOUND,
)

logger = logging.getLogger(__name__)


class GeocodingResponse:
    """
    Everything one provider said about one location.

    Starts out empty with a "not found" status. Each raw reply that carries
    usable coordinates becomes a GeocodingResult and flips the status to
    success; replies without coordinates are dropped. A status set
    explicitly with `set_status_code` always wins.
    """

    def __init__(self, location: str, provider: str = ""):
        self.location = location
        self.provider = provider
        self.status_code = STATUS_NOT_FOUND
        self._results: List[GeocodingResult] = []

    @classmethod
    def from_reply(
        cls,
        location: str,
        geocoder: BaseGeocoder,
        reply: ProviderReply
    ) -> "GeocodingResponse":
        """Normalize every raw reply of a provider call into one envelope."""
        response = cls(location, geocoder.provider_name)
        for raw in reply.records:
            response.add_record(geocoder.normalize(raw), raw_response=raw)
        response.set_status_code(reply.status_code)
        return response

    def add_record(
        self,
        record: Dict[str, Any],
        raw_response: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Add a normalized record. Returns False if it has no valid coordinates.
        """
        if record.get("latitude") is None or record.get("longitude") is None:
            return False

        try:
            result = GeocodingResult(
                latitude=record["latitude"],
                longitude=record["longitude"],
                address=record.get("address"),
                country=record.get("country"),
                precision=record.get("precision"),
                provider=self.provider,
                location=self.location,
                status_code=STATUS_OK,
                raw_response=raw_response,
            )
        except (TypeError, ValueError) as e:
            logger.warning(f"{self.provider}: Dropping malformed record for {self.location}: {e}")
            return False

        self._results.append(result)
        self.status_code = STATUS_OK
        return True

    def set_status_code(self, status_code: int) -> int:
        self.status_code = status_code
        return status_code

    @property
    def results(self) -> List[GeocodingResult]:
        """Results in the order the provider returned them, stamped with the envelope status."""
        if all(r.status_code == self.status_code for r in self._results):
            return list(self._results)
        return [replace(r, status_code=self.status_code) for r in self._results]

    @property
    def first(self) -> Optional[GeocodingResult]:
        results = self.results
        return results[0] if results else None

    def __len__(self):
        return len(self._results)

    def __repr__(self):
        return (
            f"<GeocodingResponse(provider='{self.provider}', "
            f"status={self.status_code}, results={len(self._results)})>"
        )
