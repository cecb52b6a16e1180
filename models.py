"""
ScrollHarvest Models
Records produced by the markup extractor.
"""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class CandidateRecord:
    """One listing candidate derived from a single item anchor."""
    name: Optional[str] = None
    url: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = None

    def dedup_key(self) -> tuple:
        """Identity used for deduplication: the URL, else name plus image."""
        if self.url:
            return ("url", self.url)
        return ("name_image", self.name, self.image_url)

    def to_dict(self) -> dict:
        return asdict(self)
