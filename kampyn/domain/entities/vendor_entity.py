"""
Vendor-related entities: university charges and colleges
"""

import re
from dataclasses import dataclass
from typing import Any, Dict

from kampyn.infrastructure.utilities.constants import BusinessSettings


@dataclass(frozen=True)
class UniversityCharges:
    """Packing and delivery charges set by the vendor's university"""

    packing_charge: float = BusinessSettings.DEFAULT_PACKING_CHARGE
    delivery_charge: float = BusinessSettings.DEFAULT_DELIVERY_CHARGE
    university_name: str = BusinessSettings.DEFAULT_UNIVERSITY_NAME
    is_default: bool = False

    @classmethod
    def defaults(cls, packing_charge: float = None, delivery_charge: float = None) -> "UniversityCharges":
        return cls(
            packing_charge=BusinessSettings.DEFAULT_PACKING_CHARGE if packing_charge is None else packing_charge,
            delivery_charge=BusinessSettings.DEFAULT_DELIVERY_CHARGE if delivery_charge is None else delivery_charge,
            is_default=True,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UniversityCharges":
        return cls(
            packing_charge=float(data.get("packingCharge", BusinessSettings.DEFAULT_PACKING_CHARGE)),
            delivery_charge=float(data.get("deliveryCharge", BusinessSettings.DEFAULT_DELIVERY_CHARGE)),
            university_name=data.get("universityName") or BusinessSettings.DEFAULT_UNIVERSITY_NAME,
        )


@dataclass(frozen=True)
class College:
    """Entry of the college directory"""

    college_id: str
    full_name: str

    @property
    def slug(self) -> str:
        return generate_slug(self.full_name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "College":
        return cls(college_id=str(data["_id"]), full_name=data.get("fullName", ""))


def generate_slug(name: str) -> str:
    """Lowercase, hyphen-separated slug used in college home page URLs"""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return slug.strip("-")
