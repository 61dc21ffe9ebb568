"""Base models shared across domains."""

from dataclasses import dataclass


@dataclass
class Address:
    """Residential address as captured during profile setup.

    Fields follow the Philippine address hierarchy:
    - house_number: house / unit number and street
    - barangay: smallest administrative division
    - city / province: municipality and province
    - landline: optional home phone
    """

    house_number: str = ""
    province: str = ""
    city: str = ""
    barangay: str = ""
    postal_code: str = ""
    landline: str = ""
    work_from_home: bool = False

    @property
    def is_complete(self) -> bool:
        """All required address fields are filled in (landline is optional)."""
        return all(
            (value or "").strip()
            for value in (
                self.house_number,
                self.province,
                self.city,
                self.barangay,
                self.postal_code,
            )
        )
