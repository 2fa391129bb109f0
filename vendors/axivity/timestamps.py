"""
Axivity CWA Packed Timestamp Codec

The AX3 stores wall-clock times as a single 32-bit value with the calendar fields
packed from the most significant bit down:

    YYYYYYMM MMDDDDDh hhhhmmmm mmssssss

The year is an offset from 2000. The device writes garbage (or zero) when its clock
was never set, so no field is range-checked here.
"""

from dataclasses import dataclass

YEAR_BASE = 2000

# (field, shift, mask) from most to least significant
PACKED_FIELDS = (
    ("year", 26, 0x3F),
    ("month", 22, 0x0F),
    ("day", 17, 0x1F),
    ("hour", 12, 0x1F),
    ("minute", 6, 0x3F),
    ("second", 0, 0x3F),
)


@dataclass(frozen=True)
class CwaTimestamp:
    """Calendar fields decoded from a packed CWA timestamp."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def from_packed(cls, raw: int) -> "CwaTimestamp":
        """
        Decodes a packed 32-bit timestamp.

        Args:
            raw (int): The unsigned 32-bit value as stored in the record.

        Returns:
            CwaTimestamp: The decoded fields, passed through without validation.
        """
        fields = {name: (raw >> shift) & mask for name, shift, mask in PACKED_FIELDS}
        fields["year"] += YEAR_BASE

        return cls(**fields)

    def pack(self) -> int:
        """Packs the fields back into the 32-bit representation."""
        raw = 0
        for name, shift, mask in PACKED_FIELDS:
            value = getattr(self, name)
            if name == "year":
                value -= YEAR_BASE
            raw |= (value & mask) << shift

        return raw

    def format(self) -> str:
        """Returns the zero padded 'YYYY-MM-DD HH:MM:SS' form."""
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d} "
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )

    def __str__(self) -> str:
        return self.format()
