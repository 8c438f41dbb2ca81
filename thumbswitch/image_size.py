"""
ImageSize - A named derivative size.
"""

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class ImageSize:
    """
    A registered thumbnail size.

    Attributes:
        name: Size name (e.g. 'thumbnail', 'woocommerce_single')
        width: Maximum width in pixels, 0 for unconstrained
        height: Maximum height in pixels, 0 for unconstrained
        crop: Crop to the exact dimensions instead of fitting inside them
    """
    name: str
    width: int
    height: int
    crop: bool = False

    def to_dict(self) -> dict:
        data = asdict(self)
        del data['name']
        return data

    @classmethod
    def from_dict(cls, name: str, data: dict) -> 'ImageSize':
        return cls(
            name=name,
            width=int(data.get('width') or 0),
            height=int(data.get('height') or 0),
            crop=bool(data.get('crop', False)),
        )

    def describe(self) -> str:
        crop = 'Yes' if self.crop else 'No'
        return f"Size: {self.width} x {self.height} px, Crop: {crop}"
