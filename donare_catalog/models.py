from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DRAFT = "draft"
PUBLISHED = "published"
STATUSES = (DRAFT, PUBLISHED)


@dataclass
class Variant:
    id: str
    color: str
    hex: str
    images: List[str] = field(default_factory=list)
    retail: float = 0.0
    wholesale: float = 0.0
    sku: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    keywords: Optional[List[str]] = None

    @property
    def cover_image(self) -> Optional[str]:
        return self.images[0] if self.images else None


@dataclass
class ProductDraft:
    base_name: str = ""
    category_id: str = ""
    material: str = ""
    dimensions: str = ""
    description: str = ""
    variants: List[Variant] = field(default_factory=list)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    keywords: Optional[List[str]] = None
    whatsapp_link: Optional[str] = None
    care_instructions: Optional[str] = None
    story: Optional[str] = None
    status: str = DRAFT

    def variant(self, variant_id: str) -> Optional[Variant]:
        for v in self.variants:
            if v.id == variant_id:
                return v
        return None

    def variant_by_color(self, color: str) -> Optional[Variant]:
        for v in self.variants:
            if v.color == color:
                return v
        return None


@dataclass
class UploadedFile:
    file_id: str
    url: str
    original_name: str


@dataclass
class UnassignedImage:
    id: str
    url: str
    original_name: str
    dominant_color: Optional[str] = None
    suggested_variant_id: Optional[str] = None
    suggested_variant_color: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_upload(cls, f: UploadedFile) -> "UnassignedImage":
        return cls(id=f.file_id, url=f.url, original_name=f.original_name)


@dataclass
class ProductRecord:
    id: Any
    name: str = ""
    base_product_name: Optional[str] = None
    category_id: Optional[str] = None
    price: Optional[float] = None
    main_image: str = ""
    description: str = ""
    images: List[str] = field(default_factory=list)
    display_order: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductRecord":
        known = {
            "id", "name", "baseProductName", "base_product_name", "categoryId",
            "category_id", "category", "price", "main_image", "description",
            "images", "gallery", "display_order",
        }
        price = data.get("price")
        if price is not None:
            try:
                price = float(price)
            except Exception:
                price = None
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            base_product_name=data.get("baseProductName", data.get("base_product_name")),
            category_id=data.get("categoryId") or data.get("category_id") or data.get("category"),
            price=price,
            main_image=data.get("main_image") or "",
            description=data.get("description") or "",
            images=list(data.get("images") or data.get("gallery") or []),
            display_order=data.get("display_order"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        out.update({
            "id": self.id,
            "name": self.name,
            "baseProductName": self.base_product_name,
            "categoryId": self.category_id,
            "price": self.price,
            "main_image": self.main_image,
            "description": self.description,
            "images": list(self.images),
        })
        if self.display_order is not None:
            out["display_order"] = self.display_order
        return out


@dataclass
class Category:
    id: str
    name: str
    order: int = 0


@dataclass
class GroupedCatalogEntry:
    id: str
    name: str
    variants: List[Any] = field(default_factory=list)  # source records, as given
    price: Optional[float] = None
    main_image: str = ""
    description: str = ""
    category_id: Optional[str] = None
    is_grouped: bool = True
    record: Any = None  # source record of a pass-through single


@dataclass
class ChecklistItem:
    label: str
    completed: bool


@dataclass
class BatchReport:
    auto_assigned: int = 0
    suggested: int = 0
    unassigned: int = 0
    redundant: int = 0
    failed: int = 0
    unassigned_images: List[UnassignedImage] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)
