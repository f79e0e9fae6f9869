from datetime import datetime
from typing import List, Optional, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


LanguageCode = Literal["hi", "en", "bn", "mr", "ta", "te"]
StockStatus = Literal["full", "low", "empty"]


class CamelModel(BaseModel):
    # JSON payloads use camelCase keys; Python code uses snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(BaseModel):
    lat: float
    lng: float


class Vendor(CamelModel):
    id: str
    vendor_name: str
    store_name: str
    area: str
    phone: Optional[str] = None
    categories: List[str] = []
    distance: int  # meters
    rating: Optional[float] = None
    verified: bool = False
    business_type: str = "general"
    coordinates: Optional[Coordinates] = None


class InventoryItem(CamelModel):
    id: str
    name: str
    name_hi: Optional[str] = None
    name_bn: Optional[str] = None
    category: str
    quantity: int = 0
    unit: str
    min_threshold: int = 5
    price_per_unit: Optional[float] = None
    stock_status: StockStatus = "full"
    last_updated: Optional[datetime] = None


class StockStatusUpdate(CamelModel):
    # Left as a plain string so the route can answer 400 instead of 422
    stock_status: str


class Supplier(CamelModel):
    id: str
    name: str
    name_hi: Optional[str] = None
    name_bn: Optional[str] = None
    category: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    rating: float = 0.0
    verified: bool = False
    delivery_time: Optional[str] = None  # "Same day", "1-2 days", ...
    min_order_amount: float = 0.0
    is_active: bool = True


class LanguageUpdate(BaseModel):
    language: str


class LanguageState(BaseModel):
    language: LanguageCode
    supported: List[str]


class VoiceCommandRequest(BaseModel):
    transcript: str


class VoiceCommandResponse(BaseModel):
    transcript: str
    language: LanguageCode
    action: Optional[str] = None
    product: Optional[str] = None
    route: Optional[str] = None
