from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    unit: str = Field(default="pcs", min_length=1, max_length=20)
    reorder_level: int = Field(default=0, ge=0)
    sku: str | None = Field(default=None, max_length=64)


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    unit: str | None = Field(default=None, min_length=1, max_length=20)
    reorder_level: int | None = Field(default=None, ge=0)
