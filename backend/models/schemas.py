from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.row_store import CheckStatus


# --------------------------------------------------
# Remote model records
# --------------------------------------------------
class ParsedProduct(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    product_name: str = Field("", alias="productName")
    price: str = ""
    specs: str = ""
    sku_code: str = Field("", alias="skuCode")
    stock: str = ""
    description: str = ""
    detail_html: str = Field("", alias="detailHtml")
    images: str = ""
    sku_image: str = Field("", alias="skuImage")
    category: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class RenameResult(BaseModel):
    original: str
    new_name: str


class SpecOptimizeResult(BaseModel):
    original: str
    optimized: str


# --------------------------------------------------
# Request payloads
# --------------------------------------------------
class AddRowsRequest(BaseModel):
    rows: List[dict[str, Any]] = Field(..., min_length=1)


class RowIdsRequest(BaseModel):
    ids: List[str]


class StatusUpdateRequest(BaseModel):
    ids: List[str]
    status: CheckStatus


class CellEditRequest(BaseModel):
    column: str = Field(..., min_length=1)
    value: Any = None


class BatchUpdateItem(BaseModel):
    id: str
    changes: dict[str, Any]


class BatchUpdateRequest(BaseModel):
    updates: List[BatchUpdateItem]


class FilterSelectionRequest(BaseModel):
    values: List[str]


class ExtractRequest(BaseModel):
    text: str = ""
    api_key: str | None = None


class PromptedCleaningRequest(BaseModel):
    api_key: str | None = None
    prompt: str | None = None


class DetailImagesRequest(BaseModel):
    header_images: List[str] = Field(default_factory=list)
    footer_images: List[str] = Field(default_factory=list)
