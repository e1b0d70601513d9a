import json
import logging
import os
import re
from typing import Any

import httpx
from pydantic import ValidationError

from models.schemas import ParsedProduct, RenameResult, SpecOptimizeResult
from services.prompts import EXTRACT_PROMPT, RENAME_PROMPT, SKU_OPTIMIZE_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "google/gemini-3-flash-preview"
DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"


class ApiError(Exception):
    """Remote model call failed; ``raw_response`` keeps the body for inspection."""

    def __init__(self, message: str, raw_response: str | None = None):
        super().__init__(message)
        self.message = message
        self.raw_response = raw_response


_STRING = {"type": "string"}


def _strict_schema(name: str, list_key: str, item_props: dict[str, dict]) -> dict:
    return {
        "name": name,
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                list_key: {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": item_props,
                        "required": list(item_props),
                        "additionalProperties": False,
                    },
                }
            },
            "required": [list_key],
            "additionalProperties": False,
        },
    }


EXTRACT_JSON_SCHEMA = _strict_schema(
    "sku_extraction_response",
    "products",
    {
        "productName": {**_STRING, "description": "商品名称 (所有SKU保持一致)"},
        "price": {**_STRING, "description": "价格 (纯数字，去除货币符号)"},
        "specs": {**_STRING, "description": "SKU规格，格式严格为 '属性名:属性值;属性名:属性值'"},
        "skuCode": {**_STRING, "description": "商家编码/货号 (仅数字或字母，若原文未提及返回空字符串)"},
        "stock": {**_STRING, "description": "库存数量"},
        "description": {**_STRING, "description": "商品简要卖点"},
        "detailHtml": {**_STRING, "description": "商品详情区域的 HTML 源码片段"},
        "images": {**_STRING, "description": "主图链接，多个链接用英文逗号分隔，严禁 cnfans 链接"},
        "skuImage": {**_STRING, "description": "该SKU对应的规格图片链接，找不到返回空字符串"},
        "category": {**_STRING, "description": "推测的商品类目 (例如: 女装>>半身裙)"},
    },
)

RENAME_JSON_SCHEMA = _strict_schema(
    "rename_products_response",
    "renamed_list",
    {"original": _STRING, "new_name": _STRING},
)

SKU_OPTIMIZE_JSON_SCHEMA = _strict_schema(
    "sku_optimization_response",
    "optimized_list",
    {"original": _STRING, "optimized": _STRING},
)


def safe_json_parse(raw_text: str, context: str) -> Any:
    try:
        return json.loads(raw_text)
    except (json.JSONDecodeError, TypeError):
        logger.warning("[%s] Direct JSON parse failed, trying to strip Markdown...", context)

    clean = re.sub(r"```json", "", raw_text or "", flags=re.IGNORECASE)
    clean = clean.replace("```", "").strip()
    first, last = clean.find("{"), clean.rfind("}")
    if first != -1 and last != -1:
        clean = clean[first : last + 1]

    try:
        return json.loads(clean)
    except json.JSONDecodeError as exc:
        logger.error("[%s] Final JSON parse failed: %s", context, exc)
        raise ApiError(f"JSON Parse Failed: {exc}", raw_text)


def normalize_specs(specs: str) -> str:
    specs = (specs or "").replace("：", ":")
    specs = re.sub(r"[；，,\n]", ";", specs)
    return ";".join(part.strip() for part in specs.split(";") if part.strip())


def normalize_images(images: str) -> str:
    images = re.sub(r"[，\s]+", ",", images or "")
    return ",".join(part.strip() for part in images.split(",") if part.strip())


def normalize_sku_image(sku_image: str) -> str:
    sku_image = re.sub(r"\s+", "", sku_image or "")
    if "cnfans.com" in sku_image:
        return ""
    return sku_image


def normalize_product_data(products: list[ParsedProduct]) -> list[ParsedProduct]:
    return [
        p.model_copy(
            update={
                "specs": normalize_specs(p.specs),
                "images": normalize_images(p.images),
                "sku_image": normalize_sku_image(p.sku_image),
            }
        )
        for p in products
    ]


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def resolve_api_key(api_key: str | None) -> str:
    key = (api_key or os.getenv("OPENROUTER_API_KEY", "")).strip()
    if not key:
        raise ApiError("OpenRouter API key is required")
    return key


def _error_message(status_code: int, body: str) -> str:
    message = f"API Error: {status_code}"
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return message
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return payload["error"].get("message") or message
    return message


async def _chat_completion(
    system_prompt: str,
    user_content: str,
    json_schema: dict,
    api_key: str,
    context: str,
    client: httpx.AsyncClient | None = None,
    max_tokens: int | None = None,
) -> Any:
    body: dict[str, Any] = {
        "model": os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL),
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ],
        "response_format": {"type": "json_schema", "json_schema": json_schema},
    }
    if max_tokens:
        body["max_tokens"] = max_tokens

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "HTTP-Referer": os.getenv("OPENROUTER_REFERER", "http://localhost"),
        "X-Title": "SKU Generator",
    }
    url = os.getenv("OPENROUTER_API_URL", DEFAULT_API_URL)
    timeout = float(os.getenv("OPENROUTER_TIMEOUT_SECONDS", "120"))

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            response = await own_client.post(url, json=body, headers=headers)
    else:
        response = await client.post(url, json=body, headers=headers)

    raw = response.text
    if response.status_code >= 400:
        raise ApiError(_error_message(response.status_code, raw), raw)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ApiError(f"Malformed API response: {exc}", raw)

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    if not content:
        raise ApiError("Empty Content", raw)

    return safe_json_parse(content, context)


async def extract_products_from_text(
    full_text: str,
    api_key: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[ParsedProduct]:
    key = resolve_api_key(api_key)
    logger.info("[Extraction] Sending full text length: %s to model.", len(full_text))

    parsed = await _chat_completion(
        EXTRACT_PROMPT,
        full_text,
        EXTRACT_JSON_SCHEMA,
        key,
        "ExtractSingleShot",
        client=client,
        max_tokens=100000,
    )
    raw_products = parsed.get("products") if isinstance(parsed, dict) else None
    try:
        products = [ParsedProduct.model_validate(p) for p in raw_products or []]
    except ValidationError as exc:
        raise ApiError(f"Unexpected product record: {exc}", json.dumps(parsed, ensure_ascii=False))
    return normalize_product_data(products)


async def rename_product_names(
    names: list[str],
    api_key: str | None = None,
    custom_prompt: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[RenameResult]:
    key = resolve_api_key(api_key)
    unique_names = _dedupe(names)
    if not unique_names:
        return []

    parsed = await _chat_completion(
        custom_prompt or RENAME_PROMPT,
        json.dumps({"names": unique_names}, ensure_ascii=False),
        RENAME_JSON_SCHEMA,
        key,
        "Rename",
        client=client,
    )
    items = parsed.get("renamed_list") if isinstance(parsed, dict) else None
    try:
        return [RenameResult.model_validate(item) for item in items or []]
    except ValidationError as exc:
        raise ApiError(f"Unexpected rename record: {exc}", json.dumps(parsed, ensure_ascii=False))


async def optimize_sku_specs(
    specs: list[str],
    api_key: str | None = None,
    custom_prompt: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[SpecOptimizeResult]:
    key = resolve_api_key(api_key)
    unique_specs = _dedupe(specs)
    if not unique_specs:
        return []

    parsed = await _chat_completion(
        custom_prompt or SKU_OPTIMIZE_PROMPT,
        json.dumps({"specs": unique_specs}, ensure_ascii=False),
        SKU_OPTIMIZE_JSON_SCHEMA,
        key,
        "SkuOptimize",
        client=client,
    )
    items = parsed.get("optimized_list") if isinstance(parsed, dict) else None
    try:
        return [SpecOptimizeResult.model_validate(item) for item in items or []]
    except ValidationError as exc:
        raise ApiError(f"Unexpected spec record: {exc}", json.dumps(parsed, ensure_ascii=False))
