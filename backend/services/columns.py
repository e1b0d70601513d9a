from enum import Enum

STATUS_COLUMN = "状态"

PRODUCT_NAME = "商品名称"
PRODUCT_PRICE = "商品价格"
PRODUCT_STOCK = "商品库存"
PRODUCT_CODE = "商品商家编码"
PRODUCT_IMAGES = "商品主图"
PRODUCT_DETAIL = "商品详情"
PRODUCT_CATEGORY = "商品类目"
PRODUCT_SELLING_POINTS = "商品卖点"
SKU_SPEC = "SKU规格"
SKU_PRICE = "SKU价格"
SKU_STOCK = "SKU库存"
SKU_CODE = "SKU商家编码"
SKU_IMAGE = "SKU主规格图"

# Bulk-upload template order. The status pseudo-column is never exported.
HEADERS = [
    STATUS_COLUMN,
    "商品名称", "商品价格", "商品拼单价", "商品划线价", "商品成本价", "商品库存", "商品重量",
    "长", "宽", "高", "商品商家编码", "商品条形码",
    "SKU规格", "SKU划线价", "SKU价格", "SKU拼单价", "SKU成本价", "SKU库存", "SKU重量", "SKU商家编码", "SKU条形码",
    "商品主图", "SKU主规格图", "商品详情", "商品类目", "商品分组", "商品属性", "商品卖点",
    "透明素材图", "商品竖图", "商品长图", "主图视频",
]

DATA_COLUMNS = [h for h in HEADERS if h != STATUS_COLUMN]
DATA_COLUMN_SET = frozenset(DATA_COLUMNS)

# Headers that must all be present for a grid row to count as the header row.
REQUIRED_HEADER_KEYS = (PRODUCT_NAME, PRODUCT_PRICE)

PRODUCT_PREFIX = "商品"
PRODUCT_ONLY_COLUMNS = frozenset({"长", "宽", "高", "主图视频", "透明素材图"})

# Editing these invalidates a previous verification.
CRITICAL_COLUMNS = frozenset({PRODUCT_NAME, SKU_SPEC})

NUMERIC_FIELDS = frozenset({
    "商品价格", "商品拼单价", "商品划线价", "商品成本价", "商品库存", "商品重量",
    "长", "宽", "高",
    "SKU划线价", "SKU价格", "SKU拼单价", "SKU成本价", "SKU库存", "SKU重量",
})

HTML_COLUMNS = frozenset({PRODUCT_DETAIL})
IMAGE_COLUMNS = frozenset({"商品主图", "SKU主规格图", "透明素材图", "商品竖图", "商品长图"})

HEADER_INSTRUCTIONS = {
    "商品名称": "必填。若有多个SKU，一行一个SKU，商品级的信息需重复填写。",
    "商品价格": "<当前售价> 若无多个SKU则必填；若有多个SKU则不填（会默认改用SKU未划线价最低的）。",
    "商品拼单价": "若无多个SKU则选填；若有多个SKU则不填（会默认改用SKU拼单价最低的）。",
    "商品划线价": "<建议零售价/吊牌价/市场价> 选填。",
    "商品成本价": "无多个SKU则选填；若有多个SKU则不填。",
    "商品库存": "<SKU总库存> 若无多个SKU则选填；若有多个SKU则不填（会默认改用SKU库存之和）。",
    "商品重量": "<单位Kg，不小于0.001> 若无多个SKU则选填；若有多个SKU则不填。",
    "长": "<单位mm，大于0的整数>",
    "宽": "<单位mm，大于0的整数>",
    "高": "<单位mm，大于0的整数>",
    "商品商家编码": "<ERP等商家系统中的编码> 选填。",
    "商品条形码": "选填。",
    "SKU规格": "规格名+英文冒号+规格值；多维规格之间加英文分号（例如 颜色:红;尺码:L）。若有多个SKU则必填；若无多个SKU则不填。",
    "SKU划线价": "若有多个SKU则选填；若无多个SKU则不填。",
    "SKU价格": "<当前售价> 若有多个SKU则必填；若无多个SKU则不填。",
    "SKU拼单价": "若有多个SKU则选填；若无多个SKU则不填。",
    "SKU成本价": "选填。",
    "SKU库存": "选填。",
    "SKU重量": "<单位Kg，不小于0.001> 若有多个SKU则选填；若无多个SKU则不填。",
    "SKU商家编码": "<ERP系统中的SKU编码> 若有多个SKU则选填；若无多个SKU则不填。",
    "SKU条形码": "选填。",
    "商品主图": "选填。多个网络图片链接之间加英文逗号。",
    "SKU主规格图": "若有多个SKU，则选填。多个网络图片链接之间加英文逗号。",
    "商品详情": "选填。详情图文html源码。",
    "商品类目": "<行业类目> 上级类目+两个英文大于号+下级类目。选填。",
    "商品分组": "上级分组+两个英文大于号+下级分组，最大支持2级分组，多个分组之间加英文逗号。选填。",
    "商品属性": "属性名+英文冒号+属性值，多组属性之间加用英文分号。选填。",
    "商品卖点": "选填。",
    "透明素材图": "选填 (多个网络图片链接之间加英文逗号)。",
    "商品竖图": "选填 (多个网络图片链接之间加英文逗号)。",
    "商品长图": "<商品活动图/商品3:4主图>，选填 (多个网络图片链接之间加英文逗号)。",
    "主图视频": "选填 (填写可访问的URL)。",
}


class FieldScope(str, Enum):
    PRODUCT = "product"
    SKU = "sku"


def field_scope(column: str) -> FieldScope:
    """
    Product-scope values are shared by every variant row of a product;
    everything else belongs to a single SKU.
    """
    if column.startswith(PRODUCT_PREFIX) or column in PRODUCT_ONLY_COLUMNS:
        return FieldScope.PRODUCT
    return FieldScope.SKU


def resets_verification(column: str) -> bool:
    return column in CRITICAL_COLUMNS


def blank_cells() -> dict[str, str]:
    return {col: "" for col in DATA_COLUMNS}
