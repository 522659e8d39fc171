import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from keydelivery.exceptions import DocumentWriteError
from keydelivery.schemas import CreatedApiKey
from keydelivery.timeutils import to_iso_timestamp

logger = logging.getLogger(__name__)

DEFAULT_TUTORIAL_URL = "http://106.74.22.5:12350"

STANDARD_TEMPLATE = """Hi，您的订单已发货！

【订单号】
{id}

【账号信息】
卡号：{name}
密码：{api_key}

【使用教程】
教程地址：{tutorial_url}（请复制到浏览器打开，内含详细使用方法和配置教程）

【关于退款】
如果您改变主意不想要了，请不要使用卡密，也不要点击【申请退款】。

正确退款方式：
请直接在订单里留言"退款"，客服上线后会为您手动关闭订单并退款。

【重要提示】
- 卡密（API Key）为虚拟商品，一旦使用，无法退换
- 请妥善保管您的API Key，不要泄露给他人
- 使用期限为一周，20美元用量，不限次数
- 遇到问题请及时联系客服

感谢惠顾，期待与您再次相遇！"""

CONDENSED_TEMPLATE = """Hi，您的订单已发货！

订单号：{id}
卡号：{name}
密码：{api_key}

教程地址：{tutorial_url}（请复制到浏览器打开，内含详细使用方法和配置教程）

退款说明：
如需退款，请勿使用卡密，直接在订单留言"退款"，客服会为您处理。

注意：虚拟商品一旦使用无法退换，请确认后再使用。

感谢惠顾！"""

VARIABLE_NOTES = """## 变量说明

发货时需要替换的变量：
- `[订单号]`：闲鱼订单编号
- `[编号]`：卡号序号，用于区分不同订单
- `[API_KEY]`：生成的实际API Key（cr_开头）"""

CONFIGURATION_NOTES = """## 配置说明

如果使用自己的域名，需要修改教程地址为：
- `http://你的域名/admin-next/stats`
- 或 `http://IP地址:端口/admin-next/stats`

例如：
- `http://104.62.94.44:3000/admin-next/stats`
- `http://www.aiclaude.top/admin-next/stats`"""

FENCE = "```"


def render_delivery_document(api_key: CreatedApiKey, tutorial_url: str = DEFAULT_TUTORIAL_URL) -> str:
    """
    Renders the customer delivery document for a created key.

    The document holds a standard and a condensed copy-paste block, each
    fenced so marketplace formatting is preserved, followed by the static
    variable and configuration notes.
    """
    fields = {
        "id": api_key.id,
        "name": api_key.name,
        "api_key": api_key.api_key,
        "tutorial_url": tutorial_url
    }

    sections = [
        "# 发货信息",
        "## 标准发货信息",
        f"{FENCE}\n{STANDARD_TEMPLATE.format(**fields)}\n{FENCE}",
        "## 简洁版发货信息",
        f"{FENCE}\n{CONDENSED_TEMPLATE.format(**fields)}\n{FENCE}",
        VARIABLE_NOTES,
        CONFIGURATION_NOTES
    ]
    return "\n\n".join(sections) + "\n"


def save_delivery_document(content: str, output_path: Path) -> Path:
    """Writes the document, creating parent directories and overwriting any existing file."""
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write delivery document {output_path}: {e}")
        raise DocumentWriteError(f"Failed to write delivery document {output_path}: {e}") from e

    logger.info(f"Delivery document saved: {output_path}")
    return output_path


def record_created_key(api_key: CreatedApiKey, ledger_path: Path, document_path: Path) -> None:
    """
    Appends a JSON line for a created key so it can be reconciled if the
    document is never written. The secret key itself is not recorded.
    """
    entry = {
        "id": api_key.id,
        "name": api_key.name,
        "expiresAt": api_key.expires_at,
        "totalCostLimit": api_key.total_cost_limit,
        "document": str(document_path),
        "recordedAt": to_iso_timestamp(datetime.now(timezone.utc))
    }

    ledger_path = Path(ledger_path)
    try:
        ledger_path.parent.mkdir(parents=True, exist_ok=True)
        with ledger_path.open("a", encoding="utf-8") as ledger:
            ledger.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except OSError as e:
        logger.error(f"Failed to record API key {api_key.id} in {ledger_path}: {e}")
        raise DocumentWriteError(f"Failed to record API key {api_key.id} in {ledger_path}: {e}") from e

    logger.info(f"Recorded API key {api_key.id} in {ledger_path}")
