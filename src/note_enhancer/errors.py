from __future__ import annotations


class ContentTooLargeError(Exception):
    """估算 token 数超过模型输入上限，在调用远程模型之前拒绝。"""

    def __init__(self, estimated_tokens: int, max_tokens: int) -> None:
        super().__init__(f"estimated {estimated_tokens} tokens exceeds ceiling (max {max_tokens} characters)")
        self.estimated_tokens = estimated_tokens
        # 已按同一比例换算回字符数，便于展示
        self.max_tokens = max_tokens


class ProviderFault(Exception):
    """LLM 服务端故障的基类，携带原始状态码与错误码（如有）。"""

    def __init__(self, message: str = "", *, status_code: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class RateLimitedFault(ProviderFault):
    """服务端明确返回了限流错误码。"""


class CapacityExceededFault(ProviderFault):
    """服务端返回 429 但没有限流错误码。"""


class TransientFault(ProviderFault):
    """连接失败、超时或 5xx。"""


class UnknownFault(ProviderFault):
    pass
