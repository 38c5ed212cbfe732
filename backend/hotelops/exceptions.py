"""
业务异常定义
服务层抛出，路由层统一映射为 HTTP 状态码
"""


class HotelOpsError(Exception):
    """所有业务异常的基类"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HotelOpsError):
    """输入不合法：区间错误、空明细、负数价格/数量"""

    status_code = 400


class NotFoundError(HotelOpsError):
    """引用的房间/商品/订单/供应商不存在"""

    status_code = 404


class ConflictError(HotelOpsError):
    """房间时段冲突、非法状态转换、并发写冲突"""

    status_code = 409


class StateError(HotelOpsError):
    """对已处于终态的实体执行操作"""

    status_code = 409
