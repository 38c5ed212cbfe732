"""
hotelops - 酒店事务核心
房间预订、餐饮/采购订单聚合、库存台账
"""

__version__ = "0.1.0"
