"""
드랍쉬핑 카탈로그 연동 엔진
공급사 상품 수집, 재고 동기화, 주문 전달
"""

__version__ = "1.0.0"
