class CacheKeys:
    """Centralized Redis key management"""

    # Sessions
    CUSTOMER_SESSION = "customer_session:{session_token}"

    # Orders
    ORDER_UPDATES = "order_updates:{order_id}"
