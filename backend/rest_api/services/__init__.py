"""
Services module for business logic.

- domain/: Application services (business logic, transaction owners)
- events/: Real-time event dispatch after commit

Usage:
    from rest_api.services.domain import OrderLedger
    ledger = OrderLedger(db)
    order, opened_table = ledger.create_order(table_id, staff_id, items)
"""
