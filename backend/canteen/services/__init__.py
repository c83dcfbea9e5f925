"""Services Layer — multi-step operations over the database and gateways.

Invariants:
    - Services raise CanteenError subclasses; they never build HTTP responses
    - Pure decisions are delegated to core/
"""
