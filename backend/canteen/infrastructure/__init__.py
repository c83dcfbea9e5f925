"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with error mapping to CanteenError subclasses

Design Decisions:
    - Thin wrappers over the Razorpay and Cloudinary SDKs keep SDK types out of routes
"""
