"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Multi-step rules live in services/ or core/, not in the route body
"""
