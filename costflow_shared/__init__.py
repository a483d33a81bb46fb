"""
Shared modules for the CostFlow backend.

STRUCTURE:
- costflow_shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Allocation methods, variance classes, limits

- costflow_shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and log filter

- costflow_shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input validation helpers
  - money.py: Presentation rounding

IMPORT EXAMPLES:
    from costflow_shared.infrastructure.db import get_db, safe_commit
    from costflow_shared.config.settings import settings
    from costflow_shared.config.constants import AllocationMethod
    from costflow_shared.utils.exceptions import NotFoundError, InvalidInputError
"""
