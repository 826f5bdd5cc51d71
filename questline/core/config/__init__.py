"""
Configuration subsystem for Questline.

Static configuration is loaded from environment variables (with .env
support) when this package is imported.

Usage
-----
```python
from questline.core.config import Config

db_url = Config.DATABASE_URL
boundary_hour = Config.DAY_BOUNDARY_HOUR

if Config.is_production():
    logger.info("Running in production mode")
```
"""

from .config import Config, Environment

__all__ = ["Config", "Environment"]
